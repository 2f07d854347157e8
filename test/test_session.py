#!/usr/bin/python3 -u
# SPDX-License-Identifier: BSD-2
import unittest
from unittest import mock

from tpm2_tools import ESYS_TR, PasswordSession


class PasswordSessionTest(unittest.TestCase):
    def test_empty_auth(self):
        ectx = mock.Mock()
        shandle = PasswordSession().get_shandle(ectx, ESYS_TR.OWNER)
        self.assertEqual(shandle, ESYS_TR.PASSWORD)
        ectx.tr_set_auth.assert_called_once_with(ESYS_TR.OWNER, b"")

    def test_str_auth(self):
        ectx = mock.Mock()
        PasswordSession("ownerpass").get_shandle(ectx, ESYS_TR.ENDORSEMENT)
        ectx.tr_set_auth.assert_called_once_with(ESYS_TR.ENDORSEMENT, b"ownerpass")

    def test_failure_propagates(self):
        ectx = mock.Mock()
        ectx.tr_set_auth.side_effect = RuntimeError("bad context")
        with self.assertRaises(RuntimeError):
            PasswordSession(b"x").get_shandle(ectx, ESYS_TR.OWNER)


if __name__ == "__main__":
    unittest.main()
