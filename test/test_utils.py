#!/usr/bin/python3 -u
# SPDX-License-Identifier: BSD-2
import unittest

from tpm2_tools import TSS2_Exception, TPM2_RC, TSS2_RC, str_to_uint32
from tpm2_tools.internal.utils import _chkrc


class StrToUint32Test(unittest.TestCase):
    def test_bases(self):
        self.assertEqual(str_to_uint32("42"), 42)
        self.assertEqual(str_to_uint32("0x2A"), 42)
        self.assertEqual(str_to_uint32("0X2a"), 42)
        self.assertEqual(str_to_uint32("052"), 42)
        self.assertEqual(str_to_uint32("0"), 0)
        self.assertEqual(str_to_uint32("0xFFFFFFFF"), 0xFFFFFFFF)
        self.assertEqual(str_to_uint32("4294967295"), 0xFFFFFFFF)

    def test_bad(self):
        for value in (
            "",
            "0x",
            "0x1G",
            "08",
            "12a",
            "+1",
            "-1",
            " 1",
            "1_000",
            "4294967296",
            "0x100000000",
        ):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    str_to_uint32(value)


class ChkrcTest(unittest.TestCase):
    def test_success(self):
        _chkrc(TPM2_RC.SUCCESS)

    def test_raises(self):
        with self.assertRaises(TSS2_Exception) as e:
            _chkrc(TPM2_RC.NV_LOCKED)
        self.assertEqual(e.exception.rc, TPM2_RC.NV_LOCKED)

    def test_acceptable(self):
        _chkrc(TSS2_RC.TCTI_RC_TRY_AGAIN, acceptable=TSS2_RC.TCTI_RC_TRY_AGAIN)
        _chkrc(TPM2_RC.RETRY, acceptable=[TPM2_RC.YIELDED, TPM2_RC.RETRY])
        with self.assertRaises(TSS2_Exception):
            _chkrc(TPM2_RC.CANCELED, acceptable=[TPM2_RC.RETRY])


if __name__ == "__main__":
    unittest.main()
