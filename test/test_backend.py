#!/usr/bin/python3 -u
# SPDX-License-Identifier: BSD-2
import importlib.util
import unittest
from unittest import mock

from tpm2_tools import *

HAVE_PYTSS = importlib.util.find_spec("tpm2_pytss") is not None


@unittest.skipIf(not HAVE_PYTSS, "tpm2-pytss is not installed")
class ESAPIBackendTest(unittest.TestCase):
    def setUp(self):
        from tpm2_tools import backend

        self.backend = backend
        patcher = mock.patch.object(backend, "ESAPI")
        self.ESAPI = patcher.start()
        self.addCleanup(patcher.stop)

    def test_default_tcti(self):
        self.backend.ESAPIBackend()
        self.ESAPI.assert_called_once_with(self.backend.config.TCTI)

    def test_explicit_tcti(self):
        self.backend.ESAPIBackend("mssim:port=2321")
        self.ESAPI.assert_called_once_with("mssim:port=2321")

    def test_translates_exceptions(self):
        import tpm2_pytss

        ectx = self.ESAPI.return_value
        ectx.create_primary.side_effect = tpm2_pytss.TSS2_Exception(TPM2_RC.NV_LOCKED)

        be = self.backend.ESAPIBackend("mssim")
        with self.assertRaises(TSS2_Exception) as e:
            be.create_primary(None, "ecc256", primary_handle=ESYS_TR.OWNER)
        self.assertEqual(e.exception.rc, TPM2_RC.NV_LOCKED)
        self.assertEqual(str(e.exception), "tpm:error(2.0): NV access locked")
        self.assertIsInstance(e.exception.__cause__, tpm2_pytss.TSS2_Exception)

    def test_create_primary_through_backend(self):
        ectx = self.ESAPI.return_value
        ectx.create_primary.return_value = (0x40000FF, None, None, None, None)

        with self.backend.ESAPIBackend("mssim") as be:
            objdata = HierarchyPData(TPM2_RH.ENDORSEMENT)
            hierarchy_create_primary(be, None, objdata)

        ectx.tr_set_auth.assert_called_once_with(ESYS_TR.ENDORSEMENT, b"")
        self.assertEqual(objdata.out.handle, 0x40000FF)
        ectx.close.assert_called_once_with()


if __name__ == "__main__":
    unittest.main()
