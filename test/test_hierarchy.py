#!/usr/bin/python3 -u
# SPDX-License-Identifier: BSD-2
import unittest
from unittest import mock

from tpm2_tools import *

NAMES = (
    ("owner", TPM2_RH.OWNER, TPM2_HIERARCHY_FLAGS.O),
    ("platform", TPM2_RH.PLATFORM, TPM2_HIERARCHY_FLAGS.P),
    ("endorsement", TPM2_RH.ENDORSEMENT, TPM2_HIERARCHY_FLAGS.E),
    ("null", TPM2_RH.NULL, TPM2_HIERARCHY_FLAGS.N),
    ("lockout", TPM2_RH.LOCKOUT, TPM2_HIERARCHY_FLAGS.L),
)


class HierarchyFromOptargTest(unittest.TestCase):
    def test_every_prefix(self):
        for name, handle, flag in NAMES:
            for i in range(1, len(name) + 1):
                prefix = name[:i]
                with self.subTest(prefix=prefix):
                    self.assertEqual(hierarchy_from_optarg(prefix, flag), handle)
                    self.assertEqual(
                        hierarchy_from_optarg(prefix, TPM2_HIERARCHY_FLAGS.ALL), handle
                    )

    def test_single_letters(self):
        self.assertEqual(hierarchy_from_optarg("o"), TPM2_RH.OWNER)
        self.assertEqual(hierarchy_from_optarg("p"), TPM2_RH.PLATFORM)
        self.assertEqual(hierarchy_from_optarg("e"), TPM2_RH.ENDORSEMENT)
        self.assertEqual(hierarchy_from_optarg("n"), TPM2_RH.NULL)
        self.assertEqual(hierarchy_from_optarg("l"), TPM2_RH.LOCKOUT)

    def test_returns_friendly_type(self):
        h = hierarchy_from_optarg("owner")
        self.assertIsInstance(h, TPM2_RH)
        self.assertEqual(str(h), "owner")

    def test_not_supported(self):
        messages = {
            "owner": "Owner hierarchy not supported by this command.",
            "platform": "Platform hierarchy not supported by this command.",
            "endorsement": "Endorsement hierarchy not supported by this command.",
            "null": "NULL hierarchy not supported by this command.",
            "lockout": "Permanent handle lockout not supported by this command.",
        }
        for name, handle, flag in NAMES:
            with self.subTest(name=name):
                with self.assertRaises(HierarchyNotSupportedError) as e:
                    hierarchy_from_optarg(name, TPM2_HIERARCHY_FLAGS.ALL ^ flag)
                self.assertEqual(e.exception.hierarchy, handle)
                self.assertEqual(str(e.exception), messages[name])

    def test_not_supported_by_number(self):
        with self.assertRaises(HierarchyNotSupportedError) as e:
            hierarchy_from_optarg("0x40000001", TPM2_HIERARCHY_FLAGS.E)
        self.assertEqual(e.exception.hierarchy, TPM2_RH.OWNER)

        self.assertEqual(
            hierarchy_from_optarg("0x4000000B", TPM2_HIERARCHY_FLAGS.E),
            TPM2_RH.ENDORSEMENT,
        )

    def test_empty(self):
        for flags in (TPM2_HIERARCHY_FLAGS.NONE, TPM2_HIERARCHY_FLAGS.ALL):
            with self.assertRaises(HierarchyEmptyError):
                hierarchy_from_optarg("", flags)
            with self.assertRaises(HierarchyEmptyError):
                hierarchy_from_optarg(None, flags)

    def test_generic_handle_not_filtered(self):
        for flags in (TPM2_HIERARCHY_FLAGS.NONE, TPM2_HIERARCHY_FLAGS.ALL):
            self.assertEqual(hierarchy_from_optarg("0x81010007", flags), 0x81010007)
            self.assertEqual(hierarchy_from_optarg("2164326407", flags), 0x81010007)
            self.assertEqual(hierarchy_from_optarg("020", flags), 16)
            self.assertEqual(hierarchy_from_optarg("0", flags), 0)

    def test_invalid(self):
        for value in ("ownersuffix", "owners", "x", "0x", "-1", "0x100000000", "09"):
            with self.subTest(value=value):
                with self.assertRaises(InvalidHandleError) as e:
                    hierarchy_from_optarg(value)
                self.assertEqual(e.exception.value, value)
                self.assertEqual(
                    str(e.exception),
                    f'Incorrect handle value, got: "{value}", expected [o|p|e|n|l] or a handle number',
                )

    def test_errors_are_value_errors(self):
        for exc in (HierarchyEmptyError, InvalidHandleError, HierarchyNotSupportedError):
            self.assertTrue(issubclass(exc, HierarchyParseError))
            self.assertTrue(issubclass(exc, ValueError))

    def test_to_esys_tr(self):
        self.assertEqual(tpmi_hierarchy_to_esys_tr(TPM2_RH.OWNER), ESYS_TR.OWNER)
        self.assertEqual(tpmi_hierarchy_to_esys_tr(TPM2_RH.PLATFORM), ESYS_TR.PLATFORM)
        self.assertEqual(
            tpmi_hierarchy_to_esys_tr(TPM2_RH.ENDORSEMENT), ESYS_TR.ENDORSEMENT
        )
        self.assertEqual(tpmi_hierarchy_to_esys_tr(TPM2_RH.NULL), ESYS_TR.NULL)
        self.assertEqual(tpmi_hierarchy_to_esys_tr(TPM2_RH.LOCKOUT), ESYS_TR.LOCKOUT)
        self.assertEqual(tpmi_hierarchy_to_esys_tr(0x81010007), ESYS_TR.NONE)


class HierarchyCreatePrimaryTest(unittest.TestCase):
    def setUp(self):
        self.ectx = mock.MagicMock()
        self.ectx.create_primary.return_value = (
            0x4001,
            "public",
            "creation data",
            b"\x01\x02",
            "ticket",
        )

    def test_create_primary(self):
        objdata = HierarchyPData(hierarchy_from_optarg("e"))
        obj = hierarchy_create_primary(self.ectx, None, objdata)

        self.ectx.tr_set_auth.assert_called_once_with(ESYS_TR.ENDORSEMENT, b"")
        self.ectx.create_primary.assert_called_once_with(
            None,
            "rsa2048",
            primary_handle=ESYS_TR.ENDORSEMENT,
            session1=ESYS_TR.PASSWORD,
        )
        self.assertIs(objdata.out, obj)
        self.assertEqual(obj.handle, 0x4001)
        self.assertEqual(obj.public, "public")
        self.assertEqual(obj.creation_data, "creation data")
        self.assertEqual(obj.creation_hash, b"\x01\x02")
        self.assertEqual(obj.creation_ticket, "ticket")

        objdata.free()
        self.assertIsNone(objdata.out)

    def test_create_primary_inputs(self):
        objdata = HierarchyPData(
            TPM2_RH.OWNER,
            in_sensitive="sensitive",
            in_public="ecc256",
            outside_info=b"outside",
            creation_pcr="sha256:0,1",
        )
        hierarchy_create_primary(self.ectx, PasswordSession("secret"), objdata)

        self.ectx.tr_set_auth.assert_called_once_with(ESYS_TR.OWNER, b"secret")
        self.ectx.create_primary.assert_called_once_with(
            "sensitive",
            "ecc256",
            primary_handle=ESYS_TR.OWNER,
            session1=ESYS_TR.PASSWORD,
            outside_info=b"outside",
            creation_pcr="sha256:0,1",
        )

    def test_session_failure(self):
        session = mock.MagicMock()
        session.get_shandle.side_effect = TSS2_Exception(TSS2_RC.ESYS_RC_BAD_TR)
        objdata = HierarchyPData(TPM2_RH.OWNER)

        with self.assertLogs("tpm2_tools.hierarchy", level="ERROR") as logs:
            with self.assertRaises(TSS2_Exception) as e:
                hierarchy_create_primary(self.ectx, session, objdata)

        self.assertEqual(e.exception.rc, TSS2_RC.ESYS_RC_BAD_TR)
        self.assertIn("Couldn't get shandle for hierarchy", logs.output[0])
        session.get_shandle.assert_called_once_with(self.ectx, ESYS_TR.OWNER)
        self.ectx.create_primary.assert_not_called()
        self.assertIsNone(objdata.out)

    def test_tpm_failure(self):
        rc = TPM2_RC.HIERARCHY + TPM2_RC.H + TPM2_RC.RC1
        self.ectx.create_primary.side_effect = TSS2_Exception(rc)
        objdata = HierarchyPData(TPM2_RH.PLATFORM)

        with self.assertRaises(TSS2_Exception) as e:
            hierarchy_create_primary(self.ectx, None, objdata)

        self.assertEqual(e.exception.rc, rc)
        self.assertEqual(e.exception.handle, 1)
        self.assertIsNone(objdata.out)


if __name__ == "__main__":
    unittest.main()
