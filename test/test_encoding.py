#!/usr/bin/python3 -u
# SPDX-License-Identifier: BSD-2
import unittest

import yaml

from tpm2_tools import *
from tpm2_tools.encoding import rc_to_dict, rc_to_yaml, primary_to_dict, primary_to_yaml


class EncodingTest(unittest.TestCase):
    def test_rc_to_dict(self):
        self.assertEqual(
            rc_to_dict(TPM2_RC.NV_LOCKED),
            {
                "rc": "0x148",
                "layer": 0,
                "layer-name": "tpm",
                "error": "0x148",
                "message": "tpm:error(2.0): NV access locked",
                "outcome": "general_error",
            },
        )

    def test_rc_to_yaml(self):
        doc = yaml.safe_load(rc_to_yaml(TSS2_RC.TCTI_RC_IO_ERROR))
        self.assertEqual(doc["rc"], "0xA000A")
        self.assertEqual(doc["layer"], 10)
        self.assertEqual(doc["layer-name"], "tcti")
        self.assertEqual(doc["error"], "0xA")
        self.assertEqual(doc["message"], "tcti:IO failure")
        self.assertEqual(doc["outcome"], "tcti_error")

    def test_rc_to_yaml_field_order(self):
        lines = rc_to_yaml(TPM2_RC.SUCCESS).splitlines()
        self.assertEqual(
            [l.split(":")[0] for l in lines],
            ["rc", "layer", "layer-name", "error", "message", "outcome"],
        )

    def test_rc_with_registry(self):
        registry = ErrorLayerRegistry()
        registry.register(42, "app", lambda error: "widget missing")
        rc = (42 << 16) | 7
        doc = yaml.safe_load(rc_to_yaml(rc, registry))
        self.assertEqual(doc["layer-name"], "app")
        self.assertEqual(doc["message"], "app:widget missing")

    def test_primary(self):
        objdata = HierarchyPData(TPM2_RH.OWNER)
        objdata.out = PrimaryObject(0x40000FF, None, None, b"\xde\xad", None)
        self.assertEqual(
            primary_to_dict(objdata),
            {"hierarchy": "owner", "handle": "0x40000FF", "creation-hash": "dead"},
        )
        doc = yaml.safe_load(primary_to_yaml(objdata))
        self.assertEqual(doc["hierarchy"], "owner")

    def test_primary_generic_handle(self):
        objdata = HierarchyPData(0x81010007)
        objdata.out = PrimaryObject(0x1, None, None, None, None)
        self.assertEqual(
            primary_to_dict(objdata), {"hierarchy": "0x81010007", "handle": "0x1"}
        )

    def test_primary_not_created(self):
        with self.assertRaises(ValueError):
            primary_to_dict(HierarchyPData(TPM2_RH.NULL))


if __name__ == "__main__":
    unittest.main()
