# SPDX-License-Identifier: BSD-2
"""
YAML output of the tools, in the style tpm2-tools prints its results.
"""
from typing import Optional

import yaml

from .constants import ESYS_TR, TPM2_RH
from .error import (
    ErrorLayerRegistry,
    default_registry,
    tool_rc_from_tpm,
    tpm2_error_get,
    tpm2_error_layer_get,
)
from .hierarchy import HierarchyPData, tpmi_hierarchy_to_esys_tr


def rc_to_dict(rc: int, registry: Optional[ErrorLayerRegistry] = None) -> dict:
    """Breaks a return code down into its fields and its decoded message.

    Args:
        rc (int): The return code.
        registry (ErrorLayerRegistry): The registry to decode with, defaults to
            the process wide registry.
    """
    if registry is None:
        registry = default_registry()
    return {
        "rc": f"0x{rc:X}",
        "layer": tpm2_error_layer_get(rc),
        "layer-name": registry.layer_name(rc),
        "error": f"0x{tpm2_error_get(rc):X}",
        "message": registry.decode(rc),
        "outcome": str(tool_rc_from_tpm(rc)),
    }


def rc_to_yaml(rc: int, registry: Optional[ErrorLayerRegistry] = None) -> str:
    return yaml.safe_dump(rc_to_dict(rc, registry), sort_keys=False)


def primary_to_dict(objdata: HierarchyPData) -> dict:
    if objdata.out is None:
        raise ValueError("no primary object has been created")

    if tpmi_hierarchy_to_esys_tr(objdata.hierarchy) != ESYS_TR.NONE:
        hierarchy = str(TPM2_RH(objdata.hierarchy))
    else:
        hierarchy = f"0x{objdata.hierarchy:X}"

    ev = {"hierarchy": hierarchy, "handle": f"0x{int(objdata.out.handle):X}"}
    if objdata.out.creation_hash is not None:
        ev["creation-hash"] = bytes(objdata.out.creation_hash).hex()
    return ev


def primary_to_yaml(objdata: HierarchyPData) -> str:
    return yaml.safe_dump(primary_to_dict(objdata), sort_keys=False)
