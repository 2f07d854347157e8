# SPDX-License-Identifier: BSD-2
from .constants import *
from .TSS2_Exception import TSS2_Exception
from .error import (
    ErrorLayerRegistry,
    default_registry,
    register_tss2_layers,
    tool_rc_from_tpm,
    tpm2_error_get,
    tpm2_error_layer_get,
    tpm2_error_set_handler,
    tpm2_error_str,
)
from .hierarchy import (
    HierarchyEmptyError,
    HierarchyNotSupportedError,
    HierarchyParseError,
    HierarchyPData,
    InvalidHandleError,
    PrimaryObject,
    hierarchy_create_primary,
    hierarchy_from_optarg,
    tpmi_hierarchy_to_esys_tr,
)
from .session import PasswordSession
from .tool import run_tool, tool_main
from .utils import str_to_uint32
