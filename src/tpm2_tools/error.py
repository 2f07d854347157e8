# SPDX-License-Identifier: BSD-2
"""
Decoding of layered TSS2 return codes into operator readable strings.

A return code carries the layer that produced it in bits 16-23 and the layer
specific error in bits 0-15. Layers 0 (tpm), 8 (sys), 9 (mu) and 10 (tcti) are
decoded by built in handlers, other layers can be given a friendly name and a
decoder through an :class:`ErrorLayerRegistry`.
"""
import logging
import threading
from typing import Callable, Dict, Optional, Tuple

from .constants import TOOL_RC, TPM2_RC, TSS2_RC
from .internal import rcdecode

logger = logging.getLogger(__name__)

Decoder = Callable[[int], Optional[str]]

TPM2_ERROR_TSS2_RC_ERROR_MASK = 0xFFFF
TPM2_ERROR_TSS2_RC_LAYER_COUNT = int(TSS2_RC.RC_LAYER_MASK >> TSS2_RC.RC_LAYER_SHIFT)

_TPM_LAYER = int(TSS2_RC.TPM_RC_LAYER >> TSS2_RC.RC_LAYER_SHIFT)
_SYS_LAYER = int(TSS2_RC.SYS_RC_LAYER >> TSS2_RC.RC_LAYER_SHIFT)
_MU_LAYER = int(TSS2_RC.MU_RC_LAYER >> TSS2_RC.RC_LAYER_SHIFT)
_TCTI_LAYER = int(TSS2_RC.TCTI_RC_LAYER >> TSS2_RC.RC_LAYER_SHIFT)
_RESMGR_TPM_LAYER = int(TSS2_RC.RESMGR_TPM_RC_LAYER >> TSS2_RC.RC_LAYER_SHIFT)

_RESERVED_LAYERS: Dict[int, Tuple[str, Decoder]] = {
    _TPM_LAYER: ("tpm", rcdecode.tpm_decode),
    _SYS_LAYER: ("sys", rcdecode.sys_decode),
    _MU_LAYER: ("mu", rcdecode.mu_decode),
    _TCTI_LAYER: ("tcti", rcdecode.tcti_decode),
}

_MAX_NAME_LEN = 4


def tpm2_error_get(rc: int) -> int:
    """Returns the error bits (the low two octets) of a return code."""
    return int(rc) & TPM2_ERROR_TSS2_RC_ERROR_MASK


def tpm2_error_layer_get(rc: int) -> int:
    """Returns the layer number of a return code."""
    return (int(rc) & int(TSS2_RC.RC_LAYER_MASK)) >> int(TSS2_RC.RC_LAYER_SHIFT)


class ErrorLayerRegistry:
    """Friendly names and decoders for the non reserved return code layers.

    Registration is meant to happen at start up, before any concurrent
    :meth:`decode` calls. Writes are serialized and decode works on a
    snapshot of the entry, so a racing registration never yields a torn
    name/decoder pair.
    """

    def __init__(self):
        self._handlers: Dict[int, Tuple[str, Decoder]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def is_reserved(layer: int) -> bool:
        return layer in _RESERVED_LAYERS

    def register(self, layer: int, name: str, handler: Optional[Decoder]) -> bool:
        """Register or unregister a custom layer error handler.

        Args:
            layer (int): The layer to register the handler for, 0-255. The
                reserved layers 0 (tpm), 8 (sys), 9 (mu) and 10 (tcti) are
                refused.
            name (str): A friendly layer name of 1 to 4 characters.
            handler (Callable[[int], Optional[str]]): Called with the error
                bits of a return code. Returning None makes decode fall back to
                the hexadecimal value. None unregisters the layer, dropping its
                friendly name as well.

        Returns:
            True on success, False when the layer or name is refused.
        """
        if (
            not isinstance(layer, int)
            or not 0 <= layer <= TPM2_ERROR_TSS2_RC_LAYER_COUNT
        ):
            logger.warning(f"layer {layer} is out of range")
            return False

        if self.is_reserved(layer):
            logger.warning(f"layer {layer} is reserved for built in decoding")
            return False

        if not isinstance(name, str) or not name or len(name) > _MAX_NAME_LEN:
            logger.warning(
                f'layer name must be 1 to {_MAX_NAME_LEN} characters, got: "{name}"'
            )
            return False

        with self._lock:
            if handler is None:
                self._handlers.pop(layer, None)
                logger.debug(f"unregistered error layer {layer}")
            else:
                self._handlers[layer] = (name, handler)
                logger.debug(f'registered error layer {layer} as "{name}"')

        return True

    def unregister(self, layer: int, name: str) -> bool:
        return self.register(layer, name, None)

    def lookup(self, layer: int) -> Optional[Tuple[str, Decoder]]:
        """Returns the (name, decoder) entry for a layer, built in layers included."""
        entry = _RESERVED_LAYERS.get(layer)
        if entry is not None:
            return entry
        return self._handlers.get(layer)

    def layer_name(self, rc: int) -> str:
        layer = tpm2_error_layer_get(rc)
        entry = self.lookup(layer)
        return entry[0] if entry is not None else str(layer)

    def decode(self, rc: int) -> str:
        """Given a TSS2 return code, provides an error string in the format:
        <layer-name>:<layer-specific-msg>.

        The layer name is the friendly name of the layer, or when no handler is
        registered for it the layer number in decimal. An error field of zero
        always decodes to "success", otherwise the layer's handler decodes the
        error field, falling back to its hexadecimal value when the handler
        returns None or raises.

        Examples:
            tpm:error(2.0): NV access locked
            tpm:parameter(1):structure is the wrong size
            tcti:IO failure
            42:0x7
        """
        error = tpm2_error_get(rc)
        layer = tpm2_error_layer_get(rc)
        entry = self.lookup(layer)
        name = entry[0] if entry is not None else str(layer)

        if error == 0:
            return f"{name}:success"

        msg = None
        if entry is not None:
            try:
                msg = entry[1](error)
            except Exception as e:
                logger.warning(f"decoder for layer {layer} failed: {e!r}")
        if msg is None:
            msg = f"0x{error:X}"

        return f"{name}:{msg}"

    def __contains__(self, layer: int) -> bool:
        return self.lookup(layer) is not None


def register_tss2_layers(registry: ErrorLayerRegistry) -> None:
    """Registers the software layers of the TSS that are not decoded built in.

    Raises:
        RuntimeError: If the registry refuses one of the layers.
    """
    layers = (
        (TSS2_RC.FEATURE_RC_LAYER, "fapi", rcdecode.base_decode),
        (TSS2_RC.ESAPI_RC_LAYER, "esys", rcdecode.base_decode),
        (TSS2_RC.RESMGR_RC_LAYER, "rmt", rcdecode.base_decode),
        # the resource manager relays TPM codes
        (TSS2_RC.RESMGR_TPM_RC_LAYER, "rm", rcdecode.tpm_decode),
    )
    for layer, name, handler in layers:
        layer = int(layer >> TSS2_RC.RC_LAYER_SHIFT)
        if not registry.register(layer, name, handler):
            raise RuntimeError(f'failed to register TSS layer {layer} as "{name}"')


_default_registry = ErrorLayerRegistry()
register_tss2_layers(_default_registry)


def default_registry() -> ErrorLayerRegistry:
    """The process wide registry used by :class:`TSS2_Exception` messages."""
    return _default_registry


def tpm2_error_set_handler(layer: int, name: str, handler: Optional[Decoder]) -> bool:
    return _default_registry.register(layer, name, handler)


def tpm2_error_str(rc: int) -> str:
    return _default_registry.decode(rc)


_AUTH_ERRORS = frozenset(
    (
        TPM2_RC.AUTH_FAIL,
        TPM2_RC.BAD_AUTH,
        TPM2_RC.POLICY_FAIL,
        TPM2_RC.AUTH_MISSING,
        TPM2_RC.AUTH_TYPE,
        TPM2_RC.AUTH_UNAVAILABLE,
        TPM2_RC.REFERENCE_S0,
        TPM2_RC.REFERENCE_S1,
        TPM2_RC.REFERENCE_S2,
        TPM2_RC.REFERENCE_S3,
        TPM2_RC.REFERENCE_S4,
        TPM2_RC.REFERENCE_S5,
        TPM2_RC.REFERENCE_S6,
    )
)

_UNSUPPORTED_TPM_ERRORS = frozenset((TPM2_RC.COMMAND_CODE,))

_UNSUPPORTED_BASE_ERRORS = frozenset(
    (TSS2_RC.BASE_RC_NOT_IMPLEMENTED, TSS2_RC.BASE_RC_NOT_SUPPORTED)
)


def tool_rc_from_tpm(rc: int) -> TOOL_RC:
    """Flattens a TSS generated return code into a tool outcome.

    Args:
        rc (int): The return code to convert.

    Returns:
        The TOOL_RC suitable for the process exit code.
    """
    error = tpm2_error_get(rc)
    if error == 0:
        return TOOL_RC.SUCCESS

    layer = tpm2_error_layer_get(rc)
    if layer == _TCTI_LAYER:
        return TOOL_RC.TCTI_ERROR

    if layer in (_TPM_LAYER, _RESMGR_TPM_LAYER):
        if error & TPM2_RC.FMT1:
            error = TPM2_RC.FMT1 + (error & TPM2_RC.FMT1_ERROR_MASK)
        else:
            error &= 0xFFF
        if error in _AUTH_ERRORS:
            return TOOL_RC.AUTH_ERROR
        if error in _UNSUPPORTED_TPM_ERRORS:
            return TOOL_RC.UNSUPPORTED
        return TOOL_RC.GENERAL_ERROR

    if error in _UNSUPPORTED_BASE_ERRORS:
        return TOOL_RC.UNSUPPORTED

    return TOOL_RC.GENERAL_ERROR
