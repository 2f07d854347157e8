# SPDX-License-Identifier: BSD-2
"""
Static descriptions of the TCG defined return codes and the decoders for the
layers whose decoding is built in.

The TPM strings follow TPM 2.0 Part 2 "Structures" section 6.6, the TSS base
codes follow the TSS Overview and Common Structures specification.
"""
from typing import Dict, FrozenSet, Optional

from ..constants import TPM2_RC, TSS2_RC

# TPM format zero errors, indexed by the error number (bits 0-6) of a VER1 code
_FMT0_ERR_STRS: Dict[int, str] = {
    0x00: "TPM not initialized by TPM2_Startup or already initialized",
    0x01: "commands not being accepted because of a TPM failure",
    0x03: "improper use of a sequence handle",
    0x0B: "not currently used",
    0x19: "not currently used",
    0x20: "the command is disabled",
    0x21: "command failed because audit sequence required exclusivity",
    0x24: "authorization handle is not correct for command",
    0x25: "command requires an authorization session for handle and it is not present",
    0x26: "policy failure in math operation or an invalid authPolicy value",
    0x27: "PCR check fail",
    0x28: "PCR have changed since checked",
    0x2D: "for all commands other than TPM2_FieldUpgradeData(), this code indicates "
    "that the TPM is in field upgrade mode; for TPM2_FieldUpgradeData(), this code "
    "indicates that the TPM is not in field upgrade mode",
    0x2E: "context ID counter is at maximum",
    0x2F: "authValue or authPolicy is not available for selected entity",
    0x30: "a _TPM_Init and Startup(CLEAR) is required before the TPM can resume operation",
    0x31: "the protection algorithms (hash and symmetric) are not reasonably balanced. "
    "The digest size of the hash must be larger than the key size of the symmetric algorithm.",
    0x42: "command commandSize value is inconsistent with contents of the command buffer; "
    "either the size is not the same as the octets loaded by the hardware interface layer "
    "or the value is not large enough to hold a command header",
    0x43: "command code not supported",
    0x44: "the value of authorizationSize is out of range or the number of octets in the "
    "Authorization Area is greater than required",
    0x45: "use of an authorization session with a context command or another command "
    "that cannot have an authorization session",
    0x46: "NV offset+size is out of range",
    0x47: "Requested allocation size is larger than allowed",
    0x48: "NV access locked",
    0x49: "NV access authorization fails in command actions (this failure does not "
    "affect lockout.action)",
    0x4A: "an NV Index is used before being initialized or the state saved by "
    "TPM2_Shutdown(STATE) could not be restored",
    0x4B: "insufficient space for NV allocation",
    0x4C: "NV Index or persistent object already defined",
    0x50: "context in TPM2_ContextLoad() is not valid",
    0x51: "cpHash value already set or not correct for use",
    0x52: "handle for parent is not a valid parent",
    0x53: "some function needs testing.",
    0x54: "returned when an internal function cannot process a request due to an "
    "unspecified problem. This code is usually related to invalid parameters that are "
    "not properly filtered by the input unmarshaling code.",
    0x55: "the sensitive area did not unmarshal correctly after decryption",
}

# TPM format zero warnings, indexed by the error number of a WARN code
_FMT0_WARN_STRS: Dict[int, str] = {
    0x01: "gap for context ID is too large",
    0x02: "out of memory for object contexts",
    0x03: "out of memory for session contexts",
    0x04: "out of shared object/session memory or need space for internal operations",
    0x05: "out of session handles; a session must be flushed before a new session may be created",
    0x06: "out of object handles; the handle space for objects is depleted and a reboot is required",
    0x07: "bad locality",
    0x08: "the TPM has suspended operation on the command; forward progress was made "
    "and the command may be retried",
    0x09: "the command was canceled",
    0x0A: "TPM is performing self-tests",
    0x20: "the TPM is rate-limiting accesses to prevent wearout of NV",
    0x21: "authorizations for objects subject to DA protection are not allowed at this "
    "time because the TPM is in DA lockout mode",
    0x22: "the TPM was not able to start the command",
    0x23: "the command may require writing of NV and NV is not current accessible",
    0x7F: "this value is reserved and shall not be returned by the TPM",
}

_ORDINALS = ("1st", "2nd", "3rd", "4th", "5th", "6th", "7th")
for _i, _nth in enumerate(_ORDINALS):
    _FMT0_WARN_STRS[0x10 + _i] = (
        f"the {_nth} handle in the handle area references a transient object "
        "or session that is not loaded"
    )
    _FMT0_WARN_STRS[0x18 + _i] = (
        f"the {_nth} authorization session handle references a session that is not loaded"
    )
del _i, _nth

# TPM format one errors, indexed by the error number (bits 0-5)
_FMT1_ERR_STRS: Dict[int, str] = {
    0x01: "asymmetric algorithm not supported or not correct",
    0x02: "inconsistent attributes",
    0x03: "hash algorithm not supported or not appropriate",
    0x04: "value is out of range or is not correct for the context",
    0x05: "hierarchy is not enabled or is not correct for the use",
    0x07: "key size is not supported",
    0x08: "mask generation function not supported",
    0x09: "mode of operation not supported",
    0x0A: "the type of the value is not appropriate for the use",
    0x0B: "the handle is not correct for the use",
    0x0C: "unsupported key derivation function or function not appropriate for use",
    0x0D: "value was out of allowed range",
    0x0E: "the authorization HMAC check failed and DA counter incremented",
    0x0F: "invalid nonce size or nonce value mismatch",
    0x10: "authorization requires assertion of PP",
    0x12: "unsupported or incompatible scheme",
    0x15: "structure is the wrong size",
    0x16: "unsupported symmetric algorithm or key size, or not appropriate for instance",
    0x17: "incorrect structure tag",
    0x18: "union selector is incorrect",
    0x1A: "the TPM was unable to unmarshal a value because there were not enough "
    "octets in the input buffer",
    0x1B: "the signature is not valid",
    0x1C: "key fields are not compatible with the selected use",
    0x1D: "a policy check failed",
    0x1F: "integrity check failed",
    0x20: "invalid ticket",
    0x21: "reserved bits not set to zero as required",
    0x22: "authorization failure without DA implications",
    0x23: "the policy has expired",
    0x24: "the commandCode in the policy is not the commandCode of the command or the "
    "command code in a policy command references a command that is not implemented",
    0x25: "public and sensitive portions of an object are not cryptographically bound",
    0x26: "curve not supported",
    0x27: "point is not on the required curve.",
}

# TSS base return codes shared by the software layers
_BASE_STRS: Dict[int, str] = {
    TSS2_RC.BASE_RC_GENERAL_FAILURE: "Catch all for all errors not otherwise specified",
    TSS2_RC.BASE_RC_NOT_IMPLEMENTED: "If called functionality isn't implemented",
    TSS2_RC.BASE_RC_BAD_CONTEXT: "A context structure is bad",
    TSS2_RC.BASE_RC_ABI_MISMATCH: "Passed in ABI version doesn't match called module's ABI version",
    TSS2_RC.BASE_RC_BAD_REFERENCE: "A pointer is NULL that isn't allowed to be NULL.",
    TSS2_RC.BASE_RC_INSUFFICIENT_BUFFER: "A buffer isn't large enough",
    TSS2_RC.BASE_RC_BAD_SEQUENCE: "Function called in the wrong order",
    TSS2_RC.BASE_RC_NO_CONNECTION: "Fails to connect to next lower layer",
    TSS2_RC.BASE_RC_TRY_AGAIN: "Operation timed out; function must be called again to be completed",
    TSS2_RC.BASE_RC_IO_ERROR: "IO failure",
    TSS2_RC.BASE_RC_BAD_VALUE: "A parameter has a bad value",
    TSS2_RC.BASE_RC_NOT_PERMITTED: "Operation not permitted.",
    TSS2_RC.BASE_RC_INVALID_SESSIONS: "Session structures were sent, but command doesn't "
    "use them or doesn't use the specified number of them",
    TSS2_RC.BASE_RC_NO_DECRYPT_PARAM: "If function called that uses decrypt parameter, "
    "but command doesn't support decrypt parameter.",
    TSS2_RC.BASE_RC_NO_ENCRYPT_PARAM: "If function called that uses encrypt parameter, "
    "but command doesn't support encrypt parameter.",
    TSS2_RC.BASE_RC_BAD_SIZE: "If size of a parameter is incorrect",
    TSS2_RC.BASE_RC_MALFORMED_RESPONSE: "Response is malformed",
    TSS2_RC.BASE_RC_INSUFFICIENT_CONTEXT: "Context not large enough",
    TSS2_RC.BASE_RC_INSUFFICIENT_RESPONSE: "Response is not long enough",
    TSS2_RC.BASE_RC_INCOMPATIBLE_TCTI: "Unknown or unusable TCTI version",
    TSS2_RC.BASE_RC_NOT_SUPPORTED: "Functionality not supported",
    TSS2_RC.BASE_RC_BAD_TCTI_STRUCTURE: "TCTI context is bad",
    TSS2_RC.BASE_RC_MEMORY: "Failed to allocate memory",
    TSS2_RC.BASE_RC_BAD_TR: "The ESYS_TR resource object is bad",
    TSS2_RC.BASE_RC_MULTIPLE_DECRYPT_SESSIONS: "Multiple sessions were marked with attribute decrypt",
    TSS2_RC.BASE_RC_MULTIPLE_ENCRYPT_SESSIONS: "Multiple sessions were marked with attribute encrypt",
    TSS2_RC.BASE_RC_RSP_AUTH_FAILED: "Authorizing the TPM response failed",
}


def _layer_codes(layer: int) -> FrozenSet[int]:
    """The base codes a layer defines, taken from the TSS2_RC constants."""
    return frozenset(
        int(v & TSS2_RC.ERROR_MASK)
        for v in TSS2_RC
        if v & TSS2_RC.RC_LAYER_MASK == layer and v & TSS2_RC.ERROR_MASK
    )


_SYS_CODES = _layer_codes(TSS2_RC.SYS_RC_LAYER)
_MU_CODES = _layer_codes(TSS2_RC.MU_RC_LAYER)
_TCTI_CODES = _layer_codes(TSS2_RC.TCTI_RC_LAYER)


def _fmt0_decode(error: int) -> Optional[str]:
    severity = "warn" if error & TPM2_RC.FMT0_S else "error"
    version = "2.0" if error & TPM2_RC.VER1 else "1.2"
    prefix = f"{severity}({version}): "
    errnum = error & int(TPM2_RC.FMT0_ERROR_MASK)

    # only version 2.0 codes are defined
    if not error & TPM2_RC.VER1:
        return prefix + "unknown version 1.2 error code"

    if error & TPM2_RC.FMT0_T:
        return prefix + f"Vendor specific error: 0x{errnum:X}"

    strs = _FMT0_WARN_STRS if error & TPM2_RC.FMT0_S else _FMT0_ERR_STRS
    desc = strs.get(errnum)
    if desc is None:
        return None
    return prefix + desc


def _fmt1_decode(error: int) -> Optional[str]:
    desc = _FMT1_ERR_STRS.get(error & TPM2_RC.FMT1_ERROR_MASK)
    if desc is None:
        return None

    n = (error & int(TPM2_RC.N_MASK)) >> int(TPM2_RC.N_SHIFT)
    if error & TPM2_RC.P:
        kind, index = "parameter", n
    elif n & 0x8:
        kind, index = "session", n & 0x7
    else:
        kind, index = "handle", n & 0x7

    return f"{kind}({index if index else 'unk'}):{desc}"


def tpm_decode(error: int) -> Optional[str]:
    """Decodes the error field of a TPM layer code, either format zero or format one."""
    if error & TPM2_RC.FMT1:
        return _fmt1_decode(error)
    return _fmt0_decode(error)


def base_decode(error: int) -> Optional[str]:
    return _BASE_STRS.get(error)


def sys_decode(error: int) -> Optional[str]:
    return _BASE_STRS.get(error) if error in _SYS_CODES else None


def mu_decode(error: int) -> Optional[str]:
    return _BASE_STRS.get(error) if error in _MU_CODES else None


def tcti_decode(error: int) -> Optional[str]:
    return _BASE_STRS.get(error) if error in _TCTI_CODES else None
