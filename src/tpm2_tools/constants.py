# SPDX-License-Identifier: BSD-2
""" This module contains the constant values the tools need from the following TCG specifications:

- https://trustedcomputinggroup.org/resource/tpm-library-specification/. See Part 2 "Structures".
- https://trustedcomputinggroup.org/resource/tss-overview-common-structures-specification

Along with helpers to go from string values to constants and constant values to string values.
"""
from .internal.utils import _CLASS_INT_ATTRS_from_string


class TPM_FRIENDLY_ITER(type):
    """Metaclass to make constants classes iterable"""

    def __iter__(cls):
        """Returns an iterator over the constants in the class.

        Returns:
            (int): The int values of the constants in the class.

        Example:
            list(TOOL_RC) -> [0, 1, 2, 3, 4, 5]
        """
        for value in cls._members_.values():
            yield value


class TPM_FRIENDLY_INT(int, metaclass=TPM_FRIENDLY_ITER):
    _FIXUP_MAP = {}

    @staticmethod
    def _get_members(cls) -> dict:
        """Finds all constants defined at class level."""
        members = dict()
        for sc in cls.__mro__[1:]:
            if not issubclass(sc, TPM_FRIENDLY_INT):
                break
            members.update(sc._get_members(sc))
        for name, value in vars(cls).items():
            if not isinstance(value, int) or name.startswith("_"):
                continue
            members[name] = value
        return members

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        members = TPM_FRIENDLY_INT._get_members(cls)
        for name, value in members.items():
            fixed_value = cls(value)
            members[name] = fixed_value
            setattr(cls, name, fixed_value)
        cls._members_ = members

    @classmethod
    def parse(cls, value: str) -> int:
        """Converts a constant name into its value, ignoring case.

        Raises:
            TypeError: If the value is not a str.
            ValueError: If the value does not name a constant.

        Example:
            TOOL_RC.parse("auth_error") -> 3
        """
        if isinstance(value, str):
            try:
                x = _CLASS_INT_ATTRS_from_string(cls, value, cls._FIXUP_MAP)
                if not isinstance(x, int):
                    raise KeyError(f'Expected int got: "{type(x)}"')
                return x
            except KeyError:
                raise ValueError(
                    f'Could not convert friendly name to value, got: "{value}"'
                )
        else:
            raise TypeError(f'Expected value to be a str object, got: "{type(value)}"')

    @classmethod
    def __contains__(cls, value: int) -> bool:
        """Indicates if a class contains a numeric constant.

        Example:
            0x40000001 in TPM2_RH -> True
        """
        return value in cls._members_.values()

    @classmethod
    def to_string(cls, value: int) -> str:
        """Converts an integer value into it's friendly string name for that class.

        Raises:
            ValueError: If the numeric does not match a constant.

        Example:
            ESYS_TR.to_string(0x101) -> 'ESYS_TR.OWNER'
        """
        # Take the shortest match, ie OWNER over RH_OWNER.
        m = None
        for k, v in vars(cls).items():
            if isinstance(v, int) and v == value and (m is None or len(k) < len(m)):
                m = k

        if m is None:
            raise ValueError(f"Could not match {value} to class {cls.__name__}")

        return f"{cls.__name__}.{m}"

    def __str__(self) -> str:
        """Returns a string value of the constant normalized to lowercase.

        Example:
            str(TPM2_RH.OWNER) -> 'owner'
        """
        for k, v in vars(self.__class__).items():
            if isinstance(v, int) and int(self) == v:
                return k.lower()
        return str(int(self))

    def __add__(self, value):
        return self.__class__(int(self).__add__(value))

    def __radd__(self, value):
        return self.__class__(int(self).__radd__(value))

    def __sub__(self, value):
        return self.__class__(int(self).__sub__(value))

    def __and__(self, value):
        return self.__class__(int(self).__and__(value))

    def __rand__(self, value):
        return self.__class__(int(self).__rand__(value))

    def __or__(self, value):
        return self.__class__(int(self).__or__(value))

    def __ror__(self, value):
        return self.__class__(int(self).__ror__(value))

    def __xor__(self, value):
        return self.__class__(int(self).__xor__(value))

    def __invert__(self):
        return self.__class__(int(self).__invert__())

    def __lshift__(self, value):
        return self.__class__(int(self).__lshift__(value))

    def __rshift__(self, value):
        return self.__class__(int(self).__rshift__(value))


class TPMA_FRIENDLY_INTLIST(TPM_FRIENDLY_INT):
    @classmethod
    def parse(cls, value: str) -> int:
        """Converts a string of | separated constant values into it's integer value.

        The value "" (empty string) returns a 0.

        Raises:
            TypeError: If the value is not a str.
            ValueError: If a field portion of the str does not match a constant.

        Examples:
            TPM2_HIERARCHY_FLAGS.parse("owner|endorsement") -> 0x5
        """
        if not isinstance(value, str):
            raise TypeError(f'Expected value to be a str, got: "{type(value)}"')

        intvalue = 0
        for k in value.split("|"):
            if not k:
                continue
            try:
                intvalue |= _CLASS_INT_ATTRS_from_string(cls, k, cls._FIXUP_MAP)
            except KeyError:
                raise ValueError(
                    f'Could not convert friendly name to value, got: "{k}"'
                )

        return intvalue

    def __str__(self):
        """Given a constant, return the string bitwise representation.

        Raises:
            ValueError: If their are unmatched bits in the constant value.

        Example:
            str(TPM2_HIERARCHY_FLAGS.O | TPM2_HIERARCHY_FLAGS.E) -> 'owner|endorsement'
        """
        cv = int(self)
        ints = list()
        for k, v in vars(self.__class__).items():
            if cv == 0:
                break
            if not isinstance(v, int) or k.startswith("_"):
                continue
            for fk, fv in self._FIXUP_MAP.items():
                if k == fv:
                    k = fk
                    break
            if v == 0 or v & cv != v:
                continue
            ints.append(k.lower())
            cv = cv ^ v
        if cv:
            raise ValueError(f"unnmatched values left: 0x{cv:x}")
        return "|".join(ints)


class ESYS_TR(TPM_FRIENDLY_INT):
    """ESYS_TR is an ESAPI identifier representing a TPM resource.

    Only the identifiers of the permanent hierarchies and the pseudo session
    handles are defined here, those are the ones a hierarchy option resolves to.
    """

    NONE = 0xFFF
    PASSWORD = 0x0FF
    OWNER = 0x101
    NULL = 0x107
    LOCKOUT = 0x10A
    ENDORSEMENT = 0x10B
    PLATFORM = 0x10C
    PLATFORM_NV = 0x10D
    RH_OWNER = 0x101
    RH_NULL = 0x107
    RH_LOCKOUT = 0x10A
    RH_ENDORSEMENT = 0x10B
    RH_PLATFORM = 0x10C
    RH_PLATFORM_NV = 0x10D


class TPM2_RH(TPM_FRIENDLY_INT):
    FIRST = 0x40000000
    SRK = 0x40000000
    OWNER = 0x40000001
    REVOKE = 0x40000002
    TRANSPORT = 0x40000003
    OPERATOR = 0x40000004
    ADMIN = 0x40000005
    EK = 0x40000006
    NULL = 0x40000007
    UNASSIGNED = 0x40000008
    PW = 0x40000009
    LOCKOUT = 0x4000000A
    ENDORSEMENT = 0x4000000B
    PLATFORM = 0x4000000C
    PLATFORM_NV = 0x4000000D
    LAST = 0x4004FFFF


class TPM2_HIERARCHY_FLAGS(TPMA_FRIENDLY_INTLIST):
    """The hierarchies a command is willing to accept for a hierarchy option."""

    _FIXUP_MAP = {
        "OWNER": "O",
        "PLATFORM": "P",
        "ENDORSEMENT": "E",
        "NULL": "N",
        "LOCKOUT": "L",
    }
    NONE = 0x00
    O = 0x01
    P = 0x02
    E = 0x04
    N = 0x08
    L = 0x10
    ALL = 0x1F


class TPM_BASE_RC(TPM_FRIENDLY_INT):
    def decode(self):
        """Returns the operator readable diagnostic string for the return code."""
        from .error import tpm2_error_str

        return tpm2_error_str(self)


class TPM2_RC(TPM_BASE_RC):
    SUCCESS = 0x000
    BAD_TAG = 0x01E
    VER1 = 0x100
    INITIALIZE = VER1 + 0x000
    FAILURE = VER1 + 0x001
    SEQUENCE = VER1 + 0x003
    PRIVATE = VER1 + 0x00B
    HMAC = VER1 + 0x019
    DISABLED = VER1 + 0x020
    EXCLUSIVE = VER1 + 0x021
    AUTH_TYPE = VER1 + 0x024
    AUTH_MISSING = VER1 + 0x025
    POLICY = VER1 + 0x026
    PCR = VER1 + 0x027
    PCR_CHANGED = VER1 + 0x028
    UPGRADE = VER1 + 0x02D
    TOO_MANY_CONTEXTS = VER1 + 0x02E
    AUTH_UNAVAILABLE = VER1 + 0x02F
    REBOOT = VER1 + 0x030
    UNBALANCED = VER1 + 0x031
    COMMAND_SIZE = VER1 + 0x042
    COMMAND_CODE = VER1 + 0x043
    AUTHSIZE = VER1 + 0x044
    AUTH_CONTEXT = VER1 + 0x045
    NV_RANGE = VER1 + 0x046
    NV_SIZE = VER1 + 0x047
    NV_LOCKED = VER1 + 0x048
    NV_AUTHORIZATION = VER1 + 0x049
    NV_UNINITIALIZED = VER1 + 0x04A
    NV_SPACE = VER1 + 0x04B
    NV_DEFINED = VER1 + 0x04C
    BAD_CONTEXT = VER1 + 0x050
    CPHASH = VER1 + 0x051
    PARENT = VER1 + 0x052
    NEEDS_TEST = VER1 + 0x053
    NO_RESULT = VER1 + 0x054
    SENSITIVE = VER1 + 0x055
    MAX_FM0 = VER1 + 0x07F
    FMT1 = 0x080
    ASYMMETRIC = FMT1 + 0x001
    ATTRIBUTES = FMT1 + 0x002
    HASH = FMT1 + 0x003
    VALUE = FMT1 + 0x004
    HIERARCHY = FMT1 + 0x005
    KEY_SIZE = FMT1 + 0x007
    MGF = FMT1 + 0x008
    MODE = FMT1 + 0x009
    TYPE = FMT1 + 0x00A
    HANDLE = FMT1 + 0x00B
    KDF = FMT1 + 0x00C
    RANGE = FMT1 + 0x00D
    AUTH_FAIL = FMT1 + 0x00E
    NONCE = FMT1 + 0x00F
    PP = FMT1 + 0x010
    SCHEME = FMT1 + 0x012
    SIZE = FMT1 + 0x015
    SYMMETRIC = FMT1 + 0x016
    TAG = FMT1 + 0x017
    SELECTOR = FMT1 + 0x018
    INSUFFICIENT = FMT1 + 0x01A
    SIGNATURE = FMT1 + 0x01B
    KEY = FMT1 + 0x01C
    POLICY_FAIL = FMT1 + 0x01D
    INTEGRITY = FMT1 + 0x01F
    TICKET = FMT1 + 0x020
    RESERVED_BITS = FMT1 + 0x021
    BAD_AUTH = FMT1 + 0x022
    EXPIRED = FMT1 + 0x023
    POLICY_CC = FMT1 + 0x024
    BINDING = FMT1 + 0x025
    CURVE = FMT1 + 0x026
    ECC_POINT = FMT1 + 0x027
    WARN = 0x900
    CONTEXT_GAP = WARN + 0x001
    OBJECT_MEMORY = WARN + 0x002
    SESSION_MEMORY = WARN + 0x003
    MEMORY = WARN + 0x004
    SESSION_HANDLES = WARN + 0x005
    OBJECT_HANDLES = WARN + 0x006
    LOCALITY = WARN + 0x007
    YIELDED = WARN + 0x008
    CANCELED = WARN + 0x009
    TESTING = WARN + 0x00A
    REFERENCE_H0 = WARN + 0x010
    REFERENCE_H1 = WARN + 0x011
    REFERENCE_H2 = WARN + 0x012
    REFERENCE_H3 = WARN + 0x013
    REFERENCE_H4 = WARN + 0x014
    REFERENCE_H5 = WARN + 0x015
    REFERENCE_H6 = WARN + 0x016
    REFERENCE_S0 = WARN + 0x018
    REFERENCE_S1 = WARN + 0x019
    REFERENCE_S2 = WARN + 0x01A
    REFERENCE_S3 = WARN + 0x01B
    REFERENCE_S4 = WARN + 0x01C
    REFERENCE_S5 = WARN + 0x01D
    REFERENCE_S6 = WARN + 0x01E
    NV_RATE = WARN + 0x020
    LOCKOUT = WARN + 0x021
    RETRY = WARN + 0x022
    NV_UNAVAILABLE = WARN + 0x023
    NOT_USED = WARN + 0x07F
    H = 0x000
    P = 0x040
    S = 0x800
    RC1 = 0x100
    RC2 = 0x200
    RC3 = 0x300
    RC4 = 0x400
    RC5 = 0x500
    RC6 = 0x600
    RC7 = 0x700
    RC8 = 0x800
    RC9 = 0x900
    A = 0xA00
    B = 0xB00
    C = 0xC00
    D = 0xD00
    E = 0xE00
    F = 0xF00
    N_MASK = 0xF00
    # format-zero field masks
    FMT0_ERROR_MASK = 0x07F
    FMT0_T = 0x400
    FMT0_S = 0x800
    # format-one field masks
    FMT1_ERROR_MASK = 0x03F
    N_SHIFT = 8


class TSS2_RC(TPM_BASE_RC):
    RC_LAYER_SHIFT = 16
    RC_LAYER_MASK = 0xFF << RC_LAYER_SHIFT
    ERROR_MASK = 0xFFFF
    TPM_RC_LAYER = 0 << RC_LAYER_SHIFT
    FEATURE_RC_LAYER = 6 << RC_LAYER_SHIFT
    ESAPI_RC_LAYER = 7 << RC_LAYER_SHIFT
    SYS_RC_LAYER = 8 << RC_LAYER_SHIFT
    MU_RC_LAYER = 9 << RC_LAYER_SHIFT
    TCTI_RC_LAYER = 10 << RC_LAYER_SHIFT
    RESMGR_RC_LAYER = 11 << RC_LAYER_SHIFT
    RESMGR_TPM_RC_LAYER = 12 << RC_LAYER_SHIFT
    BASE_RC_GENERAL_FAILURE = 1
    BASE_RC_NOT_IMPLEMENTED = 2
    BASE_RC_BAD_CONTEXT = 3
    BASE_RC_ABI_MISMATCH = 4
    BASE_RC_BAD_REFERENCE = 5
    BASE_RC_INSUFFICIENT_BUFFER = 6
    BASE_RC_BAD_SEQUENCE = 7
    BASE_RC_NO_CONNECTION = 8
    BASE_RC_TRY_AGAIN = 9
    BASE_RC_IO_ERROR = 10
    BASE_RC_BAD_VALUE = 11
    BASE_RC_NOT_PERMITTED = 12
    BASE_RC_INVALID_SESSIONS = 13
    BASE_RC_NO_DECRYPT_PARAM = 14
    BASE_RC_NO_ENCRYPT_PARAM = 15
    BASE_RC_BAD_SIZE = 16
    BASE_RC_MALFORMED_RESPONSE = 17
    BASE_RC_INSUFFICIENT_CONTEXT = 18
    BASE_RC_INSUFFICIENT_RESPONSE = 19
    BASE_RC_INCOMPATIBLE_TCTI = 20
    BASE_RC_NOT_SUPPORTED = 21
    BASE_RC_BAD_TCTI_STRUCTURE = 22
    BASE_RC_MEMORY = 23
    BASE_RC_BAD_TR = 24
    BASE_RC_MULTIPLE_DECRYPT_SESSIONS = 25
    BASE_RC_MULTIPLE_ENCRYPT_SESSIONS = 26
    BASE_RC_RSP_AUTH_FAILED = 27
    RC_SUCCESS = 0
    TCTI_RC_GENERAL_FAILURE = TCTI_RC_LAYER | BASE_RC_GENERAL_FAILURE
    TCTI_RC_NOT_IMPLEMENTED = TCTI_RC_LAYER | BASE_RC_NOT_IMPLEMENTED
    TCTI_RC_BAD_CONTEXT = TCTI_RC_LAYER | BASE_RC_BAD_CONTEXT
    TCTI_RC_ABI_MISMATCH = TCTI_RC_LAYER | BASE_RC_ABI_MISMATCH
    TCTI_RC_BAD_REFERENCE = TCTI_RC_LAYER | BASE_RC_BAD_REFERENCE
    TCTI_RC_INSUFFICIENT_BUFFER = TCTI_RC_LAYER | BASE_RC_INSUFFICIENT_BUFFER
    TCTI_RC_BAD_SEQUENCE = TCTI_RC_LAYER | BASE_RC_BAD_SEQUENCE
    TCTI_RC_NO_CONNECTION = TCTI_RC_LAYER | BASE_RC_NO_CONNECTION
    TCTI_RC_TRY_AGAIN = TCTI_RC_LAYER | BASE_RC_TRY_AGAIN
    TCTI_RC_IO_ERROR = TCTI_RC_LAYER | BASE_RC_IO_ERROR
    TCTI_RC_BAD_VALUE = TCTI_RC_LAYER | BASE_RC_BAD_VALUE
    TCTI_RC_NOT_PERMITTED = TCTI_RC_LAYER | BASE_RC_NOT_PERMITTED
    TCTI_RC_MALFORMED_RESPONSE = TCTI_RC_LAYER | BASE_RC_MALFORMED_RESPONSE
    TCTI_RC_NOT_SUPPORTED = TCTI_RC_LAYER | BASE_RC_NOT_SUPPORTED
    TCTI_RC_MEMORY = TCTI_RC_LAYER | BASE_RC_MEMORY
    SYS_RC_GENERAL_FAILURE = SYS_RC_LAYER | BASE_RC_GENERAL_FAILURE
    SYS_RC_ABI_MISMATCH = SYS_RC_LAYER | BASE_RC_ABI_MISMATCH
    SYS_RC_BAD_REFERENCE = SYS_RC_LAYER | BASE_RC_BAD_REFERENCE
    SYS_RC_INSUFFICIENT_BUFFER = SYS_RC_LAYER | BASE_RC_INSUFFICIENT_BUFFER
    SYS_RC_BAD_SEQUENCE = SYS_RC_LAYER | BASE_RC_BAD_SEQUENCE
    SYS_RC_BAD_VALUE = SYS_RC_LAYER | BASE_RC_BAD_VALUE
    SYS_RC_INVALID_SESSIONS = SYS_RC_LAYER | BASE_RC_INVALID_SESSIONS
    SYS_RC_NO_DECRYPT_PARAM = SYS_RC_LAYER | BASE_RC_NO_DECRYPT_PARAM
    SYS_RC_NO_ENCRYPT_PARAM = SYS_RC_LAYER | BASE_RC_NO_ENCRYPT_PARAM
    SYS_RC_BAD_SIZE = SYS_RC_LAYER | BASE_RC_BAD_SIZE
    SYS_RC_MALFORMED_RESPONSE = SYS_RC_LAYER | BASE_RC_MALFORMED_RESPONSE
    SYS_RC_INSUFFICIENT_CONTEXT = SYS_RC_LAYER | BASE_RC_INSUFFICIENT_CONTEXT
    SYS_RC_INSUFFICIENT_RESPONSE = SYS_RC_LAYER | BASE_RC_INSUFFICIENT_RESPONSE
    SYS_RC_INCOMPATIBLE_TCTI = SYS_RC_LAYER | BASE_RC_INCOMPATIBLE_TCTI
    SYS_RC_BAD_TCTI_STRUCTURE = SYS_RC_LAYER | BASE_RC_BAD_TCTI_STRUCTURE
    MU_RC_GENERAL_FAILURE = MU_RC_LAYER | BASE_RC_GENERAL_FAILURE
    MU_RC_BAD_REFERENCE = MU_RC_LAYER | BASE_RC_BAD_REFERENCE
    MU_RC_BAD_SIZE = MU_RC_LAYER | BASE_RC_BAD_SIZE
    MU_RC_BAD_VALUE = MU_RC_LAYER | BASE_RC_BAD_VALUE
    MU_RC_INSUFFICIENT_BUFFER = MU_RC_LAYER | BASE_RC_INSUFFICIENT_BUFFER
    ESYS_RC_GENERAL_FAILURE = ESAPI_RC_LAYER | BASE_RC_GENERAL_FAILURE
    ESYS_RC_NOT_IMPLEMENTED = ESAPI_RC_LAYER | BASE_RC_NOT_IMPLEMENTED
    ESYS_RC_BAD_REFERENCE = ESAPI_RC_LAYER | BASE_RC_BAD_REFERENCE
    ESYS_RC_BAD_SEQUENCE = ESAPI_RC_LAYER | BASE_RC_BAD_SEQUENCE
    ESYS_RC_TRY_AGAIN = ESAPI_RC_LAYER | BASE_RC_TRY_AGAIN
    ESYS_RC_IO_ERROR = ESAPI_RC_LAYER | BASE_RC_IO_ERROR
    ESYS_RC_BAD_VALUE = ESAPI_RC_LAYER | BASE_RC_BAD_VALUE
    ESYS_RC_MEMORY = ESAPI_RC_LAYER | BASE_RC_MEMORY
    ESYS_RC_BAD_TR = ESAPI_RC_LAYER | BASE_RC_BAD_TR
    ESYS_RC_RSP_AUTH_FAILED = ESAPI_RC_LAYER | BASE_RC_RSP_AUTH_FAILED
    FAPI_RC_NOT_IMPLEMENTED = FEATURE_RC_LAYER | BASE_RC_NOT_IMPLEMENTED
    FAPI_RC_BAD_VALUE = FEATURE_RC_LAYER | BASE_RC_BAD_VALUE


class TOOL_RC(TPM_FRIENDLY_INT):
    """The outcome of a tool invocation, the values are the process exit codes.

    Do not reorder or change, scripts depend on these exit codes.
    """

    SUCCESS = 0
    GENERAL_ERROR = 1
    OPTION_ERROR = 2
    AUTH_ERROR = 3
    TCTI_ERROR = 4
    UNSUPPORTED = 5
