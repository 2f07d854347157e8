# SPDX-License-Identifier: BSD-2
"""
Parsing of hierarchy options and creation of primary objects under them.
"""
import logging
from typing import Any, NamedTuple, Optional, Union

from .constants import ESYS_TR, TPM2_HIERARCHY_FLAGS, TPM2_RH
from .utils import str_to_uint32
from .session import PasswordSession

logger = logging.getLogger(__name__)


class HierarchyParseError(ValueError):
    """A hierarchy option could not be turned into a handle."""


class HierarchyEmptyError(HierarchyParseError):
    def __init__(self):
        super().__init__("No hierarchy specified")


class InvalidHandleError(HierarchyParseError):
    def __init__(self, value: str):
        super().__init__(
            f'Incorrect handle value, got: "{value}", expected [o|p|e|n|l] '
            "or a handle number"
        )
        self.value = value


class HierarchyNotSupportedError(HierarchyParseError):
    def __init__(self, hierarchy: TPM2_RH, message: str):
        super().__init__(message)
        self.hierarchy = hierarchy


# name, handle, flag, rejection message. Matched in this order.
_HIERARCHIES = (
    (
        "owner",
        TPM2_RH.OWNER,
        TPM2_HIERARCHY_FLAGS.O,
        "Owner hierarchy not supported by this command.",
    ),
    (
        "platform",
        TPM2_RH.PLATFORM,
        TPM2_HIERARCHY_FLAGS.P,
        "Platform hierarchy not supported by this command.",
    ),
    (
        "endorsement",
        TPM2_RH.ENDORSEMENT,
        TPM2_HIERARCHY_FLAGS.E,
        "Endorsement hierarchy not supported by this command.",
    ),
    (
        "null",
        TPM2_RH.NULL,
        TPM2_HIERARCHY_FLAGS.N,
        "NULL hierarchy not supported by this command.",
    ),
    (
        "lockout",
        TPM2_RH.LOCKOUT,
        TPM2_HIERARCHY_FLAGS.L,
        "Permanent handle lockout not supported by this command.",
    ),
)

_ESYS_HIERARCHIES = {
    TPM2_RH.OWNER: ESYS_TR.OWNER,
    TPM2_RH.PLATFORM: ESYS_TR.PLATFORM,
    TPM2_RH.ENDORSEMENT: ESYS_TR.ENDORSEMENT,
    TPM2_RH.NULL: ESYS_TR.NULL,
    TPM2_RH.LOCKOUT: ESYS_TR.LOCKOUT,
}


def hierarchy_from_optarg(
    value: str, flags: Union[TPM2_HIERARCHY_FLAGS, int] = TPM2_HIERARCHY_FLAGS.ALL
) -> int:
    """Parses a hierarchy value from an option argument.

    The value is matched as a prefix of the hierarchy names, so "o", "own" and
    "owner" all select the owner hierarchy:

        - owner - Owner hierarchy
        - platform - Platform hierarchy
        - endorsement - Endorsement hierarchy
        - null - Null hierarchy
        - lockout - Lockout hierarchy

    Anything else is parsed as a handle number in decimal, hex (0x) or octal (0)
    notation. Handles may be generic (non hierarchy) handles such as a persistent
    object.

    Args:
        value (str): The option argument.
        flags (TPM2_HIERARCHY_FLAGS): The hierarchies the command supports,
            defaults to all of them.

    Returns:
        The TPM2_RH of the hierarchy, or the handle number as an int.

    Raises:
        HierarchyEmptyError: If the value is None or empty.
        InvalidHandleError: If the value is neither a hierarchy name nor a number.
        HierarchyNotSupportedError: If the value names, either by name or
            handle number, a hierarchy that is not in flags.
    """
    if not value:
        raise HierarchyEmptyError()

    hierarchy = None
    for name, handle, _, _ in _HIERARCHIES:
        if name.startswith(value):
            hierarchy = handle
            break

    if hierarchy is None:
        # a hex handle, which may be a generic (non hierarchy) TPM2_HANDLE
        try:
            hierarchy = str_to_uint32(value)
        except ValueError:
            raise InvalidHandleError(value)

    # filter the well known hierarchies, whether given by name or by number
    for _, handle, flag, message in _HIERARCHIES:
        if hierarchy == handle:
            if not flags & flag:
                raise HierarchyNotSupportedError(handle, message)
            return handle

    return hierarchy


def tpmi_hierarchy_to_esys_tr(hierarchy: int) -> ESYS_TR:
    """Returns the ESYS_TR of a hierarchy handle, ESYS_TR.NONE if it is not one."""
    return _ESYS_HIERARCHIES.get(hierarchy, ESYS_TR.NONE)


class PrimaryObject(NamedTuple):
    """The outputs of TPM2_CreatePrimary."""

    handle: Any
    public: Any
    creation_data: Any
    creation_hash: Any
    creation_ticket: Any


class HierarchyPData:
    """The inputs and outputs of creating a primary object in a hierarchy.

    Args:
        hierarchy (int): The hierarchy handle, as returned by :func:`hierarchy_from_optarg`.
        in_sensitive: The sensitive data, None for an empty one.
        in_public: The public template, defaults to "rsa2048".
        outside_info: Data to include in the creation data, None for none.
        creation_pcr: PCR selection to include in the creation data, None for none.
    """

    def __init__(
        self,
        hierarchy: int = TPM2_RH.OWNER,
        in_sensitive: Any = None,
        in_public: Any = "rsa2048",
        outside_info: Any = None,
        creation_pcr: Any = None,
    ):
        self.hierarchy = hierarchy
        self.in_sensitive = in_sensitive
        self.in_public = in_public
        self.outside_info = outside_info
        self.creation_pcr = creation_pcr
        self.out: Optional[PrimaryObject] = None

    def free(self) -> None:
        self.out = None


def hierarchy_create_primary(
    ectx, session: Optional[PasswordSession], objdata: HierarchyPData
) -> PrimaryObject:
    """Creates a primary object under the hierarchy of objdata.

    Args:
        ectx: An ESAPI context, such as tpm2_pytss.ESAPI.
        session: Provides the authorization session for the hierarchy through
            get_shandle(ectx, esys_handle). None uses the empty password.
        objdata (HierarchyPData): The creation inputs, the outputs are stored in
            objdata.out.

    Returns:
        The created PrimaryObject.

    Raises:
        TSS2_Exception: Any of the return codes of the ESAPI context.
    """
    hierarchy = tpmi_hierarchy_to_esys_tr(objdata.hierarchy)

    if session is None:
        session = PasswordSession()

    try:
        shandle1 = session.get_shandle(ectx, hierarchy)
    except Exception:
        logger.error("Couldn't get shandle for hierarchy")
        raise

    kwargs = dict(primary_handle=hierarchy, session1=shandle1)
    if objdata.outside_info is not None:
        kwargs["outside_info"] = objdata.outside_info
    if objdata.creation_pcr is not None:
        kwargs["creation_pcr"] = objdata.creation_pcr

    objdata.out = PrimaryObject(
        *ectx.create_primary(objdata.in_sensitive, objdata.in_public, **kwargs)
    )
    logger.debug(
        f"created primary object in {ESYS_TR.to_string(hierarchy)}: {objdata.out.handle}"
    )
    return objdata.out
