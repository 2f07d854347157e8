# SPDX-License-Identifier: BSD-2
from typing import Dict, List, Optional, Union

from ..TSS2_Exception import TSS2_Exception


def _chkrc(rc: int, acceptable: Optional[Union[List[int], int]] = None) -> None:
    if acceptable is None:
        acceptable = []
    elif isinstance(acceptable, int):
        acceptable = [acceptable]
    acceptable = list(acceptable) + [0]
    if rc not in acceptable:
        raise TSS2_Exception(rc)


def _CLASS_INT_ATTRS_from_string(
    cls: object, str_value: str, fixup_map: Optional[Dict[str, str]] = None
) -> int:
    """
    Given a class, lookup int attributes by name and return that attribute value.
    :param cls: The class to search.
    :param str_value: The key for the attribute in the class.
    """

    friendly = {
        key.upper(): value
        for (key, value) in vars(cls).items()
        if isinstance(value, int)
    }

    if fixup_map is not None and str_value.upper() in fixup_map:
        str_value = fixup_map[str_value.upper()]

    return friendly[str_value.upper()]

