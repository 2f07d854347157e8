# SPDX-License-Identifier: BSD-2
import string

_UINT32_MAX = 0xFFFFFFFF
_DIGITS = {8: string.octdigits, 10: string.digits, 16: string.hexdigits}


def str_to_uint32(value: str) -> int:
    """Parse an unsigned 32 bit integer in decimal, hex (0x) or octal (0) notation.

    This is how the tools read handle numbers and return codes from their
    command line.

    Args:
        value (str): The number, ie "0x81000001", "42" or "052".

    Returns:
        The value as an int.

    Raises:
        ValueError: if the string is not a number or does not fit in 32 bits.
    """
    if not isinstance(value, str) or not value:
        raise ValueError(f'Expected a numeric string, got: "{value}"')

    if value[:2].lower() == "0x":
        base, digits = 16, value[2:]
    elif len(value) > 1 and value[0] == "0":
        base, digits = 8, value[1:]
    else:
        base, digits = 10, value

    # int() tolerates signs, whitespace and underscores, strtoul style parsing does not
    if not digits or not all(c in _DIGITS[base] for c in digits):
        raise ValueError(f'Could not convert "{value}" to an integer')

    result = int(digits, base)
    if result > _UINT32_MAX:
        raise ValueError(f'Value "{value}" is too large for a 32 bit integer')
    return result
