"""
Hexadecimal string helpers
"""
from bitdesc.constants import HEXDIGITS
from bitdesc.constants import SPACE
from bitdesc.errors import HexFormatError


def is_hex(s: str) -> bool:
    return all(c in HEXDIGITS for c in s)


def decode_hex(s: str) -> bytes:
    """
    Decode hex string, two characters per byte

    >>> decode_hex("deadBEEF")
    b'\\xde\\xad\\xbe\\xef'
    """
    if len(s) % 2:
        raise HexFormatError(f"hex string '{s}' has odd length")
    if not is_hex(s):
        raise HexFormatError(f"hex string '{s}' contains non-hexadecimal characters")
    return bytes(int(s[i : i + 2], 16) for i in range(0, len(s), 2))


def assert_hex_format(input_: str, label: str) -> str:
    """
    Check that input_ is hex, ignoring space characters (tabs / newlines are not ignored)

    Args:
        input_: str, string to check
        label: str, name of the checked value used in the error message
    Returns:
        input_ with spaces removed
    """
    stripped = input_.replace(SPACE, "")
    if not stripped or len(stripped) % 2 or not is_hex(stripped):
        raise HexFormatError(f"{label} '{input_}' is not a valid hexadecimal string!")
    return stripped
