"""
Base58(check) encoding / decoding
"""
import typing

from bitdesc.crypto import hash256

BITCOIN_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
BITCOIN_ALPHABET_MAP = {value: idx for idx, value in enumerate(BITCOIN_ALPHABET)}


def base58encode(data: bytes) -> str:
    """
    Encode data in base58 format
    Args:
        data: bytes, data to encode
    Returns:
        base58 encoded string

    >>> base58encode(b"hello world")
    'StV1DL6CwTryKyV'
    """
    origlen = len(data)
    data = data.lstrip(b"\x00")
    zeros = origlen - len(data)

    encoded = ""
    integer = int.from_bytes(data, "big")
    while integer:
        integer, idx = divmod(integer, 58)
        encoded = BITCOIN_ALPHABET[idx] + encoded
    return BITCOIN_ALPHABET[0] * zeros + encoded


def base58check(data: bytes) -> str:
    """
    Encode data as base58check
    # https://en.bitcoin.it/wiki/Base58Check_encoding

    >>> base58check(b"hello world")
    '3vQB7B6MrGQZaxCuFg4oh'
    """
    return base58encode(data + hash256(data)[:4])


def base58decode(data: str) -> bytes:
    """
    Decode base58 encoded string
    Raises:
        ValueError: if data contains a character outside the base58 alphabet

    >>> base58decode("StV1DL6CwTryKyV")
    b'hello world'
    """
    for char in data:
        if char not in BITCOIN_ALPHABET_MAP:
            raise ValueError(f"invalid base58 character '{char}'")
    origlen = len(data)
    data = data.lstrip("1")
    ones = origlen - len(data)

    result = 0
    for char in data:
        result = result * 58 + BITCOIN_ALPHABET_MAP[char]

    decoded = result.to_bytes((result.bit_length() + 7) // 8, "big")
    return b"\x00" * ones + decoded


def split_checksum(decoded: bytes) -> typing.Tuple[bytes, bytes]:
    """
    Split decoded base58check data into (payload, checksum)
    """
    if len(decoded) < 4:
        raise ValueError("data too short for base58check")
    return decoded[:-4], decoded[-4:]


def base58check_decode(data: str) -> bytes:
    """
    Decode base58check encoded string

    >>> base58check_decode("3vQB7B6MrGQZaxCuFg4oh")
    b'hello world'
    """
    payload, checksum = split_checksum(base58decode(data))
    if checksum != hash256(payload)[:4]:
        raise ValueError("invalid checksum")
    return payload
