"""
BIP380 key expressions
https://github.com/bitcoin/bips/blob/master/bip-0380.mediawiki#key-expressions

    KEY    = [ ORIGIN ] BODY
    ORIGIN = "[" 8HEXDIG path "]"
    BODY   = hex pubkey / WIF private key / xpub or xprv [ path ] [ "/*" / "/*h" ]
"""
import logging
import typing

from bitdesc.base58 import base58decode
from bitdesc.base58 import split_checksum
from bitdesc.bips import bip32
from bitdesc.bips.bip380 import assert_charset
from bitdesc.constants import ALLOWED_CHARSET
from bitdesc.constants import EXTENDED_KEY_PREFIXES
from bitdesc.constants import FINGERPRINT_HEX_LEN
from bitdesc.constants import HEX_PUBKEY_COMPRESSED_LEN
from bitdesc.constants import HEX_PUBKEY_PREFIXES
from bitdesc.constants import HEX_PUBKEY_UNCOMPRESSED_LEN
from bitdesc.constants import WIF_COMPRESSED_FLAG
from bitdesc.constants import WIF_COMPRESSED_LEN
from bitdesc.constants import WIF_UNCOMPRESSED_LEN
from bitdesc.constants import WIF_VERSION_MAINNET
from bitdesc.crypto import hash256
from bitdesc.errors import BracketMismatchError
from bitdesc.errors import EmptyInputError
from bitdesc.errors import ExtendedKeyAttributeError
from bitdesc.errors import ExtendedKeyError
from bitdesc.errors import FingerprintError
from bitdesc.errors import KeyClassificationError
from bitdesc.errors import WifChecksumError
from bitdesc.hexadecimal import decode_hex
from bitdesc.hexadecimal import is_hex
from bitdesc.path import DerivationPath
from bitdesc.path import PathSegment
from bitdesc.path import parse_path

log = logging.getLogger(__name__)

ORIGIN_START = "["
ORIGIN_END = "]"


class KeyOrigin(typing.NamedTuple):
    fingerprint: bytes
    path: typing.Tuple[PathSegment, ...] = ()

    def __str__(self):
        return (
            ORIGIN_START
            + self.fingerprint.hex()
            + str(DerivationPath(self.path))
            + ORIGIN_END
        )


class HexPublicKey(typing.NamedTuple):
    data: bytes

    @property
    def compressed(self) -> bool:
        return len(self.data) == HEX_PUBKEY_COMPRESSED_LEN // 2


class Wif(typing.NamedTuple):
    # version + private key [+ compressed flag], checksum removed
    payload: bytes

    @property
    def compressed(self) -> bool:
        return len(self.payload) == WIF_COMPRESSED_LEN - 4


class ExtendedKey(typing.NamedTuple):
    # opaque value returned by the extended key engine
    key: typing.Any
    path: DerivationPath = DerivationPath()


KeyBody = typing.Union[HexPublicKey, Wif, ExtendedKey]


class KeyExpression(typing.NamedTuple):
    origin: typing.Optional[KeyOrigin]
    body: KeyBody


def validate_key_origin(key_origin: str) -> KeyOrigin:
    """
    Validate key origin, e.g. [deadbeef/0h/1h/2]

    Key origin consists of:
        An open bracket [
        Exactly 8 hex characters for the fingerprint of the key where the derivation starts
        Zero or more /NUM or /NUMh path elements
        A closing bracket ]
    """
    if not (key_origin.startswith(ORIGIN_START) and key_origin.endswith(ORIGIN_END)):
        raise BracketMismatchError("Key origin must start with [ and end with ]")
    content = key_origin[1:-1]
    if ORIGIN_START in content or ORIGIN_END in content:
        raise BracketMismatchError(f"Key origin '{key_origin}' contains nested brackets")
    if len(content) < FINGERPRINT_HEX_LEN:
        raise FingerprintError(
            f"Fingerprint must be {FINGERPRINT_HEX_LEN} hex characters long"
        )
    fingerprint, path = content[:FINGERPRINT_HEX_LEN], content[FINGERPRINT_HEX_LEN:]
    if not is_hex(fingerprint):
        raise FingerprintError(f"Fingerprint '{fingerprint}' is not valid hex")
    return KeyOrigin(decode_hex(fingerprint), parse_path(path).segments)


def parse_hex_pubkey(key: str) -> HexPublicKey:
    """
    Hex encoded public key starts with either:
        02 or 03, in which case it must be 66 characters long,
        04, in which case it must be 130 characters long.
    """
    if key.startswith("04"):
        if len(key) != HEX_PUBKEY_UNCOMPRESSED_LEN:
            raise KeyClassificationError(
                f"Hex encoded public key with prefix '04' must be {HEX_PUBKEY_UNCOMPRESSED_LEN} characters long"
            )
    elif len(key) != HEX_PUBKEY_COMPRESSED_LEN:
        raise KeyClassificationError(
            f"Hex encoded public key with prefix '02' or '03' must be {HEX_PUBKEY_COMPRESSED_LEN} characters long"
        )
    return HexPublicKey(decode_hex(key))


def validate_extended_key_attrs(attrs: bip32.KeyAttributes):
    if attrs.depth == 0 and any(attrs.parent_fingerprint):
        raise ExtendedKeyAttributeError(
            "Invalid key: the key cannot have zero depth with non-zero parent fingerprint"
        )
    if attrs.depth == 0 and attrs.child_index > 0:
        raise ExtendedKeyAttributeError(
            "Invalid key: the key cannot have zero depth with non-zero index"
        )


def parse_extended_key(key: str, engine=bip32) -> ExtendedKey:
    """
    xpub or xprv encoded extended key (BIP32), followed by zero or more /NUM or /NUMh
    derivation steps and optionally a final /* or /*h
    """
    xkey_str, separator, suffix = key.partition("/")
    kind = xkey_str[:4]
    try:
        xkey = engine.parse(xkey_str)
    except ExtendedKeyError as err:
        raise KeyClassificationError(f"Invalid {kind} key: {err.message}") from err
    path = parse_path(separator + suffix, allow_wildcard=True)
    validate_extended_key_attrs(engine.attributes(xkey))
    return ExtendedKey(xkey, path)


def parse_wif(key: str) -> Wif:
    """
    WIF encoded private key
    https://en.bitcoin.it/wiki/Wallet_import_format
    """
    try:
        decoded = base58decode(key)
    except ValueError as err:
        raise KeyClassificationError(f"Could not convert WIF from base58: {err}") from err
    if len(decoded) not in [WIF_UNCOMPRESSED_LEN, WIF_COMPRESSED_LEN]:
        raise KeyClassificationError(
            f"Invalid WIF format: decoded length {len(decoded)} bytes"
        )
    if decoded[0] != WIF_VERSION_MAINNET:
        raise KeyClassificationError(f"WIF must start with {WIF_VERSION_MAINNET:#x}")
    payload, checksum = split_checksum(decoded)
    if len(decoded) == WIF_COMPRESSED_LEN and payload[-1] != WIF_COMPRESSED_FLAG:
        raise KeyClassificationError(
            f"Invalid WIF format: compressed flag {payload[-1]:#04x}"
        )
    if hash256(payload)[:4] != checksum:
        raise WifChecksumError("WIF checksum does not match")
    return Wif(payload)


def classify_key_body(key: str, engine=bip32) -> KeyBody:
    """
    Classify and validate key (without key origin) as hex pubkey, extended key or WIF
    """
    if not key:
        raise KeyClassificationError("Key is empty")
    if ORIGIN_START in key or ORIGIN_END in key:
        raise BracketMismatchError("Key can not include key origin")
    if key.startswith(HEX_PUBKEY_PREFIXES) and is_hex(key):
        log.debug(f"classified {key} as hex encoded public key")
        return parse_hex_pubkey(key)
    elif key.startswith(EXTENDED_KEY_PREFIXES):
        log.debug(f"classified {key} as extended key")
        return parse_extended_key(key, engine=engine)
    log.debug(f"classified {key} as WIF")
    return parse_wif(key)


def split_key_expression(
    expr: str,
) -> typing.Tuple[typing.Optional[str], str]:
    """
    Split key expression into (key origin, key)
    """
    if expr.startswith(ORIGIN_START):
        end_index = expr.find(ORIGIN_END)
        if end_index == -1:
            raise BracketMismatchError("Missing closing bracket")
        return expr[: end_index + 1], expr[end_index + 1 :]
    return None, expr


def parse_key_expression(expr: str, engine=bip32) -> KeyExpression:
    if not expr:
        raise EmptyInputError("Input is empty")
    assert_charset(expr, charset=ALLOWED_CHARSET, name="key expression")
    key_origin, key = split_key_expression(expr)
    origin = validate_key_origin(key_origin) if key_origin is not None else None
    return KeyExpression(origin, classify_key_body(key, engine=engine))


def validate_key_expression(expr: str, engine=bip32) -> str:
    """
    Validate key expression, returning it unchanged
    """
    parse_key_expression(expr, engine=engine)
    return expr
