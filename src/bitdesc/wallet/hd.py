"""
BIP32 key derivation for the derive-key command
"""
import logging
import re
import typing

from bitdesc.bips import bip32
from bitdesc.errors import SeedError
from bitdesc.hexadecimal import decode_hex
from bitdesc.keys import validate_extended_key_attrs
from bitdesc.path import DerivationPath
from bitdesc.path import parse_derivation_argument

log = logging.getLogger(__name__)

SEED_SEPARATOR_RE = re.compile(r"[ \t]+")


def parse_seed(seed: str) -> bytes:
    """
    Parse hex seed, optionally split into groups by spaces or tabs

    >>> parse_seed("0001 0203\\t0405").hex()
    '000102030405'
    """
    groups = SEED_SEPARATOR_RE.split(seed.strip(" \t"))
    for group in groups:
        if len(group) % 2:
            raise SeedError(f"seed group '{group}' has odd length")
    return decode_hex("".join(groups))


def derive_from_path(xkey: bip32.ExtendedKey, path: DerivationPath) -> bip32.ExtendedKey:
    """
    Derive extended key at path, relative to xkey
    """
    for segment in path.segments:
        xkey = bip32.derive_child(xkey, segment)
    return xkey


def derive_key(value: str, path: typing.Optional[str] = None) -> str:
    """
    Derive extended key pair from xpub, xprv or hex seed

    Args:
        value: str, xpub, xprv, or hex encoded seed
        path: Optional[str], derivation path e.g. 0h/1/2 (leading / optional)
    Returns:
        "<xpub>:<xprv>", or "<xpub>:" when value is an xpub
    """
    derivation = parse_derivation_argument(path) if path else DerivationPath()
    if value.startswith(("xpub", "xprv")):
        xkey = bip32.parse(value)
        validate_extended_key_attrs(bip32.attributes(xkey))
    else:
        xkey = bip32.from_seed(parse_seed(value))
    log.debug(f"deriving {len(derivation.segments)} level(s) from depth {xkey.depth}")

    derived = derive_from_path(xkey, derivation)
    xpub = bip32.serialize(derived, kind="xpub")
    if not derived.is_private:
        return f"{xpub}:"
    return f"{xpub}:{bip32.serialize(derived, kind='xprv')}"
