# Copyright (c) 2023 Jason Traub
# Distributed under the MIT License, see LICENSE.txt for details
"""
BIP32
https://github.com/bitcoin/bips/blob/master/bip-0032.mediawiki

Extended key engine used by key expression validation and derive-key.
Callers go through parse / derive_child / attributes / serialize; curve math
is done with the ecdsa library.
"""
import logging
import typing

import ecdsa
from ecdsa.ellipticcurve import INFINITY

from bitdesc.base58 import base58check
from bitdesc.base58 import base58check_decode
from bitdesc.constants import EXTENDED_KEY_LEN
from bitdesc.constants import HARDENED_OFFSET
from bitdesc.constants import MAX_DEPTH
from bitdesc.constants import MAX_SEED_LEN
from bitdesc.constants import MIN_SEED_LEN
from bitdesc.constants import NULL_FINGERPRINT
from bitdesc.constants import VERSION_PRIVATE_MAINNET
from bitdesc.constants import VERSION_PRIVATE_TESTNET
from bitdesc.constants import VERSION_PUBLIC_MAINNET
from bitdesc.constants import VERSION_PUBLIC_TESTNET
from bitdesc.crypto import hash160
from bitdesc.crypto import hmac_sha512
from bitdesc.errors import ExtendedKeyError
from bitdesc.errors import SeedError

log = logging.getLogger(__name__)

CURVE = ecdsa.SECP256k1
SECP256K1_N = CURVE.order
SECP256K1_G = CURVE.generator

PUBLIC_VERSIONS = (VERSION_PUBLIC_MAINNET, VERSION_PUBLIC_TESTNET)
PRIVATE_VERSIONS = (VERSION_PRIVATE_MAINNET, VERSION_PRIVATE_TESTNET)
# private version -> public version of the same network
NEUTERED_VERSION = {
    VERSION_PRIVATE_MAINNET: VERSION_PUBLIC_MAINNET,
    VERSION_PRIVATE_TESTNET: VERSION_PUBLIC_TESTNET,
}


class ExtendedKey(typing.NamedTuple):
    version: bytes
    depth: int
    parent_fingerprint: bytes
    child_number: int
    chain_code: bytes
    # 0x00 + ser_256(k) for private keys, ser_p(K) for public keys
    key: bytes

    @property
    def is_private(self) -> bool:
        return self.version in PRIVATE_VERSIONS


class KeyAttributes(typing.NamedTuple):
    depth: int
    parent_fingerprint: bytes
    child_index: int


# https://github.com/bitcoin/bips/blob/master/bip-0032.mediawiki#conventions
def ser_32(i: int) -> bytes:
    """
    Serialize i as 32 bits big endian
    """
    return i.to_bytes(4, "big")


def ser_256(p: int) -> bytes:
    """
    Serialize p as a 256 bits big-endian
    """
    return p.to_bytes(32, "big")


def parse_256(p: bytes) -> int:
    """
    Parse 256 bit, big endian number, p, as integer
    """
    return int.from_bytes(p, "big")


def ser_p(P) -> bytes:
    """
    Serialize curve point P in SEC1 compressed form
    """
    return ecdsa.VerifyingKey.from_public_point(P, curve=CURVE).to_string("compressed")


def point(pubkey_: bytes):
    """
    Decode SEC1 encoded pubkey to a curve point, checking it is on the curve
    """
    try:
        return ecdsa.VerifyingKey.from_string(pubkey_, curve=CURVE).pubkey.point
    except ecdsa.MalformedPointError as err:
        raise ExtendedKeyError(f"invalid public key: {err}") from err


def privkey_int(privkey_: bytes) -> int:
    k = parse_256(privkey_)
    if not 0 < k < SECP256K1_N:
        raise ExtendedKeyError("private key not in range [1, n-1]")
    return k


### child key derivation (ckd) functions
##
def CKDpriv(k_parent: int, c_parent: bytes, i: int) -> typing.Tuple[int, bytes]:
    """
    private parent to private child
    https://github.com/bitcoin/bips/blob/master/bip-0032.mediawiki#private-parent-key--private-child-key
    """
    if i >= HARDENED_OFFSET:
        msg = b"\x00" + ser_256(k_parent) + ser_32(i)
    else:
        msg = ser_p(SECP256K1_G * k_parent) + ser_32(i)
    I = hmac_sha512(c_parent, msg)
    I_L, I_R = parse_256(I[:32]), I[32:]
    if I_L >= SECP256K1_N:
        raise ExtendedKeyError(f"invalid child {i}: I_L >= n")
    k_i = (I_L + k_parent) % SECP256K1_N
    if k_i == 0:
        raise ExtendedKeyError(f"invalid child {i}: zero key")
    return k_i, I_R


def CKDpub(K_parent: bytes, c_parent: bytes, i: int) -> typing.Tuple[bytes, bytes]:
    """
    public parent to public child
    https://github.com/bitcoin/bips/blob/master/bip-0032.mediawiki#public-parent-key--public-child-key
    """
    if i >= HARDENED_OFFSET:
        raise ExtendedKeyError("cannot derive hardened child from public key")
    I = hmac_sha512(c_parent, K_parent + ser_32(i))
    I_L, I_R = parse_256(I[:32]), I[32:]
    if I_L >= SECP256K1_N:
        raise ExtendedKeyError(f"invalid child {i}: I_L >= n")
    K_i = point(K_parent) + SECP256K1_G * I_L
    if K_i == INFINITY:
        raise ExtendedKeyError(f"invalid child {i}: point at infinity")
    return ser_p(K_i), I_R


def to_master_key(seed: bytes) -> typing.Tuple[int, bytes]:
    """
    https://github.com/bitcoin/bips/blob/master/bip-0032.mediawiki#master-key-generation

    Args:
        seed: seed of chosen length (between 128 and 512 bits)
    """
    if not MIN_SEED_LEN <= len(seed) <= MAX_SEED_LEN:
        raise SeedError(
            f"seed length {len(seed)} bytes not in [{MIN_SEED_LEN}, {MAX_SEED_LEN}]"
        )
    I = hmac_sha512(b"Bitcoin seed", seed)
    master_secret_key = parse_256(I[:32])
    if not 0 < master_secret_key < SECP256K1_N:
        raise ExtendedKeyError("invalid master key")
    return master_secret_key, I[32:]


def pubkey(xkey: ExtendedKey) -> bytes:
    """
    Compressed public key of xkey
    """
    if xkey.is_private:
        return ser_p(SECP256K1_G * parse_256(xkey.key[1:]))
    return xkey.key


def fingerprint(xkey: ExtendedKey) -> bytes:
    """
    First 4 bytes of HASH160 of xkey's public key
    """
    return hash160(pubkey(xkey))[:4]


#### engine interface
##
def parse(xkey: str) -> ExtendedKey:
    """
    De-serialize base58 extended key. Checks for invalid keys
    """
    try:
        decoded = base58check_decode(xkey)
    except ValueError as err:
        raise ExtendedKeyError(f"base58 decoding failed: {err}") from err
    if len(decoded) != EXTENDED_KEY_LEN:
        raise ExtendedKeyError(
            f"extended key length {len(decoded)} bytes, expected {EXTENDED_KEY_LEN}"
        )
    version = decoded[:4]
    depth = decoded[4]
    parent_key_fingerprint = decoded[5:9]
    child_no = int.from_bytes(decoded[9:13], "big")
    chaincode = decoded[13:45]
    ser_key = decoded[45:]
    prefix = ser_key[0:1]
    if version in PUBLIC_VERSIONS:
        if prefix == b"\x00":
            raise ExtendedKeyError("pubkey version / prvkey mismatch")
        elif prefix not in [b"\x02", b"\x03"]:
            raise ExtendedKeyError(f"invalid pubkey prefix {prefix.hex()}")
        point(ser_key)
    elif version in PRIVATE_VERSIONS:
        if prefix in [b"\x02", b"\x03"]:
            raise ExtendedKeyError("prvkey version / pubkey mismatch")
        elif prefix != b"\x00":
            raise ExtendedKeyError(f"invalid prvkey prefix {prefix.hex()}")
        privkey_int(ser_key[1:])
    else:
        raise ExtendedKeyError(f"unknown extended key version: {version.hex()}")
    return ExtendedKey(version, depth, parent_key_fingerprint, child_no, chaincode, ser_key)


def attributes(xkey: ExtendedKey) -> KeyAttributes:
    return KeyAttributes(xkey.depth, xkey.parent_fingerprint, xkey.child_number)


def derive_child(xkey: ExtendedKey, index) -> ExtendedKey:
    """
    Derive child of xkey (private -> private, public -> public)

    Args:
        xkey: ExtendedKey, parent
        index: int child number, or an object with a child_number attribute (PathSegment)
    """
    index = getattr(index, "child_number", index)
    if xkey.depth >= MAX_DEPTH:
        raise ExtendedKeyError("maximum derivation depth exceeded")
    if xkey.is_private:
        k_i, c_i = CKDpriv(parse_256(xkey.key[1:]), xkey.chain_code, index)
        key = b"\x00" + ser_256(k_i)
    else:
        key, c_i = CKDpub(xkey.key, xkey.chain_code, index)
    log.trace(f"derived child {index} at depth {xkey.depth + 1}")
    return ExtendedKey(
        xkey.version,
        xkey.depth + 1,
        fingerprint(xkey),
        index,
        c_i,
        key,
    )


def public(xkey: ExtendedKey) -> ExtendedKey:
    """
    Return the extended public key of xkey (or xkey itself if already public)
    """
    if not xkey.is_private:
        return xkey
    return xkey._replace(version=NEUTERED_VERSION[xkey.version], key=pubkey(xkey))


def serialize(xkey: ExtendedKey, kind: str = "xpub") -> str:
    """
    Return serialized base58 encoded extended key

    Args:
        xkey: ExtendedKey
        kind: str, "xpub" or "xprv"
    """
    if kind == "xpub":
        xkey = public(xkey)
    elif kind == "xprv":
        if not xkey.is_private:
            raise ExtendedKeyError("cannot serialize public key as xprv")
    else:
        raise ValueError(f"unrecognized extended key kind: {kind}")
    payload = (
        xkey.version
        + xkey.depth.to_bytes(1, "big")
        + xkey.parent_fingerprint
        + ser_32(xkey.child_number)
        + xkey.chain_code
        + xkey.key
    )
    return base58check(payload)


def from_seed(seed: bytes) -> ExtendedKey:
    """
    Master extended private key (mainnet) from seed
    """
    master_key, master_chain_code = to_master_key(seed)
    return ExtendedKey(
        VERSION_PRIVATE_MAINNET,
        0,
        NULL_FINGERPRINT,
        0,
        master_chain_code,
        b"\x00" + ser_256(master_key),
    )
