import hashlib
import hmac


def hash160(msg: bytes) -> bytes:
    return hashlib.new("ripemd160", hashlib.sha256(msg).digest()).digest()


def hash256(msg: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(msg).digest()).digest()


def hmac_sha512(key: bytes, msg: bytes) -> bytes:
    return hmac.new(key, msg, digestmod=hashlib.sha512).digest()
