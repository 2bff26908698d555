"""
Global constants
"""

#### Descriptor character sets
## https://github.com/bitcoin/bips/blob/master/bip-0380.mediawiki#checksum

# symbol positions used by the checksum, do not reorder
INPUT_CHARSET = "0123456789()[],'/*abcdefgh@:$%{}IJKLMNOPQRSTUVWXYZ&+-.;<=>?!^_|~ijklmnopqrstuvwxyzABCDEFGH`#\"\\ "
CHECKSUM_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
CHECKSUM_GENERATOR = (0xF5DEE51989, 0xA9FDCA3312, 0x1BAB10E32D, 0x3706B1677A, 0x644D626FFD)
CHECKSUM_LENGTH = 8
CHECKSUM_DIVIDER = "#"

# characters accepted in key and script expressions
# INPUT_CHARSET without the double quote and backslash
ALLOWED_CHARSET = "".join(c for c in INPUT_CHARSET if c not in "\"\\")

SPACE = " "
HEXDIGITS = "0123456789abcdefABCDEF"

#### Keys

HEX_PUBKEY_PREFIXES = ("02", "03", "04")
HEX_PUBKEY_COMPRESSED_LEN = 66
HEX_PUBKEY_UNCOMPRESSED_LEN = 130

EXTENDED_KEY_PREFIXES = ("xpub", "xprv")

# https://en.bitcoin.it/wiki/Wallet_import_format
WIF_VERSION_MAINNET = 0x80
WIF_COMPRESSED_FLAG = 0x01
WIF_UNCOMPRESSED_LEN = 37  # version + key + checksum
WIF_COMPRESSED_LEN = 38  # version + key + compressed flag + checksum

FINGERPRINT_HEX_LEN = 8

#### BIP32
## https://github.com/bitcoin/bips/blob/master/bip-0032.mediawiki#serialization-format

VERSION_PUBLIC_MAINNET = b"\x04\x88\xb2\x1e"
VERSION_PRIVATE_MAINNET = b"\x04\x88\xad\xe4"
VERSION_PUBLIC_TESTNET = b"\x04\x35\x87\xcf"
VERSION_PRIVATE_TESTNET = b"\x04\x35\x83\x94"

HARDENED_OFFSET = 0x80000000
MAX_INDEX = HARDENED_OFFSET - 1
MAX_DEPTH = 0xFF

EXTENDED_KEY_LEN = 78
MIN_SEED_LEN = 16
MAX_SEED_LEN = 64

NULL_FINGERPRINT = b"\x00" * 4
