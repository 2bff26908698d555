# Copyright (c) 2023 Jason Traub
# Distributed under the MIT License, see LICENSE.txt for details
"""
BIP380 output descriptors checksum
"""
# For the reference implementation of BIP380 output descriptor checksums,
# https://github.com/bitcoin/bips/blob/master/bip-0380.mediawiki
# https://github.com/bitcoin/bitcoin/blob/v25.0/test/functional/test_framework/descriptors.py
# Copyright (c) 2019 Pieter Wuille
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN
# THE SOFTWARE.
import logging
import typing

from bitdesc.constants import CHECKSUM_CHARSET
from bitdesc.constants import CHECKSUM_DIVIDER
from bitdesc.constants import CHECKSUM_GENERATOR
from bitdesc.constants import CHECKSUM_LENGTH
from bitdesc.constants import INPUT_CHARSET
from bitdesc.errors import InvalidCharacterError

log = logging.getLogger(__name__)


def assert_charset(s: str, charset: str = INPUT_CHARSET, name: str = "input"):
    """
    Raise InvalidCharacterError on the first character of s not found in charset
    """
    for c in s:
        if c not in charset:
            raise InvalidCharacterError(
                f"{name} contains invalid character {c!r}, expected one of \"{charset}\""
            )


def checksum_polymod(symbols: typing.Iterable[int]) -> int:
    """Internal function that computes the descriptor checksum."""
    chk = 1
    for value in symbols:
        top = chk >> 35
        chk = (chk & 0x7FFFFFFFF) << 5 ^ value
        for i in range(5):
            chk ^= CHECKSUM_GENERATOR[i] if ((top >> i) & 1) else 0
    return chk


def checksum_expand(s: str) -> typing.List[int]:
    """
    Internal function that does the character to symbol expansion

    >>> checksum_expand("a(")
    [18, 10, 0]
    """
    assert_charset(s)
    groups = []
    symbols = []
    for c in s:
        v = INPUT_CHARSET.find(c)
        symbols.append(v & 31)
        groups.append(v >> 5)
        if len(groups) == 3:
            symbols.append(groups[0] * 9 + groups[1] * 3 + groups[2])
            groups = []
    if len(groups) == 1:
        symbols.append(groups[0])
    elif len(groups) == 2:
        symbols.append(groups[0] * 3 + groups[1])
    return symbols


def checksum_create(s: str) -> str:
    """
    Compute the 8 character checksum of s

    >>> checksum_create("raw(deadbeef)")
    '89f8spxm'
    """
    symbols = checksum_expand(s) + [0] * CHECKSUM_LENGTH
    checksum = checksum_polymod(symbols) ^ 1
    log.trace(f"polymod for {s!r}: {checksum:#x}")
    return "".join(
        CHECKSUM_CHARSET[(checksum >> (5 * (7 - i))) & 31] for i in range(CHECKSUM_LENGTH)
    )


def checksum_check(s: str, checksum: str) -> bool:
    """
    Verify checksum against s (s without the '#' divider)

    >>> checksum_check("raw(deadbeef)", "89f8spxm")
    True
    """
    if len(checksum) != CHECKSUM_LENGTH:
        return False
    if not all(x in CHECKSUM_CHARSET for x in checksum):
        return False
    if not all(x in INPUT_CHARSET for x in s):
        return False
    symbols = checksum_expand(s) + [CHECKSUM_CHARSET.find(x) for x in checksum]
    return checksum_polymod(symbols) == 1


def descsum_create(s: str) -> str:
    """Add a checksum to a descriptor without"""
    return s + CHECKSUM_DIVIDER + checksum_create(s)

