import random

import pytest

from bitdesc.bips.bip380 import checksum_check
from bitdesc.bips.bip380 import checksum_create
from bitdesc.bips.bip380 import checksum_expand
from bitdesc.bips.bip380 import descsum_create
from bitdesc.constants import INPUT_CHARSET
from bitdesc.errors import InvalidCharacterError

XPUB_1 = "xpub661MyMwAqRbcFtXgS5sYJABqqG9YLmC4Q1Rdap9gSE8NqtwybGhePY2gZ29ESFjqJoCu1Rupje8YtGqsefD265TMg7usUDFdp6W1EGMcet8"
XPUB_2 = "xpub661MyMwAqRbcFW31YEwpkMuc5THy2PSt5bDMsktWQcFF8syAmRUapSCGu8ED9W6oDMSgv6Zz8idoc4a6mr8BDzTJY47LJhkJ8UB7WEGuduB"


CHECKSUM_VECTORS = [
    ("raw(deadbeef)", "89f8spxm"),
    ("raw( deadbeef )", "985dv2zl"),
    ("raw(DEAD BEEF)", "qqn7ll2h"),
    ("raw(DEA D BEEF)", "egs9fwsr"),
    (f"pkh({XPUB_1})", "vm4xc4ed"),
    (f"pkh(   {XPUB_1})", "ujpe9npc"),
    (f"multi(2, {XPUB_1}, {XPUB_2})", "5jlj4shz"),
]


@pytest.mark.parametrize("script, checksum", CHECKSUM_VECTORS)
def test_checksum_create(script, checksum):
    assert checksum_create(script) == checksum


@pytest.mark.parametrize("script, checksum", CHECKSUM_VECTORS)
def test_checksum_check(script, checksum):
    assert checksum_check(script, checksum)


@pytest.mark.parametrize(
    "script, checksum",
    [
        ("raw(deadbeef)", "89f8spxn"),  # last character changed
        ("raw(deadbeee)", "89f8spxm"),  # script changed
        ("raw(deadbeef)", "89f8spx"),  # too short
        ("raw(deadbeef)", "89f8spxmm"),  # too long
        ("raw(deadbeef)", "89f8spxb"),  # 'b' not in checksum charset
    ],
)
def test_checksum_check_invalid(script, checksum):
    assert not checksum_check(script, checksum)


def test_descsum_create():
    assert descsum_create("raw(deadbeef)") == "raw(deadbeef)#89f8spxm"


@pytest.mark.parametrize("seed", range(20))
def test_checksum_roundtrip_generated(seed):
    rng = random.Random(seed)
    for _ in range(50):
        s = "".join(rng.choice(INPUT_CHARSET) for _ in range(rng.randint(0, 120)))
        checksum = checksum_create(s)
        assert checksum_check(s, checksum)
        assert not checksum_check(s + "0", checksum)


def test_checksum_expand():
    # 'a' -> 18 (group 0), '(' -> 10 (group 0), trailing group symbol
    assert checksum_expand("a(") == [18, 10, 0]


def test_checksum_expand_invalid_character():
    with pytest.raises(InvalidCharacterError):
        checksum_expand("raw(dead\tbeef)")
