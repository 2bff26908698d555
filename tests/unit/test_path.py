import pytest

from bitdesc.constants import HARDENED_OFFSET
from bitdesc.errors import PathSegmentError
from bitdesc.path import DerivationPath
from bitdesc.path import PathSegment
from bitdesc.path import parse_derivation_argument
from bitdesc.path import parse_path
from bitdesc.path import parse_segment


@pytest.mark.parametrize(
    "segment, expected",
    [
        ("0", PathSegment(0)),
        ("44h", PathSegment(44, True)),
        ("44H", PathSegment(44, True)),
        ("44'", PathSegment(44, True)),
        ("2147483647", PathSegment(2147483647)),
        ("2147483647h", PathSegment(2147483647, True)),
        ("0" * 5000 + "1", PathSegment(1)),
        ("0" * 5000 + "h", PathSegment(0, True)),
        ("0" * 5000 + "2147483647", PathSegment(2147483647)),
    ],
)
def test_parse_segment(segment, expected):
    assert parse_segment(segment) == expected


@pytest.mark.parametrize(
    "segment",
    [
        "",
        "-0",
        "0f",
        "1aa",
        "h",
        "2147483648",
        "0hh",
        "+1",
        " 1",
        "0\n",
        "0h\n",
        "0" * 5000 + "2147483648",
        "1" + "0" * 5000,
    ],
)
def test_parse_segment_invalid(segment):
    with pytest.raises(PathSegmentError):
        parse_segment(segment)


def test_child_number():
    assert PathSegment(1, hardened=True).child_number == HARDENED_OFFSET + 1
    assert PathSegment(1).child_number == 1


def test_parse_path():
    path = parse_path("/0h/1/2H/3'")
    assert path.segments == (
        PathSegment(0, True),
        PathSegment(1),
        PathSegment(2, True),
        PathSegment(3, True),
    )
    assert path.wildcard is None
    assert str(path) == "/0h/1/2h/3h"
    assert parse_path("") == DerivationPath()


@pytest.mark.parametrize(
    "path, wildcard",
    [("/1/*", "*"), ("/1/*h", "*h"), ("/1/*H", "*h"), ("/1/*'", "*h"), ("/*", "*")],
)
def test_parse_path_wildcard(path, wildcard):
    assert parse_path(path, allow_wildcard=True).wildcard == wildcard


@pytest.mark.parametrize(
    "path, allow_wildcard",
    [
        ("0/1", False),  # missing leading separator
        ("/0//1", False),
        ("/0/1/", False),
        ("/", False),
        ("/0/*", False),
        ("/*/0", True),
        ("/0/**", True),
        ("/0/*/*", True),
    ],
)
def test_parse_path_invalid(path, allow_wildcard):
    with pytest.raises(PathSegmentError):
        parse_path(path, allow_wildcard=allow_wildcard)


def test_parse_derivation_argument():
    assert parse_derivation_argument("0h/1") == parse_derivation_argument("/0h/1")
    assert parse_derivation_argument("m/0h/1") == parse_derivation_argument("0h/1")
    assert parse_derivation_argument("m") == DerivationPath()
    assert parse_derivation_argument("") == DerivationPath()
    with pytest.raises(PathSegmentError):
        parse_derivation_argument("0/1/")
    with pytest.raises(PathSegmentError):
        parse_derivation_argument("0//1")
    with pytest.raises(PathSegmentError):
        parse_derivation_argument("0h\n")
