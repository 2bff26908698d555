"""
Derivation path grammar shared by key origins, extended key suffixes and derive-key

    path    = *( "/" segment ) [ "/" wildcard ]
    segment = 1*DIGIT [ "h" / "H" / "'" ]     ; value in [0, 2^31 - 1]
    wildcard = "*" [ "h" / "H" / "'" ]        ; extended key suffix only
"""
import logging
import re
import typing

from bitdesc.constants import HARDENED_OFFSET
from bitdesc.constants import MAX_INDEX
from bitdesc.errors import PathSegmentError

log = logging.getLogger(__name__)

HARDENED_MARKERS = ("h", "H", "'")
SEPARATOR = "/"
WILDCARD = "*"
ROOT = "m"

SEGMENT_RE = re.compile(r"([0-9]+)([hH']?)")


class PathSegment(typing.NamedTuple):
    index: int
    hardened: bool = False

    @property
    def child_number(self) -> int:
        """
        BIP32 child number, i.e. index + 2^31 for hardened segments
        """
        return self.index + HARDENED_OFFSET if self.hardened else self.index

    def __str__(self):
        return f"{self.index}h" if self.hardened else str(self.index)


class DerivationPath(typing.NamedTuple):
    segments: typing.Tuple[PathSegment, ...] = ()
    # None, "*" (unhardened) or "*h" (hardened)
    wildcard: typing.Optional[str] = None

    def __str__(self):
        parts = [str(segment) for segment in self.segments]
        if self.wildcard:
            parts.append(self.wildcard)
        return "".join(SEPARATOR + part for part in parts)


def parse_segment(segment: str) -> PathSegment:
    """
    Parse a single path element, e.g. "0", "44h", "1'"

    >>> parse_segment("44'")
    PathSegment(index=44, hardened=True)
    """
    if not segment:
        raise PathSegmentError("empty derivation path segment")
    match = SEGMENT_RE.fullmatch(segment)
    if not match:
        raise PathSegmentError(f"invalid derivation path segment '{segment}'")
    # leading zeros do not change the value, bound the length before int()
    digits = match.group(1).lstrip("0") or "0"
    if len(digits) > len(str(MAX_INDEX)) or int(digits) > MAX_INDEX:
        raise PathSegmentError(
            f"derivation path segment '{segment}' out of range [0, {MAX_INDEX}]"
        )
    return PathSegment(int(digits), hardened=bool(match.group(2)))


def parse_wildcard(segment: str) -> typing.Optional[str]:
    """
    Return normalized wildcard ("*" or "*h") if segment is one, else None
    """
    if segment == WILDCARD:
        return WILDCARD
    if len(segment) == 2 and segment[0] == WILDCARD and segment[1] in HARDENED_MARKERS:
        return WILDCARD + "h"
    return None


def parse_path(path: str, allow_wildcard: bool = False) -> DerivationPath:
    """
    Parse a sequence of /NUM or /NUMh elements

    Args:
        path: str, e.g. "/0h/1/2", empty string for an empty path
        allow_wildcard: bool, permit a final /* or /*h element (extended key suffix)
    Returns:
        DerivationPath
    """
    if not path:
        return DerivationPath()
    if not path.startswith(SEPARATOR):
        raise PathSegmentError(f"derivation path '{path}' must start with '{SEPARATOR}'")
    if SEPARATOR * 2 in path:
        raise PathSegmentError(f"double separator in derivation path '{path}'")

    elements = path[1:].split(SEPARATOR)
    wildcard = parse_wildcard(elements[-1])
    if wildcard is not None:
        if not allow_wildcard:
            raise PathSegmentError(f"wildcard not allowed in derivation path '{path}'")
        elements = elements[:-1]
    for element in elements:
        if parse_wildcard(element) is not None:
            raise PathSegmentError(
                f"wildcard must be the final element of derivation path '{path}'"
            )

    segments = tuple(parse_segment(element) for element in elements)
    log.trace(f"parsed derivation path {path!r} -> {segments}, wildcard={wildcard}")
    return DerivationPath(segments, wildcard)


def parse_derivation_argument(path: str) -> DerivationPath:
    """
    Parse a derive-key path argument. The leading / and m root marker are optional,
    e.g. "0h/1", "/0h/1" or "m/0h/1"
    """
    if path == ROOT or path.startswith(ROOT + SEPARATOR):
        path = path[len(ROOT) :]
    if path and not path.startswith(SEPARATOR):
        path = SEPARATOR + path
    return parse_path(path)
