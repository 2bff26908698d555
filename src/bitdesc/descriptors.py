"""
Parse output descriptor script expressions
https://github.com/bitcoin/bips/blob/master/bip-0380.mediawiki

Supported:
    raw(HEX)
    pk(KEY)
    pkh(KEY)
    multi(k, KEY_1, KEY_2, ..., KEY_n)
    sh(pk(KEY)), sh(pkh(KEY)), sh(multi(k, KEY_1, ..., KEY_n))

with an optional #CHECKSUM suffix.
"""
import logging
import re
import typing

from bitdesc.bips.bip380 import assert_charset
from bitdesc.bips.bip380 import checksum_check
from bitdesc.bips.bip380 import descsum_create
from bitdesc.constants import ALLOWED_CHARSET
from bitdesc.constants import CHECKSUM_DIVIDER
from bitdesc.constants import CHECKSUM_LENGTH
from bitdesc.constants import SPACE
from bitdesc.errors import ArgCountError
from bitdesc.errors import ArgumentExtractionError
from bitdesc.errors import ChecksumLengthError
from bitdesc.errors import ChecksumMismatchError
from bitdesc.errors import EmptyInputError
from bitdesc.errors import ScriptGrammarError
from bitdesc.errors import UnsupportedShArgumentError
from bitdesc.hexadecimal import assert_hex_format
from bitdesc.hexadecimal import decode_hex
from bitdesc.keys import KeyExpression
from bitdesc.keys import parse_key_expression

log = logging.getLogger(__name__)

# pkh before pk, keywords are matched as literal prefixes
KEYWORDS = ("raw", "pkh", "pk", "multi", "sh")
SH_KEYWORDS = ("pkh", "pk", "multi")

INTEGER_RE = re.compile(r"(-?)([0-9]+)")


class Raw(typing.NamedTuple):
    data: bytes


class Pk(typing.NamedTuple):
    key: KeyExpression


class Pkh(typing.NamedTuple):
    key: KeyExpression


class Multi(typing.NamedTuple):
    threshold: int
    keys: typing.Tuple[KeyExpression, ...]


class Sh(typing.NamedTuple):
    # Pk, Pkh or Multi
    script: typing.Union[Pk, Pkh, Multi]


ScriptExpression = typing.Union[Raw, Pk, Pkh, Multi, Sh]


def split_checksum(expr: str) -> typing.Tuple[str, typing.Optional[str]]:
    """
    Split expression on the first '#' into (script, checksum)

    >>> split_checksum("raw(deadbeef)#89f8spxm")
    ('raw(deadbeef)', '89f8spxm')
    """
    script, divider, checksum = expr.partition(CHECKSUM_DIVIDER)
    return script, checksum if divider else None


def match_keyword(script: str) -> typing.Optional[str]:
    for keyword in KEYWORDS:
        if script.startswith(keyword):
            return keyword
    return None


def split_args(interior: str, keyword: str) -> typing.List[str]:
    """
    Split on commas that are not nested inside parentheses, trimming each argument
    """
    args = []
    depth = 0
    current = ""
    for char in interior:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise ArgumentExtractionError(
                    f"argument extraction failed for '{keyword}': unbalanced parentheses"
                )
        if char == "," and depth == 0:
            args.append(current.strip(SPACE))
            current = ""
        else:
            current += char
    if depth != 0:
        raise ArgumentExtractionError(
            f"argument extraction failed for '{keyword}': unbalanced parentheses"
        )
    args.append(current.strip(SPACE))
    return args


def extract_args(keyword: str, script: str) -> typing.List[str]:
    """
    Extract the arguments of keyword(ARG_1, ..., ARG_n) from script
    """
    rest = script[len(keyword) :].strip(SPACE)
    if not (rest.startswith("(") and rest.endswith(")")):
        raise ArgumentExtractionError(f"argument extraction failed for '{keyword}'")
    args = split_args(rest[1:-1].strip(SPACE), keyword)
    log.trace(f"{keyword} args: {args}")
    return args


def assert_arg_count(keyword: str, args: typing.List[str], count: int = 1):
    if len(args) != count:
        raise ArgCountError(
            f"'{keyword}' expects {count} argument(s), but {len(args)} were given"
        )


def parse_raw(args: typing.List[str]) -> Raw:
    assert_arg_count("raw", args)
    return Raw(decode_hex(assert_hex_format(args[0], "raw argument")))


def parse_pk(args: typing.List[str]) -> Pk:
    assert_arg_count("pk", args)
    return Pk(parse_key_expression(args[0]))


def parse_pkh(args: typing.List[str]) -> Pkh:
    assert_arg_count("pkh", args)
    return Pkh(parse_key_expression(args[0]))


def parse_multi(args: typing.List[str]) -> Multi:
    threshold, keys = args[0], args[1:]
    match = INTEGER_RE.fullmatch(threshold)
    if not match:
        raise ArgCountError(f"multi threshold '{threshold}' is not an integer")
    sign, digits = match.group(1), match.group(2).lstrip("0") or "0"
    if sign and digits != "0":
        raise ArgCountError(f"multi threshold {threshold} can not be negative")
    # no int() on digit runs longer than the key count can be
    if len(digits) > len(str(len(keys))) or int(digits) > len(keys):
        raise ArgCountError(
            f"multi threshold {threshold} exceeds actual args count {len(keys)}"
        )
    k = int(digits)
    return Multi(k, tuple(parse_key_expression(key) for key in keys))


def parse_sh(args: typing.List[str]) -> Sh:
    assert_arg_count("sh", args)
    if match_keyword(args[0]) not in SH_KEYWORDS:
        raise UnsupportedShArgumentError(
            f"unsupported sh argument '{args[0]}', expected pk, pkh or multi"
        )
    return Sh(parse_script(args[0]))


SCRIPT_PARSERS = {
    "raw": parse_raw,
    "pk": parse_pk,
    "pkh": parse_pkh,
    "multi": parse_multi,
    "sh": parse_sh,
}


def parse_script(script: str) -> ScriptExpression:
    """
    Parse script expression (without checksum) into its tree
    """
    assert_charset(script, charset=ALLOWED_CHARSET, name="script")
    script = script.strip(SPACE)
    keyword = match_keyword(script)
    if keyword is None:
        raise ScriptGrammarError(f"parsing of the script failed: '{script}'")
    return SCRIPT_PARSERS[keyword](extract_args(keyword, script))


def checksum_policy(
    script: str,
    checksum: typing.Optional[str] = None,
    compute: bool = False,
    verify: bool = False,
) -> str:
    """
    Apply checksum computation / verification to a validated script

    Args:
        script: str, validated script expression (without #)
        checksum: Optional[str], checksum following '#', if provided
        compute: bool, ignore checksum and return SCRIPT#CHECKSUM with a new checksum
        verify: bool, checksum must be present and valid
    """
    if compute and verify:
        raise ValueError("compute and verify are mutually exclusive")
    if compute:
        return descsum_create(script)
    if verify and checksum is None:
        raise ChecksumLengthError("checksum required for verification")
    if checksum is None:
        return script
    if len(checksum) != CHECKSUM_LENGTH:
        raise ChecksumLengthError("checksum length is incorrect")
    if verify:
        if not checksum_check(script, checksum):
            raise ChecksumMismatchError("checksum verification failed")
        return f"OK: {script}{CHECKSUM_DIVIDER}{checksum}"
    return script + CHECKSUM_DIVIDER + checksum


def script_expression(expr: str, compute: bool = False, verify: bool = False) -> str:
    """
    Validate script expression SCRIPT[#CHECKSUM] and apply checksum policy

    Returns:
        SCRIPT, SCRIPT#CHECKSUM or an OK message when verifying
    """
    if not expr:
        raise EmptyInputError("Input is empty")
    script, checksum = split_checksum(expr)
    tree = parse_script(script)
    log.debug(f"parsed {type(tree).__name__} script expression")
    return checksum_policy(script.strip(SPACE), checksum, compute=compute, verify=verify)
