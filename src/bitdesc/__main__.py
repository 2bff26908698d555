"""
bitdesc cli
"""
import argparse
import os
import sys

import bitdesc
from bitdesc import __version__
from bitdesc.config import Config
from bitdesc.config import LOG_LEVELS
from bitdesc.descriptors import script_expression
from bitdesc.errors import DescriptorError
from bitdesc.keys import validate_key_expression
from bitdesc.wallet.hd import derive_key

STDIN = "-"


class RawDescriptionDefaultsHelpFormatter(
    argparse.RawDescriptionHelpFormatter, argparse.ArgumentDefaultsHelpFormatter
):
    pass


class ExplicitOption(argparse.Action):
    """
    Custom Action used for checking whether an option has been set explicitly
    (rather than by default)
    """

    def __call__(self, parser, namespace, values, option_string=None):
        setattr(namespace, self.dest, values)
        setattr(namespace, self.dest + "__explicit", True)


class ExplicitFlag(ExplicitOption):
    """
    store_true variant of ExplicitOption
    """

    def __init__(self, option_strings, dest, default=False, required=False, help=None):
        super().__init__(
            option_strings, dest, nargs=0, default=default, required=required, help=help
        )

    def __call__(self, parser, namespace, values, option_string=None):
        super().__call__(parser, namespace, True, option_string=option_string)


def add_common_arguments(parser: argparse.ArgumentParser):
    parser.add_argument(
        "--config-dir",
        type=str,
        action=ExplicitOption,
        help="Directory to look for optional config file (config.toml or config.json). "
        + "TOML will take precedence over JSON if both files are defined, "
        + "but TOML is only available for python 3.11+ ",
        default=os.path.join(os.path.expanduser("~"), ".bitdesc"),
    )
    parser.add_argument(
        "-L",
        "--log-level",
        default="error",
        action=ExplicitOption,
        metavar="LOG_LEVEL",
        choices=LOG_LEVELS,
        help="log level, e.g. 'trace', 'debug', 'info', 'warning', or 'error'",
    )


def add_input_arguments(parser: argparse.ArgumentParser, metavar: str, help: str):
    parser.add_argument(
        "values",
        nargs="*",
        metavar=metavar,
        help=help + f". Use '{STDIN}' to read inputs from stdin, one per line",
    )


def setup_parser() -> argparse.ArgumentParser:
    """
    Setup argument parser
    Returns:
        argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="bitdesc",
        description="""bitdesc validates Bitcoin output descriptor fragments (BIP380).

Each input is processed in order and its result printed on its own line.
The first invalid input prints 'Parsing error: <message>' to stderr and exits with
status 1.

Examples:
    $ bitdesc key-expression "[deadbeef/0h/0h/0h]0260b2003c386519fc9eadf2b5cf124dd8eea4c4e68d5e154050a9346ea98ce600"

    $ bitdesc script-expression "raw(deadbeef)" --compute-checksum

    $ echo 000102030405060708090a0b0c0d0e0f | bitdesc derive-key - --path 0h/1
""",
        formatter_class=RawDescriptionDefaultsHelpFormatter,
    )
    parser.add_argument("-v", "-V", "--version", action="version", version=__version__)

    sub_parser = parser.add_subparsers(
        dest="subcommand",
        metavar="[subcommand]",
        description="""
Use bitdesc <subcommand> -h for help on each command""",
    )

    derive_key_parser = sub_parser.add_parser(
        "derive-key",
        help="Derive extended keys from xpub, xprv or seed",
        formatter_class=RawDescriptionDefaultsHelpFormatter,
        description="""
Derive an extended key pair (BIP32) from an xpub, an xprv, or a hex encoded seed.

Seeds may be split into groups of hex digits by spaces or tabs, but each group must
have an even number of digits. Output is '<xpub>:<xprv>', or '<xpub>:' when the input
is an xpub.""",
    )
    add_input_arguments(derive_key_parser, "VALUE", "xpub, xprv, or hex seed")
    derive_key_parser.add_argument(
        "--path",
        "-p",
        type=str,
        default="",
        action=ExplicitOption,
        help="derivation path, e.g. 0h/1/2 (h, H or ' mark hardened steps)",
    )
    add_common_arguments(derive_key_parser)

    key_expression_parser = sub_parser.add_parser(
        "key-expression",
        help="Validate key expressions",
        formatter_class=RawDescriptionDefaultsHelpFormatter,
        description="""
Validate key expressions, i.e. [ORIGIN]KEY where KEY is a hex encoded public key,
a WIF encoded private key, or an xpub / xprv with optional derivation steps.

Valid expressions are echoed back unchanged.""",
    )
    add_input_arguments(key_expression_parser, "EXPR", "key expression")
    add_common_arguments(key_expression_parser)

    script_expression_parser = sub_parser.add_parser(
        "script-expression",
        help="Validate script expressions",
        formatter_class=RawDescriptionDefaultsHelpFormatter,
        description="""
Validate script expressions raw, pk, pkh, multi and sh, with an optional #CHECKSUM.

    --compute-checksum  ignore any checksum and print SCRIPT#CHECKSUM
    --verify-checksum   require a valid checksum and print OK: SCRIPT#CHECKSUM""",
    )
    add_input_arguments(script_expression_parser, "EXPR", "script expression")
    checksum_group = script_expression_parser.add_mutually_exclusive_group()
    checksum_group.add_argument(
        "--verify-checksum",
        action=ExplicitFlag,
        help="require and verify the checksum",
    )
    checksum_group.add_argument(
        "--compute-checksum",
        action=ExplicitFlag,
        help="compute the checksum",
    )
    add_common_arguments(script_expression_parser)
    return parser


def main():
    parser = setup_parser()
    args = parser.parse_args()
    if not args.subcommand:
        parser.error("a subcommand is required")

    try:
        config = Config(**vars(args))
        config.load_config(config_dir=args.config_dir)
        explicit_options = {
            option: value
            for option, value in vars(args).items()
            if getattr(args, option + "__explicit", False)
        }
        if explicit_options.get("compute_checksum"):
            explicit_options["verify_checksum"] = False
        elif explicit_options.get("verify_checksum"):
            explicit_options["compute_checksum"] = False
        config.update(**explicit_options)
    except ValueError as err:
        parser.error(str(err))
    log = bitdesc.init_logging(config.log_level)

    if STDIN in args.values:
        inputs = bitdesc.read_inputs()
    elif args.values:
        inputs = args.values
    else:
        parser.error("no input provided")

    if args.subcommand == "derive-key":
        process = lambda value: derive_key(value, path=config.path or None)
    elif args.subcommand == "key-expression":
        process = validate_key_expression
    elif args.subcommand == "script-expression":
        process = lambda value: script_expression(
            value, compute=config.compute_checksum, verify=config.verify_checksum
        )
    else:
        raise ValueError("command not recognized")

    for value in inputs:
        log.info(f"{args.subcommand}: {value}")
        try:
            result = process(value)
        except DescriptorError as err:
            sys.stderr.write(f"{err}{os.linesep}")
            sys.exit(1)
        print(result, flush=True)


if __name__ == "__main__":
    main()
