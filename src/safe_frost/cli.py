import argparse
import logging
import os
import sys
from typing import List, Optional
from . import commands, hexutil, info
from .errors import FrostError
from .root import DEFAULT_ROOT, Root
from .serialization import deserialize_scalar

log = logging.getLogger(__name__)


def parse_secret(value: str) -> int:
    try:
        secret = deserialize_scalar(hexutil.decode(value, 32))
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid secret: {e}")
    if secret == 0:
        raise argparse.ArgumentTypeError("invalid secret: must not be zero")
    return secret


def parse_message(value: str) -> bytes:
    try:
        return hexutil.decode(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid message: {e}")


def parse_index(value: str) -> int:
    try:
        index = int(value, 10)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid share index: {value!r}")
    if index < 0:
        raise argparse.ArgumentTypeError("invalid share index: must not be negative")
    return index


def split(args):
    commands.split(
        args.root,
        threshold=args.threshold,
        signers=args.signers,
        secret=args.secret,
        force=args.force,
        evm_check=not args.skip_evm_check,
    )


def commit(args):
    commands.commit(args.root, args.share_index)


def prepare(args):
    commands.prepare(args.root, args.message)


def sign(args):
    commands.sign(args.root, args.share_index)


def aggregate(args):
    commands.aggregate(args.root)


def verify(args):
    commands.verify(args.root)


def info_public_key(args):
    output = info.public_key(args.root, abi_encode=args.abi_encode)
    # ABI encoded output is consumed by tools, without a trailing newline
    print(output, end="" if args.abi_encode else "\n")


def info_signature(args):
    output = info.signature(
        args.root, with_public_key=args.with_public_key, abi_encode=args.abi_encode
    )
    print(output, end="" if args.abi_encode else "\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="safe-frost", description="Generate a FROST threshold signature."
    )
    parser.add_argument(
        "-R",
        "--root-directory",
        dest="root",
        type=Root,
        default=Root(os.environ.get("SAFE_FROST_ROOT", DEFAULT_ROOT)),
        help="The FROST root directory (default: $SAFE_FROST_ROOT or .frost).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    subparsers = parser.add_subparsers(dest="command")

    parser_split = subparsers.add_parser(
        "split", help="Generate a FROST public key and signing key shares."
    )
    parser_split.add_argument(
        "-k",
        "--secret",
        type=parse_secret,
        help="Secret key as a hex string, leave empty to generate a random one.",
    )
    parser_split.add_argument(
        "-t", "--threshold", type=int, default=3, help="Signer threshold."
    )
    parser_split.add_argument(
        "-n", "--signers", type=int, default=5, help="Signer count."
    )
    parser_split.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Overwrite existing public key and signing key share files.",
    )
    parser_split.add_argument(
        "--skip-evm-check",
        action="store_true",
        help="Accept public keys that the EVM verifier does not support.",
    )
    parser_split.set_defaults(func=split)

    parser_commit = subparsers.add_parser(
        "commit", help="Generate round-1 share nonces and commitments."
    )
    parser_commit.add_argument(
        "-i", "--share-index", type=parse_index, required=True, help="Share index."
    )
    parser_commit.set_defaults(func=commit)

    parser_prepare = subparsers.add_parser(
        "prepare", help="Generate the round-1 signing package."
    )
    parser_prepare.add_argument(
        "-m",
        "--message",
        type=parse_message,
        required=True,
        help="The message to sign as a hex string.",
    )
    parser_prepare.set_defaults(func=prepare)

    parser_sign = subparsers.add_parser(
        "sign", help="Generate a round-2 signature share."
    )
    parser_sign.add_argument(
        "-i", "--share-index", type=parse_index, required=True, help="Share index."
    )
    parser_sign.set_defaults(func=sign)

    parser_aggregate = subparsers.add_parser(
        "aggregate", help="Aggregate round-2 signature shares."
    )
    parser_aggregate.set_defaults(func=aggregate)

    parser_verify = subparsers.add_parser("verify", help="Verify a FROST signature.")
    parser_verify.set_defaults(func=verify)

    parser_info = subparsers.add_parser("info", help="Display information.")
    info_subparsers = parser_info.add_subparsers(dest="info_command")

    parser_public_key = info_subparsers.add_parser(
        "public-key", help="Display information of a FROST public key."
    )
    parser_public_key.add_argument(
        "-e",
        "--abi-encode",
        action="store_true",
        help="Output in Solidity ABI encoded format, for Foundry `ffi` cheatcodes.",
    )
    parser_public_key.set_defaults(func=info_public_key)

    parser_signature = info_subparsers.add_parser(
        "signature", help="Display information of a FROST signature."
    )
    parser_signature.add_argument(
        "-p",
        "--with-public-key",
        action="store_true",
        help="Include the public key.",
    )
    parser_signature.add_argument(
        "-e",
        "--abi-encode",
        action="store_true",
        help="Output in Solidity ABI encoded format, for Foundry `ffi` cheatcodes.",
    )
    parser_signature.set_defaults(func=info_signature)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    if not hasattr(args, "func"):
        parser.print_help()
        return 2

    try:
        args.func(args)
    except (FrostError, OSError, ValueError) as e:
        log.debug("%s failed", args.command, exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
