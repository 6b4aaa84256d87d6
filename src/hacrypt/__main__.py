"""The Command Line Interface for the toolkit, for demonstrating the schemes end to end.

Keys are kept in PEM files, integers are printed in decimal and pairs as two comma-separated decimals. Signing and
verification hash the message text first.

Typical usage example:

    hacrypt keygen --scheme dsa --bits 512 -p dsa.pub -P dsa.pem
    hacrypt sign -P dsa.pem --message "Hi there!"
    OR
    python -m hacrypt encrypt -p rsa.pub --message 65
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import argparse
import logging
import pathlib
import sys
import typing

from pyasn1 import error

import hacrypt
from hacrypt import schemes
from hacrypt import serialize
from hacrypt.bigint import BigInt
from hacrypt.entropy import RandomSource
from hacrypt.entropy import SeededRandomSource
from hacrypt.entropy import SystemRandomSource
from hacrypt.errors import HacryptError
from hacrypt.hashing import HASH_FUNCS
from hacrypt.hashing import digest
from hacrypt.keys import Scheme
from hacrypt.keys import scheme_of


class HelpData(typing.NamedTuple):
    description: str
    format: typing.Type = str
    choices: list[str] | None = None
    default: typing.Any = None


help_dict: dict[str, HelpData] = {
    "keygen": HelpData("Key generation utility."),
    "encrypt": HelpData("Encryption utility."),
    "decrypt": HelpData("Decryption utility."),
    "sign": HelpData("Signing utility."),
    "verify": HelpData("Signature verification utility."),
    "public_key": HelpData(description="Location of the public key file.", format=pathlib.Path),
    "private_key": HelpData(description="Location of the private key file.", format=pathlib.Path),
    "scheme": HelpData(description="Public-key scheme.", choices=[s.value for s in Scheme], default="rsa"),
    "bits": HelpData(description="Modulus size (in bits).", format=int, default=1024),
    "safe_prime": HelpData(description="Use a safe prime modulus (ElGamal only)."),
    "seed": HelpData(description="Seed for a reproducible random source. Demonstration only!"),
    "plaintext": HelpData(description="Integer plaintext, decimal or 0x-prefixed hexadecimal.", format=BigInt),
    "ciphertext": HelpData(description="Ciphertext as printed by encrypt."),
    "message": HelpData(description="Message text to sign or verify."),
    "signature": HelpData(description="Signature as printed by sign."),
    "sha": HelpData(description="Hash function for the message digest.", choices=list(HASH_FUNCS), default="sha256"),
    "overwrite": HelpData(description="Overwrite specified destination files if they exist."),
}

pubkey = argparse.ArgumentParser(add_help=False)
pubkey.add_argument("--public-key", "-p", type=help_dict["public_key"].format, required=True,
                    help=help_dict["public_key"].description)
privkey = argparse.ArgumentParser(add_help=False)
privkey.add_argument("--private-key", "-P", type=help_dict["private_key"].format, required=True,
                     help=help_dict["private_key"].description)
seeded = argparse.ArgumentParser(add_help=False)
seeded.add_argument("--seed", help=help_dict["seed"].description)
sha = argparse.ArgumentParser(add_help=False)
sha.add_argument("--sha", "-s", choices=help_dict["sha"].choices, default=help_dict["sha"].default,
                 help=help_dict["sha"].description)
textmsg = argparse.ArgumentParser(add_help=False)
textmsg.add_argument("--message", "-m", required=True, help=help_dict["message"].description)
corep = argparse.ArgumentParser(prog="hacrypt")
corep.add_argument("--version", "-v", action="version", version=f"%(prog)s {hacrypt.__version__}")
corep.add_argument("--verbose", action="store_true", help="Log debug output to stderr")
commands = corep.add_subparsers(dest="subcommand", title="Subcommands", required=True)

keygen = commands.add_parser("keygen", parents=[pubkey, privkey, seeded], help=help_dict["keygen"].description)
keygen.add_argument("--scheme", choices=help_dict["scheme"].choices, default=help_dict["scheme"].default,
                    help=help_dict["scheme"].description)
keygen.add_argument("--bits", "-b", type=help_dict["bits"].format, default=help_dict["bits"].default,
                    help=help_dict["bits"].description)
keygen.add_argument("--safe-prime", action="store_true", help=help_dict["safe_prime"].description)
keygen.add_argument("--overwrite", "-o", action="store_true", help=help_dict["overwrite"].description)

encrypt = commands.add_parser("encrypt", parents=[pubkey, seeded], help=help_dict["encrypt"].description)
encrypt.add_argument("--message", "-m", dest="plaintext", type=help_dict["plaintext"].format, required=True,
                     help=help_dict["plaintext"].description)
decrypt = commands.add_parser("decrypt", parents=[privkey], help=help_dict["decrypt"].description)
decrypt.add_argument("--ciphertext", "-c", required=True, help=help_dict["ciphertext"].description)

sign = commands.add_parser("sign", parents=[privkey, textmsg, sha, seeded], help=help_dict["sign"].description)
verify = commands.add_parser("verify", parents=[pubkey, textmsg, sha], help=help_dict["verify"].description)
verify.add_argument("--signature", "-S", required=True, help=help_dict["signature"].description)


def make_rng(seed: str | None) -> RandomSource:
    return SystemRandomSource() if seed is None else SeededRandomSource(seed)


def format_value(value) -> str:
    """Decimal text of an integer, or comma-separated decimals of a pair."""
    if isinstance(value, tuple):
        return ",".join(str(BigInt(v)) for v in value)
    return str(value)


def parse_value(text: str) -> BigInt | tuple[BigInt, ...]:
    """Inverse of `format_value`."""
    parts = [BigInt(part) for part in text.split(",")]
    return parts[0] if len(parts) == 1 else tuple(parts)


def run(args: argparse.Namespace) -> int:
    """Executes a parsed command and returns the exit status."""
    match args.subcommand:
        case "keygen":
            if (args.private_key.exists() or args.public_key.exists()) and not args.overwrite:
                print("Destination private or public key already exists!", file=sys.stderr)
                return 1
            options = {"safe_prime": True} if args.safe_prime and args.scheme == "elgamal" else {}
            pair = schemes.generate_keypair(args.scheme, args.bits, make_rng(args.seed), **options)
            serialize.export_key(pair.private, args.private_key)
            serialize.export_key(pair.public, args.public_key)
            print(f"Generated {pair.scheme.value} key pair.")
        case "encrypt":
            pub = serialize.import_key(args.public_key)
            print(format_value(schemes.encrypt(scheme_of(pub), pub, args.plaintext, make_rng(args.seed))))
        case "decrypt":
            priv = serialize.import_key(args.private_key)
            print(format_value(schemes.decrypt(scheme_of(priv), priv, parse_value(args.ciphertext))))
        case "sign":
            priv = serialize.import_key(args.private_key)
            h = digest(args.message, args.sha)
            print(format_value(schemes.sign(scheme_of(priv), priv, h, make_rng(args.seed))))
        case "verify":
            pub = serialize.import_key(args.public_key)
            h = digest(args.message, args.sha)
            if not schemes.verify(scheme_of(pub), pub, h, parse_value(args.signature)):
                print("Signature Verification Failed!")
                return 1
            print("Signature Verified!")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Core Command Line Interface."""
    args = corep.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    try:
        return run(args)
    except (HacryptError, NotImplementedError, TypeError, ValueError, IOError, error.PyAsn1Error) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
