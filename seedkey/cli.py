"""Command line interface: ``seedkey ssh -t ed25519 [...]``."""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from . import __version__
from . import mnemonic as bip39
from .config import Settings
from .entropy import RandomSource
from .errors import SeedKeyError
from .keys import require_implemented
from .pipeline import KeyRequest, run
from .storage import KeyFiles

logger = logging.getLogger(__name__)


class PassphraseMismatch(SeedKeyError):
    def __init__(self) -> None:
        super().__init__("Passphrases do not match")


def ask(question: str, default: bool = False) -> bool:
    """Yes/no prompt on the terminal."""
    suffix = " [Y/n] " if default else " [y/N] "
    answer = input(question + suffix).strip().lower()
    if not answer:
        return default
    return answer in ("y", "yes")


def prompt_passphrase() -> str:
    passphrase = getpass.getpass("Enter passphrase (empty for no passphrase): ")
    if passphrase and getpass.getpass("Enter same passphrase again: ") != passphrase:
        raise PassphraseMismatch()
    return passphrase


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="seedkey",
        description="Deterministically derive key pairs from a BIP39 mnemonic.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    commands = parser.add_subparsers(dest="command", required=True)
    ssh = commands.add_parser("ssh", help="Generate an SSH key pair")
    ssh.add_argument(
        "-t", "--key-type",
        default=settings.KEY_TYPE,
        required=settings.KEY_TYPE is None,
        help="Type of key to generate (ed25519) [env: KEY_TYPE]",
    )
    ssh.add_argument(
        "-N", "--no-passphrase",
        action="store_true",
        default=settings.NO_PASSPHRASE,
        help="Use an empty BIP39 passphrase [env: NO_PASSPHRASE]",
    )
    ssh.add_argument(
        "-p", "--passphrase",
        default=settings.PASSPHRASE,
        help="BIP39 passphrase mixed into the seed; prompted if empty [env: PASSPHRASE]",
    )
    ssh.add_argument(
        "--key-passphrase",
        default=settings.KEY_PASSPHRASE,
        help="Encrypt the private key file with this passphrase [env: KEY_PASSPHRASE]",
    )
    ssh.add_argument(
        "-o", "--output-dir",
        type=Path,
        default=settings.OUTPUT_DIR,
        help="Directory to save the key in [env: OUTPUT_DIR]",
    )
    ssh.add_argument(
        "-f", "--output-name",
        default=settings.OUTPUT_NAME,
        help="File name of the key, default id_<key-type> [env: OUTPUT_NAME]",
    )
    ssh.add_argument(
        "-m", "--mnemonic",
        default=settings.MNEMONIC,
        help="Mnemonic words separated by spaces; generated if empty [env: MNEMONIC]",
    )
    ssh.add_argument(
        "-w", "--words",
        type=int,
        choices=bip39.WORD_COUNTS,
        default=settings.WORDS,
        help="Length of a generated mnemonic [env: WORDS]",
    )
    ssh.add_argument(
        "-C", "--comment",
        default=settings.COMMENT,
        help="Comment for the key [env: COMMENT]",
    )
    ssh.add_argument(
        "-y", "--yes",
        action="store_true",
        help="Do not ask before overwriting files or accepting a generated mnemonic",
    )
    return parser


def _obtain_mnemonic(args: argparse.Namespace, rng: Optional[RandomSource]) -> str:
    if args.mnemonic.strip():
        return args.mnemonic

    print("No mnemonic provided, generating one for you")
    while True:
        phrase = bip39.generate(args.words, rng)
        print(f"Your {phrase.word_count} words mnemonic is:")
        print(f"  {phrase.phrase}")
        print("Please write it down and store it in a safe place")
        if args.yes or not ask("Do you want to regenerate a new mnemonic?"):
            return phrase.phrase


def _bip39_passphrase(args: argparse.Namespace) -> str:
    if args.no_passphrase:
        return ""
    if args.passphrase:
        return args.passphrase
    return prompt_passphrase()


def _confirm_overwrite(args: argparse.Namespace):
    if args.yes:
        return lambda path: True
    return lambda path: ask(f"{path} already exists, overwrite?")


def run_ssh(args: argparse.Namespace, rng: Optional[RandomSource] = None) -> int:
    algorithm = require_implemented(args.key_type)
    phrase = _obtain_mnemonic(args, rng)
    passphrase = _bip39_passphrase(args)

    result = run(
        KeyRequest(
            mnemonic=phrase,
            bip39_passphrase=passphrase,
            encryption_passphrase=args.key_passphrase,
            comment=args.comment,
            algorithm=algorithm,
        ),
        rng=rng,
    )

    files = KeyFiles(
        args.output_dir,
        args.output_name or f"id_{algorithm.value}",
        confirm=_confirm_overwrite(args),
    )
    private_path, public_path = files.save(result.encoded)

    print(f"Your identification has been saved in {private_path}")
    print(f"Your public key has been saved in {public_path}")
    print("The key fingerprint is:")
    print(f"{result.fingerprint} {args.comment}".rstrip())
    return 0


def main(
    argv: Optional[Sequence[str]] = None,
    settings: Optional[Settings] = None,
    rng: Optional[RandomSource] = None,
) -> int:
    try:
        settings = settings if settings is not None else Settings.from_env()
    except ValueError as exc:
        print(f"seedkey: {exc}", file=sys.stderr)
        return 2
    args = build_parser(settings).parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "ssh":
            return run_ssh(args, rng)
    except (SeedKeyError, OSError) as exc:
        print(f"seedkey: {exc}", file=sys.stderr)
        return 1
    except EOFError:
        print("seedkey: no input available for a prompt", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Aborted", file=sys.stderr)
        return 130
    return 2


if __name__ == "__main__":
    sys.exit(main())
