"""
Configuration for the seedkey command line.

Every option can also come from the environment, using the upper-cased
option name (``KEY_TYPE``, ``OUTPUT_DIR``, ``MNEMONIC``, ...). Command line
flags override the environment.
"""

import getpass
import os
import socket
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

_TRUTHY = {"1", "true", "yes", "on"}


def default_output_dir() -> Path:
    """``~/.ssh``, or the current directory if there is no home."""
    try:
        home = Path.home()
    except RuntimeError:
        return Path()
    if not str(home) or str(home) == ".":
        return Path()
    return home / ".ssh"


def default_comment() -> str:
    """``user@hostname``, falling back to ``localhost`` for the host."""
    try:
        user = getpass.getuser()
    except (KeyError, OSError):
        user = "user"
    try:
        host = socket.gethostname() or "localhost"
    except OSError:
        host = "localhost"
    return f"{user}@{host}"


def _env_bool(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() in _TRUTHY


@dataclass
class Settings:
    """Settings for one ``seedkey ssh`` invocation."""

    # Key
    KEY_TYPE: Optional[str] = None
    WORDS: int = 12
    MNEMONIC: str = ""

    # BIP39 passphrase mixed into the seed
    NO_PASSPHRASE: bool = False
    PASSPHRASE: str = ""

    # Private key file encryption, off when empty
    KEY_PASSPHRASE: str = ""

    # Output
    OUTPUT_DIR: Path = field(default_factory=default_output_dir)
    OUTPUT_NAME: str = ""
    COMMENT: str = field(default_factory=default_comment)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables (``os.environ`` by default)."""
        env = os.environ if environ is None else environ
        settings = cls()
        if env.get("KEY_TYPE"):
            settings.KEY_TYPE = env["KEY_TYPE"]
        if env.get("WORDS"):
            try:
                settings.WORDS = int(env["WORDS"])
            except ValueError:
                raise ValueError(f"WORDS must be an integer, got {env['WORDS']!r}") from None
        settings.MNEMONIC = env.get("MNEMONIC", settings.MNEMONIC)
        settings.NO_PASSPHRASE = _env_bool(env.get("NO_PASSPHRASE"))
        settings.PASSPHRASE = env.get("PASSPHRASE", settings.PASSPHRASE)
        settings.KEY_PASSPHRASE = env.get("KEY_PASSPHRASE", settings.KEY_PASSPHRASE)
        if env.get("OUTPUT_DIR"):
            settings.OUTPUT_DIR = Path(env["OUTPUT_DIR"]).expanduser()
        settings.OUTPUT_NAME = env.get("OUTPUT_NAME", settings.OUTPUT_NAME)
        if env.get("COMMENT"):
            settings.COMMENT = env["COMMENT"]
        return settings
