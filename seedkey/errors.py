"""Error taxonomy for seedkey.

Every failure the pipeline can hit surfaces as a subclass of
:class:`SeedKeyError`. Input-validation errors also subclass
``ValueError`` so callers that only care about "bad input" can catch that.
"""

from __future__ import annotations

from pathlib import Path


class SeedKeyError(Exception):
    """Base class for all seedkey errors."""


# ---- mnemonic input -------------------------------------------------------


class MnemonicError(SeedKeyError, ValueError):
    """The mnemonic phrase is not a valid BIP39 phrase."""


class InvalidWordCount(MnemonicError):
    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(
            f"Invalid mnemonic word count: {count} "
            "(expected 12, 15, 18, 21 or 24)"
        )


class UnknownWord(MnemonicError):
    def __init__(self, word: str, position: int) -> None:
        self.word = word
        self.position = position
        super().__init__(f"Unknown mnemonic word at position {position}: {word!r}")


class ChecksumMismatch(MnemonicError):
    def __init__(self) -> None:
        super().__init__("Mnemonic checksum does not match")


# ---- randomness -----------------------------------------------------------


class EntropyError(SeedKeyError):
    """The randomness source could not deliver."""


class InsufficientEntropy(EntropyError):
    def __init__(self, requested: int, received: int = 0, reason: str | None = None) -> None:
        self.requested = requested
        self.received = received
        msg = f"Could not read {requested} random bytes (got {received})"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


# ---- derivation / encoding ------------------------------------------------


class UnsupportedAlgorithm(SeedKeyError, ValueError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Key algorithm not supported yet: {name}")


class EncodingError(SeedKeyError):
    """An internal invariant was violated while building key material."""


class UnsupportedCipher(EncodingError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unsupported cipher: {name}")


# ---- reading key files ----------------------------------------------------


class KeyFormatError(SeedKeyError, ValueError):
    """The input is not a well-formed OpenSSH key."""


class PassphraseRequired(KeyFormatError):
    def __init__(self) -> None:
        super().__init__("Private key is encrypted; a passphrase is required")


class DecryptionIntegrityError(KeyFormatError):
    def __init__(self) -> None:
        super().__init__("Check integers differ after decryption (wrong passphrase?)")


# ---- output sink ----------------------------------------------------------


class OverwriteRefused(SeedKeyError):
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(f"{self.path} already exists, not overwriting")
