"""seedkey — deterministic SSH keys from a BIP39 mnemonic."""

__version__ = "0.1.0"

from .entropy import FixedRandom, SystemRandom
from .errors import (
    ChecksumMismatch,
    DecryptionIntegrityError,
    EncodingError,
    InsufficientEntropy,
    InvalidWordCount,
    KeyFormatError,
    OverwriteRefused,
    PassphraseRequired,
    SeedKeyError,
    UnknownWord,
    UnsupportedAlgorithm,
    UnsupportedCipher,
)
from .fingerprint import fingerprint
from .keys import Algorithm, KeyPair, derive
from .mnemonic import Mnemonic, generate, parse, to_seed
from .openssh import EncodedKey, decode_private_key, decode_public_key, encode
from .pipeline import KeyRequest, KeyResult, recover, run

__all__ = [
    "Algorithm",
    "ChecksumMismatch",
    "DecryptionIntegrityError",
    "EncodedKey",
    "EncodingError",
    "FixedRandom",
    "InsufficientEntropy",
    "InvalidWordCount",
    "KeyFormatError",
    "KeyPair",
    "KeyRequest",
    "KeyResult",
    "Mnemonic",
    "OverwriteRefused",
    "PassphraseRequired",
    "SeedKeyError",
    "SystemRandom",
    "UnknownWord",
    "UnsupportedAlgorithm",
    "UnsupportedCipher",
    "decode_private_key",
    "decode_public_key",
    "derive",
    "encode",
    "fingerprint",
    "generate",
    "parse",
    "recover",
    "run",
    "to_seed",
]
