"""BIP39 mnemonic phrases: generate, parse and stretch into a seed.

The English wordlist and the PBKDF2 seed function come from the
``mnemonic`` package (the Trezor reference implementation). Generation and
validation live here so that every failure maps to a named error and the
randomness source can be injected.

    phrase ──parse()──► Mnemonic ──to_seed(passphrase)──► 64-byte seed
    rng ──generate(n)──► Mnemonic

Nothing is ever auto-corrected: a phrase with a wrong word count, an unknown
word or a bad checksum is rejected.
"""

from __future__ import annotations

import hashlib
import unicodedata
from dataclasses import dataclass
from functools import lru_cache
from typing import Sequence

from mnemonic import Mnemonic as _Bip39

from .entropy import RandomSource, default_source
from .errors import ChecksumMismatch, InvalidWordCount, UnknownWord

WORD_COUNTS = (12, 15, 18, 21, 24)
SEED_LENGTH = 64
PBKDF2_ROUNDS = 2048

_BITS_PER_WORD = 11


@lru_cache(maxsize=1)
def _language() -> _Bip39:
    return _Bip39("english")


@lru_cache(maxsize=1)
def _index() -> dict[str, int]:
    return {word: i for i, word in enumerate(_language().wordlist)}


def wordlist() -> list[str]:
    """The 2048-word English BIP39 list."""
    return list(_language().wordlist)


def _entropy_bits(word_count: int) -> int:
    return word_count * _BITS_PER_WORD * 32 // 33


def _checksum(entropy: bytes) -> int:
    """First ENT/32 bits of SHA-256(entropy)."""
    cs_bits = len(entropy) * 8 // 32
    return hashlib.sha256(entropy).digest()[0] >> (8 - cs_bits)


def _validate(words: Sequence[str]) -> bytes:
    """Check count, wordlist membership then checksum. Returns the entropy.

    The first unknown word wins and positions are 0-based.
    """
    if len(words) not in WORD_COUNTS:
        raise InvalidWordCount(len(words))

    index = _index()
    value = 0
    for position, word in enumerate(words):
        if word not in index:
            raise UnknownWord(word, position)
        value = (value << _BITS_PER_WORD) | index[word]

    ent_bits = _entropy_bits(len(words))
    cs_bits = len(words) * _BITS_PER_WORD - ent_bits
    entropy = (value >> cs_bits).to_bytes(ent_bits // 8, "big")
    if value & ((1 << cs_bits) - 1) != _checksum(entropy):
        raise ChecksumMismatch()
    return entropy


@dataclass(frozen=True)
class Mnemonic:
    """A validated BIP39 phrase. Construct via :func:`parse` or :func:`generate`.

    Direct construction runs the same checks as :func:`parse`, so an
    instance always holds a phrase that is safe to stretch into a seed.
    """

    words: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "words", tuple(self.words))
        _validate(self.words)

    @property
    def word_count(self) -> int:
        return len(self.words)

    @property
    def phrase(self) -> str:
        return " ".join(self.words)

    @property
    def entropy(self) -> bytes:
        return _validate(self.words)

    def __repr__(self) -> str:
        # Never print the words.
        return f"Mnemonic(<{self.word_count} words>)"


def from_entropy(entropy: bytes) -> Mnemonic:
    """Map raw entropy (16-32 bytes, multiple of 4) to its mnemonic."""
    ent_bits = len(entropy) * 8
    cs_bits = ent_bits // 32
    if ent_bits not in {_entropy_bits(n) for n in WORD_COUNTS}:
        raise InvalidWordCount(-(-(ent_bits + cs_bits) // _BITS_PER_WORD))

    value = (int.from_bytes(entropy, "big") << cs_bits) | _checksum(entropy)
    word_count = (ent_bits + cs_bits) // _BITS_PER_WORD

    words = _language().wordlist
    indices = [
        (value >> (_BITS_PER_WORD * (word_count - 1 - i))) & 0x7FF
        for i in range(word_count)
    ]
    return Mnemonic(tuple(words[i] for i in indices))


def generate(word_count: int = 12, rng: RandomSource | None = None) -> Mnemonic:
    """Generate a fresh mnemonic of ``word_count`` words.

    Entropy is read from ``rng`` (the OS CSPRNG by default); a failing
    source raises InsufficientEntropy rather than degrading.
    """
    if word_count not in WORD_COUNTS:
        raise InvalidWordCount(word_count)
    rng = rng if rng is not None else default_source()
    entropy = rng.read(_entropy_bits(word_count) // 8)
    return from_entropy(entropy)


def _split(words: str | Sequence[str]) -> list[str]:
    if isinstance(words, str):
        return unicodedata.normalize("NFKD", words).split()
    return [unicodedata.normalize("NFKD", w) for w in words]


def parse(words: str | Sequence[str]) -> Mnemonic:
    """Validate a phrase and return it as a :class:`Mnemonic`.

    Whitespace is normalized, case is not. Checks happen in order: word
    count, wordlist membership, then checksum.
    """
    return Mnemonic(tuple(_split(words)))


def to_seed(mnemonic: Mnemonic, passphrase: str = "") -> bytes:
    """PBKDF2-HMAC-SHA512, 2048 rounds, salt ``"mnemonic" + passphrase``.

    Both inputs are NFKD-normalized. Returns 64 bytes.
    """
    return _Bip39.to_seed(mnemonic.phrase, passphrase or "")
