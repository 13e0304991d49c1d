"""Randomness sources.

The pipeline never reaches for a global RNG: callers pass a source, and
:func:`default_source` is only consulted when they don't.
"""

from __future__ import annotations

import os
from typing import Protocol

from .errors import InsufficientEntropy


class RandomSource(Protocol):
    def read(self, n: int) -> bytes:
        """Return exactly ``n`` random bytes or raise InsufficientEntropy."""
        ...


class SystemRandom:
    """The operating system CSPRNG (``os.urandom``)."""

    def read(self, n: int) -> bytes:
        try:
            data = os.urandom(n)
        except (OSError, NotImplementedError) as exc:
            raise InsufficientEntropy(n, 0, str(exc)) from exc
        if len(data) != n:
            raise InsufficientEntropy(n, len(data))
        return data


class FixedRandom:
    """Hands out a fixed byte string in order. For tests only."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._offset = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def read(self, n: int) -> bytes:
        if n > self.remaining:
            raise InsufficientEntropy(n, self.remaining, "fixed source exhausted")
        chunk = self._data[self._offset:self._offset + n]
        self._offset += n
        return chunk


def default_source() -> RandomSource:
    return SystemRandom()
