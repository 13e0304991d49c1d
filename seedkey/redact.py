"""Redaction of key material before anything reaches a log."""

from __future__ import annotations

import re
from typing import Any

from .mnemonic import wordlist

REDACTED = "[REDACTED]"

# Keys whose values are secret regardless of content
SECRET_KEY_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"mnemonic", re.IGNORECASE),
    re.compile(r"passphrase", re.IGNORECASE),
    re.compile(r"password", re.IGNORECASE),
    re.compile(r"secret", re.IGNORECASE),
    re.compile(r"seed", re.IGNORECASE),
    re.compile(r"entropy", re.IGNORECASE),
    re.compile(r"private[_-]?key", re.IGNORECASE),
    re.compile(r"words", re.IGNORECASE),
]

# Patterns that match secret values directly
SECRET_VALUE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"-----BEGIN\s+OPENSSH\s+PRIVATE\s+KEY-----[\s\S]*?-----END\s+OPENSSH\s+PRIVATE\s+KEY-----"),
    re.compile(r"-----BEGIN\s+(?:RSA\s+|EC\s+)?PRIVATE\s+KEY-----[\s\S]*?-----END\s+(?:RSA\s+|EC\s+)?PRIVATE\s+KEY-----"),
]

# Shortest phrase worth redacting
MIN_PHRASE_WORDS = 12

_WORD = re.compile(r"[A-Za-z]+")


def _is_secret_key(key: str) -> bool:
    """Check if a dictionary key looks like it holds a secret."""
    return any(p.search(key) for p in SECRET_KEY_PATTERNS)


def _redact_word_runs(value: str) -> str:
    """Replace every run of MIN_PHRASE_WORDS+ consecutive wordlist words."""
    known = set(wordlist())
    spans: list[tuple[int, int]] = []
    run: list[re.Match[str]] = []

    def _close() -> None:
        if len(run) >= MIN_PHRASE_WORDS:
            spans.append((run[0].start(), run[-1].end()))
        run.clear()

    for match in _WORD.finditer(value):
        adjacent = not run or not value[run[-1].end():match.start()].strip()
        if match.group(0) in known and adjacent:
            run.append(match)
            continue
        _close()
        if match.group(0) in known:
            run.append(match)
    _close()

    for start, end in reversed(spans):
        value = value[:start] + REDACTED + value[end:]
    return value


def _redact_value(value: str) -> str:
    """Redact private key blocks and mnemonic phrases from a string."""
    result = value
    for pattern in SECRET_VALUE_PATTERNS:
        result = pattern.sub(REDACTED, result)
    return _redact_word_runs(result)


def redact_state(state: Any, _depth: int = 0) -> Any:
    """Recursively redact secrets from a state object.

    - Dict keys matching secret patterns get their values replaced.
    - String values holding private keys or mnemonic phrases are redacted inline.
    - Recurses into nested dicts and lists.
    """
    if _depth > 50:
        return state

    if isinstance(state, dict):
        result = {}
        for k, v in state.items():
            if isinstance(k, str) and _is_secret_key(k):
                result[k] = REDACTED
            else:
                result[k] = redact_state(v, _depth + 1)
        return result

    if isinstance(state, (list, tuple)):
        return [redact_state(item, _depth + 1) for item in state]

    if isinstance(state, str):
        return _redact_value(state)

    return state
