"""Mnemonic → seed → keypair → OpenSSH text, in one call.

Each run is independent: no state survives between calls, and any failure
aborts the run with its named error before anything is returned.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from . import mnemonic as bip39
from .entropy import RandomSource, default_source
from .errors import InvalidWordCount
from .fingerprint import fingerprint
from .keys import Algorithm, KeyPair, derive, require_implemented
from .openssh import EncodedKey, encode
from .redact import redact_state

logger = logging.getLogger(__name__)


class Stage(enum.Enum):
    OBTAIN_MNEMONIC = "obtain-mnemonic"
    DERIVE_SEED = "derive-seed"
    DERIVE_KEY = "derive-key"
    ENCODE = "encode"


@dataclass
class KeyRequest:
    """Inputs for one derivation.

    ``bip39_passphrase`` feeds the seed; ``encryption_passphrase`` protects
    the private key file. They are independent secrets.
    """

    mnemonic: str | Sequence[str] | None = None
    word_count: int = 12
    bip39_passphrase: str = ""
    encryption_passphrase: str = ""
    comment: str = ""
    algorithm: Algorithm | str = Algorithm.ED25519

    def to_dict(self) -> dict[str, Any]:
        return {
            "mnemonic": self.mnemonic,
            "word_count": self.word_count,
            "bip39_passphrase": self.bip39_passphrase,
            "encryption_passphrase": self.encryption_passphrase,
            "comment": self.comment,
            "algorithm": str(self.algorithm),
        }


@dataclass
class KeyResult:
    mnemonic: bip39.Mnemonic
    generated: bool
    keypair: KeyPair
    encoded: EncodedKey
    fingerprint: str = field(default="")

    @property
    def public_key(self) -> str:
        return self.encoded.public_key

    @property
    def private_key(self) -> str:
        return self.encoded.private_key


def _has_mnemonic(value: str | Sequence[str] | None) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return len(value) > 0


def run(request: KeyRequest, rng: RandomSource | None = None) -> KeyResult:
    """Run the full pipeline for ``request``.

    If no mnemonic is given one is generated; the caller must show it to
    the user (``result.generated`` is True), it is the only way to recover
    the key.
    """
    rng = rng if rng is not None else default_source()
    logger.debug("Key request: %s", redact_state(request.to_dict()))

    stage = Stage.OBTAIN_MNEMONIC
    try:
        # Reject a bad selector before consuming any entropy.
        algorithm = require_implemented(request.algorithm)

        generated = not _has_mnemonic(request.mnemonic)
        logger.debug("Stage %s (generate=%s)", stage.value, generated)
        if generated:
            phrase = bip39.generate(request.word_count, rng)
        else:
            phrase = bip39.parse(request.mnemonic)

        stage = Stage.DERIVE_SEED
        logger.debug("Stage %s", stage.value)
        seed = bip39.to_seed(phrase, request.bip39_passphrase)

        stage = Stage.DERIVE_KEY
        logger.debug("Stage %s (%s)", stage.value, algorithm.value)
        keypair = derive(seed, algorithm)

        stage = Stage.ENCODE
        logger.debug("Stage %s", stage.value)
        encoded = encode(
            keypair,
            comment=request.comment,
            passphrase=request.encryption_passphrase,
            rng=rng,
        )
    except Exception as exc:
        logger.debug("Pipeline failed at stage %s: %s", stage.value, type(exc).__name__)
        raise

    return KeyResult(
        mnemonic=phrase,
        generated=generated,
        keypair=keypair,
        encoded=encoded,
        fingerprint=fingerprint(keypair),
    )


def recover(
    mnemonic: str | Sequence[str],
    bip39_passphrase: str = "",
    encryption_passphrase: str = "",
    comment: str = "",
    algorithm: Algorithm | str = Algorithm.ED25519,
    rng: RandomSource | None = None,
) -> KeyResult:
    """Rebuild a key from an existing phrase. Never generates a new one."""
    if not _has_mnemonic(mnemonic):
        raise InvalidWordCount(0)
    request = KeyRequest(
        mnemonic=mnemonic,
        bip39_passphrase=bip39_passphrase,
        encryption_passphrase=encryption_passphrase,
        comment=comment,
        algorithm=algorithm,
    )
    return run(request, rng)
