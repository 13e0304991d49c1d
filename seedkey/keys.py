"""Deterministic key derivation from a BIP39 seed.

Ed25519 uses PyNaCl (libsodium) as the primary backend, with fallback to
the cryptography package if PyNaCl is unavailable. Both produce identical
keys for identical seeds.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from .errors import EncodingError, UnsupportedAlgorithm


class Algorithm(enum.Enum):
    """Key algorithms known to seedkey. Only ED25519 is implemented."""

    ED25519 = "ed25519"
    RSA = "rsa"
    DSA = "dsa"
    ECDSA = "ecdsa"
    SK_ED25519 = "ed25519-sk"
    SK_ECDSA = "ecdsa-sk"

    @property
    def ssh_name(self) -> str:
        """Algorithm identifier used in SSH wire encoding."""
        return _SSH_NAMES[self]

    @classmethod
    def parse(cls, value: "Algorithm | str") -> "Algorithm":
        """Accept a member, its value (``"ed25519"``) or its SSH name."""
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        for member in cls:
            if name in (member.value, member.ssh_name):
                return member
        raise UnsupportedAlgorithm(str(value))

    def __str__(self) -> str:
        return self.value


_SSH_NAMES = {
    Algorithm.ED25519: "ssh-ed25519",
    Algorithm.RSA: "ssh-rsa",
    Algorithm.DSA: "ssh-dss",
    Algorithm.ECDSA: "ecdsa-sha2-nistp256",
    Algorithm.SK_ED25519: "sk-ssh-ed25519@openssh.com",
    Algorithm.SK_ECDSA: "sk-ecdsa-sha2-nistp256@openssh.com",
}

# (private key length, public key length) per implemented algorithm
KEY_LENGTHS = {
    Algorithm.ED25519: (32, 32),
}

IMPLEMENTED = frozenset(KEY_LENGTHS)


def require_implemented(algorithm: "Algorithm | str") -> Algorithm:
    """Parse ``algorithm`` and fail unless we can actually derive it."""
    algorithm = Algorithm.parse(algorithm)
    if algorithm not in IMPLEMENTED:
        raise UnsupportedAlgorithm(algorithm.value)
    return algorithm


@dataclass(frozen=True)
class KeyPair:
    """An asymmetric keypair. ``private_key`` is the 32-byte Ed25519 seed."""

    algorithm: Algorithm
    private_key: bytes
    public_key: bytes

    def __post_init__(self) -> None:
        lengths = KEY_LENGTHS.get(self.algorithm)
        if lengths is None:
            raise UnsupportedAlgorithm(self.algorithm.value)
        priv_len, pub_len = lengths
        if len(self.private_key) != priv_len or len(self.public_key) != pub_len:
            raise EncodingError(
                f"{self.algorithm.value} keys must be {priv_len}/{pub_len} bytes, "
                f"got {len(self.private_key)}/{len(self.public_key)}"
            )

    def __repr__(self) -> str:
        return f"KeyPair(algorithm={self.algorithm.value}, public_key={self.public_key.hex()})"


def _load_nacl():
    """Try to load PyNaCl (libsodium)."""
    try:
        from nacl.signing import SigningKey
        return (SigningKey,)
    except ImportError:
        return None


def _load_crypto():
    """Try to load cryptography package as fallback."""
    try:
        from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
        from cryptography.hazmat.primitives.serialization import (
            Encoding,
            PublicFormat,
        )
        return Ed25519PrivateKey, Encoding, PublicFormat
    except ImportError:
        return None


def _get_backend():
    """Get the best available Ed25519 backend."""
    nacl = _load_nacl()
    if nacl is not None:
        return "nacl", nacl
    crypto = _load_crypto()
    if crypto is not None:
        return "cryptography", crypto
    return None, None


def _require_backend():
    name, backend = _get_backend()
    if backend is None:
        raise ImportError(
            "Ed25519 keys require 'PyNaCl' or 'cryptography'. "
            "Install with: pip install PyNaCl"
        )
    return name, backend


def _ed25519_public_key(private_seed: bytes) -> bytes:
    name, backend = _require_backend()

    if name == "nacl":
        SigningKey = backend[0]
        return bytes(SigningKey(private_seed).verify_key)

    Ed25519PrivateKey, Encoding, PublicFormat = backend
    key = Ed25519PrivateKey.from_private_bytes(private_seed)
    return key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)


def derive(seed: bytes, algorithm: "Algorithm | str" = Algorithm.ED25519) -> KeyPair:
    """Derive a keypair from a seed.

    Ed25519 uses the first 32 bytes of the seed as the private key seed
    and runs standard key generation (clamp, multiply by the base point).
    Same seed, same algorithm, same keypair.
    """
    algorithm = require_implemented(algorithm)
    priv_len, _ = KEY_LENGTHS[algorithm]
    if len(seed) < priv_len:
        raise EncodingError(f"Seed too short: need {priv_len} bytes, got {len(seed)}")

    private_seed = bytes(seed[:priv_len])
    return KeyPair(
        algorithm=algorithm,
        private_key=private_seed,
        public_key=_ed25519_public_key(private_seed),
    )
