"""Key fingerprints, formatted the way ssh-keygen prints them."""

from __future__ import annotations

import base64
import hashlib

from .keys import KeyPair
from .openssh import public_blob


def _blob(key: KeyPair | bytes) -> bytes:
    if isinstance(key, (bytes, bytearray)):
        return bytes(key)
    return public_blob(key)


def fingerprint(key: KeyPair | bytes, hash_name: str = "sha256") -> str:
    """Fingerprint a keypair or a raw public key blob.

    Returns ``SHA256:<unpadded base64>`` (the default) or the legacy
    ``MD5:aa:bb:...`` form.
    """
    blob = _blob(key)
    if hash_name == "sha256":
        digest = hashlib.sha256(blob).digest()
        return "SHA256:" + base64.b64encode(digest).decode("ascii").rstrip("=")
    if hash_name == "md5":
        digest = hashlib.md5(blob).hexdigest()
        return "MD5:" + ":".join(digest[i:i + 2] for i in range(0, len(digest), 2))
    raise ValueError(f"Unknown fingerprint hash: {hash_name}")


def line_fingerprint(line: str, hash_name: str = "sha256") -> str:
    """Fingerprint a public key line (``ssh-ed25519 AAAA... comment``)."""
    parts = line.split()
    if len(parts) < 2:
        raise ValueError("Not a public key line")
    return fingerprint(base64.b64decode(parts[1]), hash_name)


def verify_fingerprint(key: KeyPair | bytes, expected: str) -> bool:
    """Check ``key`` against a SHA256 or MD5 fingerprint string."""
    hash_name = "md5" if expected.startswith("MD5:") else "sha256"
    return fingerprint(key, hash_name) == expected
