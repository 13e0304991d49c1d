"""Write generated keys to disk as ``<name>`` and ``<name>.pub``."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Callable, Optional

from .errors import OverwriteRefused
from .keys import KeyPair
from .openssh import EncodedKey, decode_private_key

logger = logging.getLogger(__name__)

PRIVATE_MODE = 0o600
PUBLIC_MODE = 0o644

Confirm = Callable[[Path], bool]


class _Transaction:
    """Records file system changes so a failed save can be undone.

    Replaced files are moved into a private temporary directory, never left
    beside the key, and the directory is removed on commit or rollback.
    """

    def __init__(self) -> None:
        self._undo: list[Callable[[], None]] = []
        self._backup_dir = Path(tempfile.mkdtemp(prefix="seedkey-"))
        self._count = 0

    def create_dirs(self, directory: Path) -> None:
        missing = []
        path = directory
        while not path.exists():
            missing.append(path)
            if path.parent == path:
                break
            path = path.parent
        for path in reversed(missing):
            path.mkdir()
            self._undo.append(path.rmdir)

    def _backup(self, path: Path) -> None:
        self._count += 1
        backup = self._backup_dir / f"{path.name}.backup.{self._count}"
        shutil.move(os.fspath(path), os.fspath(backup))
        self._undo.append(lambda: shutil.move(os.fspath(backup), os.fspath(path)))

    def write(self, path: Path, data: bytes, mode: int) -> None:
        if path.exists() or path.is_symlink():
            self._backup(path)

        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, mode)
        self._undo.append(path.unlink)
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
        os.chmod(path, mode)

    def rollback(self) -> None:
        failed = False
        while self._undo:
            undo = self._undo.pop()
            try:
                undo()
            except OSError as exc:
                failed = True
                logger.warning("Rollback step failed: %s", exc)
        if failed:
            # Keep whatever could not be restored.
            logger.warning("Backups left in %s", self._backup_dir)
            return
        shutil.rmtree(self._backup_dir, ignore_errors=True)

    def commit(self) -> None:
        self._undo.clear()
        shutil.rmtree(self._backup_dir, ignore_errors=True)


class KeyFiles:
    """Persist an encoded key pair into a directory.

    Existing files are only replaced when ``confirm(path)`` returns True.
    Either both files are written or neither is left behind.
    """

    def __init__(
        self,
        directory: str | Path,
        name: str = "id_ed25519",
        confirm: Optional[Confirm] = None,
    ) -> None:
        self.directory = Path(directory)
        self.name = name
        self.confirm = confirm

    @property
    def private_path(self) -> Path:
        return self.directory / self.name

    @property
    def public_path(self) -> Path:
        return self.directory / f"{self.name}.pub"

    def exists(self) -> bool:
        """Check if either key file is already on disk."""
        return self.private_path.exists() or self.public_path.exists()

    def _check_overwrite(self, path: Path) -> None:
        if not path.exists():
            return
        if self.confirm is None or not self.confirm(path):
            raise OverwriteRefused(path)

    def save(self, encoded: EncodedKey) -> tuple[Path, Path]:
        """Write both files. Returns (private_path, public_path)."""
        self._check_overwrite(self.public_path)
        self._check_overwrite(self.private_path)

        txn = _Transaction()
        try:
            txn.create_dirs(self.directory)
            txn.write(self.public_path, encoded.public_bytes(), PUBLIC_MODE)
            txn.write(self.private_path, encoded.private_bytes(), PRIVATE_MODE)
        except BaseException:
            txn.rollback()
            raise
        txn.commit()
        logger.info("Wrote %s and %s", self.private_path, self.public_path)
        return self.private_path, self.public_path

    def load(self, passphrase: str = "") -> tuple[KeyPair, str]:
        """Read the private key back. Returns (keypair, comment)."""
        if not self.private_path.exists():
            raise FileNotFoundError(f"Key not found: {self.private_path}")
        return decode_private_key(self.private_path.read_text(encoding="ascii"), passphrase)

    def delete(self) -> bool:
        """Delete both key files. Returns True if anything was removed."""
        removed = False
        for path in (self.private_path, self.public_path):
            if path.exists():
                path.unlink()
                removed = True
        return removed
