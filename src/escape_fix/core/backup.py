"""Scoped per-file backup with atomic write and rollback."""

import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional, Union

from ..errors import FileProcessingError


class BackupManager:
    """Owns the backup of one file for the duration of its processing.

    Usage::

        with BackupManager(path) as backup:
            backup.write(new_text)
            backup.commit()

    ``begin()`` copies the file to ``<file><suffix>`` before anything is
    written. Leaving the block with an exception before ``commit()`` restores
    the original content from that copy and lets the exception propagate.
    The backup file itself is kept; cleaning it up is left to the operator.
    """

    def __init__(self, path: Union[str, Path], suffix: str = ".backup", encoding: str = "utf-8"):
        self.path = Path(path)
        self.backup_path = self.path.with_name(self.path.name + suffix)
        self.encoding = encoding
        self.replaced_previous = False
        self._active = False
        self._committed = False
        self._written = False

    def __enter__(self) -> "BackupManager":
        self.begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None and self._active and self._written and not self._committed:
            self.rollback()
        self._active = False
        return False

    def begin(self) -> Path:
        """Copy the current file content to the backup path.

        Raises:
            FileProcessingError: If the backup cannot be created.
        """
        self.replaced_previous = self.backup_path.exists()
        try:
            shutil.copy2(self.path, self.backup_path)
        except OSError as e:
            raise FileProcessingError(self.path, f"cannot create backup {self.backup_path.name}: {e}")
        self._active = True
        self._committed = False
        return self.backup_path

    def write(self, text: str) -> None:
        """Atomically replace the file content with ``text``.

        On failure the original content is restored and the error re-raised.
        """
        if not self._active:
            raise RuntimeError("BackupManager.write() called before begin()")
        try:
            _atomic_write(self.path, text.encode(self.encoding))
            self._written = True
        except OSError as e:
            self.rollback()
            raise FileProcessingError(self.path, f"write failed, original restored: {e}")

    def commit(self) -> Path:
        """Mark the write as final and release the backup handle."""
        self._committed = True
        self._active = False
        return self.backup_path

    def rollback(self) -> None:
        """Restore the original content from the backup file."""
        try:
            _atomic_write(self.path, self.backup_path.read_bytes())
        except OSError as e:
            raise FileProcessingError(
                self.path, f"rollback failed, original content is in {self.backup_path}: {e}"
            )
        finally:
            self._active = False

    @property
    def committed(self) -> bool:
        return self._committed


def _atomic_write(path: Path, data: bytes, mode: Optional[int] = None) -> None:
    """Write ``data`` to a temp file beside ``path`` and rename it into place."""
    if mode is None:
        try:
            mode = path.stat().st_mode & 0o7777
        except FileNotFoundError:
            mode = None

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        if mode is not None:
            os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
