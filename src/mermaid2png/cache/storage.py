"""Durable artifact storage: one ``<key>.png`` file per cached render."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from mermaid2png.errors.exceptions import StorageUnavailableError

logger = logging.getLogger(__name__)

_ARTIFACT_SUFFIX = ".png"
_STAGED_SUFFIX = ".tmp"
_DEFAULT_CACHE_DIR = Path("temp") / "cache"


class DirectoryStorage:
    """Flat directory of PNG artifacts keyed by cache fingerprint.

    Every failure surfaces as StorageUnavailableError. Writes go through a
    temp file and an atomic rename, so a reader sees either the old bytes,
    the new bytes, or no file at all.
    """

    def __init__(self, directory: Path | str | None = None) -> None:
        self._dir = Path(directory) if directory else _DEFAULT_CACHE_DIR

    @property
    def directory(self) -> Path:
        return self._dir

    def path_for(self, key: str) -> Path:
        return self._dir / f"{key}{_ARTIFACT_SUFFIX}"

    def ensure_dir(self) -> None:
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageUnavailableError(
                f"Cannot create cache directory {self._dir}: {e}",
                operation="mkdir",
                original=e,
            ) from e

    def list(self) -> list[str]:
        """Return the keys of all artifacts currently on disk."""
        try:
            names = os.listdir(self._dir)
        except OSError as e:
            raise StorageUnavailableError(
                f"Cannot list cache directory {self._dir}: {e}",
                operation="list",
                original=e,
            ) from e
        return sorted(
            name[: -len(_ARTIFACT_SUFFIX)]
            for name in names
            if name.endswith(_ARTIFACT_SUFFIX)
        )

    def exists(self, key: str) -> bool:
        return self.path_for(key).is_file()

    def read(self, key: str) -> bytes:
        try:
            return self.path_for(key).read_bytes()
        except OSError as e:
            raise StorageUnavailableError(
                f"Cannot read cached artifact {key}: {e}",
                operation="read",
                key=key,
                original=e,
            ) from e

    def write(self, key: str, data: bytes) -> Path:
        """Durably write ``data`` under ``key`` and return its path."""
        return self.commit(key, self.stage(key, data))

    def stage(self, key: str, data: bytes) -> Path:
        """Write ``data`` to a hidden temp file next to its final location."""
        self.ensure_dir()
        tmp_name: str | None = None
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=f".{key}.", suffix=_STAGED_SUFFIX, dir=self._dir)
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            if tmp_name is not None:
                self.discard(Path(tmp_name))
            raise StorageUnavailableError(
                f"Cannot write cached artifact {key}: {e}",
                operation="write",
                key=key,
                original=e,
            ) from e
        return Path(tmp_name)

    def commit(self, key: str, staged: Path) -> Path:
        """Atomically publish a staged temp file as the artifact for ``key``."""
        target = self.path_for(key)
        try:
            os.replace(staged, target)
        except OSError as e:
            self.discard(staged)
            raise StorageUnavailableError(
                f"Cannot publish cached artifact {key}: {e}",
                operation="write",
                key=key,
                original=e,
            ) from e
        return target

    def discard(self, staged: Path) -> None:
        try:
            os.unlink(staged)
        except OSError:
            logger.debug("Temp file %s already gone", staged)

    def purge_staged(self) -> int:
        """Remove temp files left behind by writes that never committed."""
        try:
            names = os.listdir(self._dir)
        except OSError as e:
            raise StorageUnavailableError(
                f"Cannot list cache directory {self._dir}: {e}",
                operation="list",
                original=e,
            ) from e
        removed = 0
        for name in names:
            if name.startswith(".") and name.endswith(_STAGED_SUFFIX):
                self.discard(self._dir / name)
                removed += 1
        if removed:
            logger.info("Removed %d stale temp files from %s", removed, self._dir)
        return removed

    def delete(self, key: str) -> None:
        """Delete an artifact. A missing file counts as deleted."""
        try:
            self.path_for(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageUnavailableError(
                f"Cannot delete cached artifact {key}: {e}",
                operation="delete",
                key=key,
                original=e,
            ) from e

    def stat_mtime(self, key: str) -> float:
        try:
            return self.path_for(key).stat().st_mtime
        except OSError as e:
            raise StorageUnavailableError(
                f"Cannot stat cached artifact {key}: {e}",
                operation="stat",
                key=key,
                original=e,
            ) from e

    def size(self, key: str) -> int:
        try:
            return self.path_for(key).stat().st_size
        except OSError as e:
            raise StorageUnavailableError(
                f"Cannot stat cached artifact {key}: {e}",
                operation="stat",
                key=key,
                original=e,
            ) from e
