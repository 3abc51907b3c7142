"""Byte storage backends for the artifact store."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Protocol

from resume_delivery.config import StoreConfig
from resume_delivery.exceptions import StoreWriteError

logger = logging.getLogger(__name__)


class StorageBackend(Protocol):
    def write(self, artifact_id: str, data: bytes) -> None: ...

    def read(self, artifact_id: str) -> bytes | None: ...

    def remove(self, artifact_id: str) -> None: ...


class MemoryBackend:
    """Keeps artifact bytes in a dict. Used for tests and single-process setups."""

    def __init__(self):
        self._blobs: dict[str, bytes] = {}

    def write(self, artifact_id: str, data: bytes) -> None:
        self._blobs[artifact_id] = bytes(data)

    def read(self, artifact_id: str) -> bytes | None:
        return self._blobs.get(artifact_id)

    def remove(self, artifact_id: str) -> None:
        self._blobs.pop(artifact_id, None)

    def __len__(self) -> int:
        return len(self._blobs)


class FileSystemBackend:
    """Stores each artifact as ``<base_dir>/<id>.pdf``.

    Writes go to a hidden temp file first and are moved into place with
    ``os.replace`` so readers never see a partially written file. Files left
    over from a previous process are purged on start-up: nothing holds a
    handle to them any more.
    """

    SUFFIX = ".pdf"

    def __init__(self, base_dir: str | Path, purge: bool = True):
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        if purge:
            removed = self.purge()
            if removed:
                logger.info("Purged %d stale artifact file(s) from %s", removed, self.base_dir)

    def _path(self, artifact_id: str) -> Path:
        return self.base_dir / f"{artifact_id}{self.SUFFIX}"

    def write(self, artifact_id: str, data: bytes) -> None:
        tmp = self.base_dir / f".{artifact_id}.tmp"
        try:
            tmp.write_bytes(data)
            os.replace(tmp, self._path(artifact_id))
        except OSError as exc:
            tmp.unlink(missing_ok=True)
            raise StoreWriteError(f"Could not write artifact to {self.base_dir}: {exc}") from exc

    def read(self, artifact_id: str) -> bytes | None:
        try:
            return self._path(artifact_id).read_bytes()
        except FileNotFoundError:
            return None

    def remove(self, artifact_id: str) -> None:
        try:
            self._path(artifact_id).unlink(missing_ok=True)
        except OSError:
            logger.warning("Failed to remove artifact file %s", artifact_id, exc_info=True)

    def purge(self) -> int:
        """Delete every artifact and temp file in ``base_dir``. Returns the file count."""
        count = 0
        for path in self.base_dir.iterdir():
            if path.is_file() and (path.suffix == self.SUFFIX or path.name.endswith(".tmp")):
                path.unlink(missing_ok=True)
                count += 1
        return count


def backend_from_config(config: StoreConfig) -> StorageBackend:
    base_dir = config.resolved_base_dir
    if base_dir is None:
        return MemoryBackend()
    return FileSystemBackend(base_dir)
