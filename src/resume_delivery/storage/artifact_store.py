"""Transient artifact store with time-based expiry.

Every artifact is a lease with an absolute expiry fixed at ``put`` time.
Reads never extend it. Expired artifacts are unreadable immediately and
their bytes are reclaimed by ``sweep()``, which walks a min-heap keyed by
expiry instead of keeping one timer per artifact.

Metadata is the source of truth and is only touched under ``_lock``. Bytes
are written before metadata is published and removed after it is
withdrawn, so a reader racing a delete sees either the whole artifact or
``ArtifactNotFoundError``.
"""

from __future__ import annotations

import heapq
import logging
import secrets
import threading
import time
from collections import OrderedDict
from typing import Callable

from resume_delivery.config import StoreConfig
from resume_delivery.exceptions import ArtifactNotFoundError, StoreWriteError
from resume_delivery.models.artifact import (
    ArtifactHandle,
    ArtifactState,
    ResumeArtifact,
    StoredArtifact,
)
from resume_delivery.storage.backends import StorageBackend, backend_from_config

logger = logging.getLogger(__name__)

MAX_RETIRED_IDS = 4096


class ArtifactStore:
    """Stores rendered documents for a fixed TTL window."""

    def __init__(
        self,
        config: StoreConfig | None = None,
        backend: StorageBackend | None = None,
        *,
        clock: Callable[[], float] = time.time,
        id_factory: Callable[[], str] | None = None,
    ):
        self.config = config or StoreConfig()
        self.backend = backend if backend is not None else backend_from_config(self.config)
        self.ttl_seconds = self.config.ttl_seconds
        self._clock = clock
        self._id_factory = id_factory or (lambda: secrets.token_urlsafe(self.config.id_bytes))
        self._lock = threading.Lock()
        self._artifacts: dict[str, ResumeArtifact] = {}
        self._expiry_heap: list[tuple[float, str]] = []
        self._reserved: set[str] = set()
        self._retired: OrderedDict[str, None] = OrderedDict()

    def put(
        self,
        data: bytes,
        file_name: str,
        content_type: str = "application/pdf",
    ) -> ArtifactHandle:
        """Store bytes under a fresh unguessable id and start its TTL."""
        if not data:
            raise StoreWriteError("Refusing to store an empty artifact")

        artifact_id = self._reserve_id()
        try:
            self.backend.write(artifact_id, data)
        except StoreWriteError:
            self._release_id(artifact_id)
            raise
        except OSError as exc:
            self._release_id(artifact_id)
            raise StoreWriteError(f"Could not write artifact: {exc}") from exc
        except BaseException:
            self._release_id(artifact_id)
            raise

        now = self._clock()
        artifact = ResumeArtifact(
            id=artifact_id,
            file_name=file_name,
            content_type=content_type,
            size=len(data),
            created_at=now,
            expires_at=now + self.ttl_seconds,
        )
        with self._lock:
            self._reserved.discard(artifact_id)
            self._artifacts[artifact_id] = artifact
            heapq.heappush(self._expiry_heap, (artifact.expires_at, artifact_id))

        logger.debug("Stored artifact %s (%d bytes, ttl=%ds)", artifact_id[:8], len(data), self.ttl_seconds)
        return ArtifactHandle(
            id=artifact_id,
            file_name=file_name,
            expires_at=artifact.expires_at,
            ttl_seconds=self.ttl_seconds,
        )

    def get(self, artifact_id: str) -> StoredArtifact:
        """Return the artifact and its bytes while its lease is live.

        An expired id fails like an unknown one and is left in place for
        ``sweep()`` to reclaim.
        """
        now = self._clock()
        with self._lock:
            artifact = self._artifacts.get(artifact_id)
            if artifact is None or now >= artifact.expires_at:
                raise ArtifactNotFoundError(artifact_id)

        data = self.backend.read(artifact_id)
        if data is None:
            # deleted between the metadata check and the read
            raise ArtifactNotFoundError(artifact_id)

        with self._lock:
            current = self._artifacts.get(artifact_id, artifact)
            snapshot = current.model_copy(
                update={
                    "state": ArtifactState.CONSUMED,
                    "download_count": current.download_count + 1,
                }
            )
            if artifact_id in self._artifacts:
                self._artifacts[artifact_id] = snapshot
        return StoredArtifact(artifact=snapshot, data=data)

    def delete(self, artifact_id: str) -> bool:
        """Remove an artifact. Safe to call repeatedly or after expiry."""
        with self._lock:
            found = self._retire(artifact_id)
        if found:
            self.backend.remove(artifact_id)
        return found

    def sweep(self) -> int:
        """Delete every artifact whose expiry has passed. Returns the count."""
        now = self._clock()
        expired: list[str] = []
        with self._lock:
            while self._expiry_heap and self._expiry_heap[0][0] <= now:
                expires_at, artifact_id = heapq.heappop(self._expiry_heap)
                artifact = self._artifacts.get(artifact_id)
                # stale entry: already deleted
                if artifact is None or artifact.expires_at != expires_at:
                    continue
                self._retire(artifact_id)
                expired.append(artifact_id)
        for artifact_id in expired:
            self.backend.remove(artifact_id)
        if expired:
            logger.debug("Swept %d expired artifact(s)", len(expired))
        return len(expired)

    def seconds_until_next_expiry(self) -> float | None:
        with self._lock:
            if not self._expiry_heap:
                return None
            return max(self._expiry_heap[0][0] - self._clock(), 0.0)

    def clear(self) -> int:
        """Delete all artifacts. Returns count of deleted artifacts."""
        with self._lock:
            ids = list(self._artifacts)
            for artifact_id in ids:
                self._retire(artifact_id)
            self._expiry_heap.clear()
        for artifact_id in ids:
            self.backend.remove(artifact_id)
        return len(ids)

    def stats(self) -> dict:
        """Return store statistics."""
        now = self._clock()
        with self._lock:
            artifacts = list(self._artifacts.values())
        expired = sum(1 for a in artifacts if now >= a.expires_at)
        return {
            "active": len(artifacts) - expired,
            "expired_pending": expired,
            "bytes": sum(a.size for a in artifacts),
        }

    def __contains__(self, artifact_id: str) -> bool:
        with self._lock:
            artifact = self._artifacts.get(artifact_id)
        return artifact is not None and self._clock() < artifact.expires_at

    def _reserve_id(self) -> str:
        with self._lock:
            while True:
                artifact_id = self._id_factory()
                if (
                    artifact_id not in self._artifacts
                    and artifact_id not in self._reserved
                    and artifact_id not in self._retired
                ):
                    self._reserved.add(artifact_id)
                    return artifact_id

    def _release_id(self, artifact_id: str) -> None:
        self.backend.remove(artifact_id)
        with self._lock:
            self._reserved.discard(artifact_id)
            self._remember_retired(artifact_id)

    def _retire(self, artifact_id: str) -> bool:
        """Drop metadata and remember the id. Caller holds ``_lock``."""
        artifact = self._artifacts.pop(artifact_id, None)
        if artifact is None:
            return False
        self._remember_retired(artifact_id)
        return True

    def _remember_retired(self, artifact_id: str) -> None:
        self._retired[artifact_id] = None
        if len(self._retired) > MAX_RETIRED_IDS:
            self._retired.popitem(last=False)
