"""Hands stored artifacts to callers during their download window."""

from __future__ import annotations

import logging

from resume_delivery.models.artifact import StoredArtifact
from resume_delivery.storage.artifact_store import ArtifactStore

logger = logging.getLogger(__name__)


class DeliveryService:
    """Read side of the store.

    Downloads do not shorten or extend an artifact's life. Any number of
    reads succeed until the expiry set at creation passes.
    """

    def __init__(self, store: ArtifactStore):
        self.store = store

    def fetch(self, artifact_id: str) -> StoredArtifact:
        """Return the artifact or raise ``ArtifactNotFoundError``."""
        stored = self.store.get(artifact_id)
        logger.debug(
            "Delivered artifact %s (download #%d)",
            artifact_id[:8],
            stored.artifact.download_count,
        )
        return stored
