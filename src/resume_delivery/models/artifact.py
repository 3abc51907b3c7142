"""Models for stored resume artifacts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel


class ArtifactState(str, Enum):
    ACTIVE = "active"
    CONSUMED = "consumed"
    EXPIRED = "expired"


class ResumeArtifact(BaseModel):
    """Metadata for one stored artifact. Bytes live in the store backend."""

    id: str
    file_name: str
    content_type: str = "application/pdf"
    size: int
    created_at: float
    expires_at: float
    state: ArtifactState = ArtifactState.ACTIVE
    download_count: int = 0


class ArtifactHandle(BaseModel):
    """What the caller gets back from a successful ``put``."""

    id: str
    file_name: str
    expires_at: float
    ttl_seconds: int


@dataclass(frozen=True)
class StoredArtifact:
    """Artifact metadata snapshot plus its payload, as returned by ``get``."""

    artifact: ResumeArtifact
    data: bytes
