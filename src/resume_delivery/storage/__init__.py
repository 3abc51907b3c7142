"""Transient artifact storage."""
from resume_delivery.storage.artifact_store import ArtifactStore
from resume_delivery.storage.backends import (
    FileSystemBackend,
    MemoryBackend,
    backend_from_config,
)
from resume_delivery.storage.reaper import ExpiryReaper

__all__ = [
    "ArtifactStore",
    "ExpiryReaper",
    "FileSystemBackend",
    "MemoryBackend",
    "backend_from_config",
]
