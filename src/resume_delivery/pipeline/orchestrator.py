"""Generation pipeline: validate, compose, render, store."""

from __future__ import annotations

import asyncio
import logging
import re
import time
import uuid
from dataclasses import dataclass

from resume_delivery.exceptions import (
    ProfileValidationError,
    RenderError,
    RenderFailedError,
    StoreError,
    StoreWriteError,
)
from resume_delivery.export.renderer import DocumentRenderer
from resume_delivery.models.page import PageOptions
from resume_delivery.models.profile import ProfileData
from resume_delivery.storage.artifact_store import ArtifactStore
from resume_delivery.templates.compositor import compose

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_-]+")


@dataclass
class GenerationResult:
    """What a successful generation returns to the caller."""

    request_id: str
    artifact_id: str
    download_url: str
    file_name: str
    expires_in_seconds: int
    elapsed_seconds: float = 0.0


def _log_stage_failure(request_id: str, stage: str, exc: Exception) -> None:
    logger.error(
        "[%s] stage=%s failed: %s: %s",
        request_id,
        stage,
        type(exc).__name__,
        exc,
        exc_info=True,
    )


def build_file_name(profile: ProfileData) -> str:
    """``Resume_<First>_<Last>.pdf`` with unsafe characters replaced."""
    parts = ["Resume", profile.first_name or "", profile.last_name or ""]
    cleaned = [_UNSAFE_FILENAME_CHARS.sub("_", p).strip("_") for p in parts]
    return "_".join(p for p in cleaned if p) + ".pdf"


def validate_request(profile: ProfileData, payment_token: str | None) -> None:
    """Cheap precondition checks that run before any engine is started."""
    if not payment_token or not str(payment_token).strip():
        raise ProfileValidationError("Payment verification failed")
    missing = profile.missing_required_fields()
    if missing:
        raise ProfileValidationError(
            f"Missing required profile fields: {', '.join(missing)}",
            missing_fields=missing,
        )


class ResumePipeline:
    """Runs one resume request from profile data to a download handle.

    Render always finishes before ``put``, and ``put`` before the handle is
    returned, so a download URL never points at a missing artifact.
    """

    def __init__(
        self,
        renderer: DocumentRenderer,
        store: ArtifactStore,
        *,
        page_options: PageOptions | None = None,
        download_prefix: str = "/api/resume/download",
    ):
        self.renderer = renderer
        self.store = store
        self.page_options = page_options or PageOptions()
        self.download_prefix = download_prefix.rstrip("/")

    async def generate(
        self,
        profile: ProfileData,
        payment_token: str | None,
        *,
        request_id: str | None = None,
    ) -> GenerationResult:
        request_id = request_id or uuid.uuid4().hex[:12]
        start = time.monotonic()

        validate_request(profile, payment_token)

        tree = compose(profile)

        try:
            data = await self.renderer.render(tree, self.page_options)
        except RenderError as exc:
            _log_stage_failure(request_id, "render", exc)
            raise
        except Exception as exc:
            _log_stage_failure(request_id, "render", exc)
            raise RenderFailedError(f"Unexpected render failure: {exc}") from exc

        file_name = build_file_name(profile)
        try:
            # backends may do blocking file I/O
            handle = await asyncio.to_thread(self.store.put, data, file_name)
        except StoreError as exc:
            _log_stage_failure(request_id, "store", exc)
            raise
        except Exception as exc:
            _log_stage_failure(request_id, "store", exc)
            raise StoreWriteError(f"Unexpected store failure: {exc}") from exc

        elapsed = time.monotonic() - start
        logger.info(
            "[%s] generated %s (%d bytes) in %.2fs",
            request_id,
            file_name,
            len(data),
            elapsed,
        )
        return GenerationResult(
            request_id=request_id,
            artifact_id=handle.id,
            download_url=f"{self.download_prefix}/{handle.id}",
            file_name=handle.file_name,
            expires_in_seconds=handle.ttl_seconds,
            elapsed_seconds=elapsed,
        )
