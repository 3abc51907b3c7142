"""Error taxonomy for the rendering and delivery pipeline."""

from __future__ import annotations


class ResumeDeliveryError(Exception):
    """Base class for all pipeline errors."""


class ProfileValidationError(ResumeDeliveryError):
    """Profile or payment precondition failed before any rendering started."""

    def __init__(self, message: str, missing_fields: list[str] | None = None):
        super().__init__(message)
        self.missing_fields = missing_fields or []


class RenderError(ResumeDeliveryError):
    """Rendering layer failure."""


class EngineUnavailableError(RenderError):
    """The rendering engine could not be started or no session slot was free."""


class RenderTimeoutError(RenderError):
    """Page content did not settle within the quiescence timeout."""


class RenderFailedError(RenderError):
    """The engine started but producing the document failed."""


class StoreError(ResumeDeliveryError):
    """Artifact store failure."""


class StoreWriteError(StoreError):
    """The backing medium rejected an artifact write."""


class ArtifactNotFoundError(ResumeDeliveryError):
    """Unknown or expired artifact id."""

    def __init__(self, artifact_id: str):
        super().__init__(f"Artifact not found: {artifact_id}")
        self.artifact_id = artifact_id
