"""Generation and delivery orchestration."""
from resume_delivery.pipeline.delivery import DeliveryService
from resume_delivery.pipeline.orchestrator import (
    GenerationResult,
    ResumePipeline,
    build_file_name,
    validate_request,
)

__all__ = [
    "DeliveryService",
    "GenerationResult",
    "ResumePipeline",
    "build_file_name",
    "validate_request",
]
