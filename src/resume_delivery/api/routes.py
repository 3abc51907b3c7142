"""Resume generation and download endpoints."""

from __future__ import annotations

import asyncio
import logging
import uuid

from fastapi import APIRouter, Request, Response

from resume_delivery.api.schemas import (
    ErrorResponse,
    GenerateRequest,
    GenerateResponse,
    HealthResponse,
)
from resume_delivery.pipeline.delivery import DeliveryService
from resume_delivery.pipeline.orchestrator import ResumePipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def _pipeline(request: Request) -> ResumePipeline:
    return request.app.state.pipeline


def _delivery(request: Request) -> DeliveryService:
    return request.app.state.delivery


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse()


@router.post(
    "/resume/generate",
    response_model=GenerateResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def generate_resume(body: GenerateRequest, request: Request) -> GenerateResponse:
    """Render the profile to a PDF and return a short-lived download URL."""
    request_id = uuid.uuid4().hex[:12]
    result = await _pipeline(request).generate(
        body.profile_data,
        body.payment_token,
        request_id=request_id,
    )
    return GenerateResponse(
        download_url=result.download_url,
        file_name=result.file_name,
        expires_in_seconds=result.expires_in_seconds,
    )


@router.get(
    "/resume/download/{artifact_id}",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}},
        404: {"model": ErrorResponse},
    },
)
async def download_resume(artifact_id: str, request: Request) -> Response:
    # file backends read from disk
    stored = await asyncio.to_thread(_delivery(request).fetch, artifact_id)
    artifact = stored.artifact
    return Response(
        content=stored.data,
        media_type=artifact.content_type,
        headers={"Content-Disposition": f'attachment; filename="{artifact.file_name}"'},
    )
