"""Request/response schemas for the HTTP API (camelCase on the wire)."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from resume_delivery.models.profile import ProfileData


class GenerateRequest(BaseModel):
    """Body of ``POST /api/resume/generate``."""

    model_config = ConfigDict(populate_by_name=True)

    profile_data: ProfileData = Field(alias="profileData")
    # the original client sends paymentId
    payment_token: Any = Field(
        default=None,
        validation_alias=AliasChoices("paymentToken", "paymentId", "payment_token"),
    )
    user_id: str | None = Field(default=None, alias="userId")


class GenerateResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    download_url: str
    file_name: str
    expires_in_seconds: int
    message: str = "Resume generated successfully"


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


class HealthResponse(BaseModel):
    status: str = "OK"
    message: str = "Resume delivery service is running"
