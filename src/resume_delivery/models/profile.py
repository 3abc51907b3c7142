"""Pydantic model for the profile data a resume is generated from."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ExperienceLevel(str, Enum):
    ENTRY = "Entry Level (0-2 years)"
    MID = "Mid Level (3-5 years)"
    SENIOR = "Senior Level (6-10 years)"
    LEAD = "Lead/Principal (10+ years)"


class WorkType(str, Enum):
    REMOTE = "Remote"
    HYBRID = "Hybrid"
    ON_SITE = "On-site"
    ANY = "Any"


class JobType(str, Enum):
    FULL_TIME = "Full-time"
    PART_TIME = "Part-time"
    CONTRACT = "Contract"
    ANY = "Any"


REQUIRED_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "phone",
    "current_position",
    "skills",
)


class ProfileData(BaseModel):
    """Profile fields supplied by the caller for a single generation request."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, extra="ignore")

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    location: str | None = None
    current_position: str | None = None
    skills: str | None = None  # comma-delimited
    experience_level: ExperienceLevel | None = None
    desired_salary: str | None = None
    work_type: WorkType | None = None
    job_type: JobType | None = None

    def missing_required_fields(self) -> list[str]:
        """Names of required fields that are absent or blank."""
        return [name for name in REQUIRED_FIELDS if not getattr(self, name)]
