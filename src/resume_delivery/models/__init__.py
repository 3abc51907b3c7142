"""Data models for the resume delivery pipeline."""

from resume_delivery.models.artifact import (
    ArtifactHandle,
    ArtifactState,
    ResumeArtifact,
    StoredArtifact,
)
from resume_delivery.models.markup import (
    EntryBlock,
    FieldListBlock,
    MarkupTree,
    Section,
    SkillsBlock,
    TextBlock,
)
from resume_delivery.models.page import Margins, PageOptions, PageSize
from resume_delivery.models.profile import (
    REQUIRED_FIELDS,
    ExperienceLevel,
    JobType,
    ProfileData,
    WorkType,
)

__all__ = [
    "ArtifactHandle",
    "ArtifactState",
    "EntryBlock",
    "ExperienceLevel",
    "FieldListBlock",
    "JobType",
    "Margins",
    "MarkupTree",
    "PageOptions",
    "PageSize",
    "ProfileData",
    "REQUIRED_FIELDS",
    "ResumeArtifact",
    "Section",
    "SkillsBlock",
    "StoredArtifact",
    "TextBlock",
    "WorkType",
]
