"""Compose profile data into a MarkupTree.

``compose`` is pure and total: it never raises for missing values. Empty
required fields become an explicit placeholder and empty optional fields a
field-specific one, so the rendered document never has holes in it. Every
value is escaped before it enters the tree.
"""

from __future__ import annotations

from markupsafe import Markup, escape

from resume_delivery.models.markup import (
    EntryBlock,
    FieldListBlock,
    MarkupTree,
    Section,
    SkillsBlock,
    TextBlock,
)
from resume_delivery.models.profile import ProfileData

MISSING_PLACEHOLDER = "Not provided"
UNSPECIFIED_PLACEHOLDER = "Not specified"
SALARY_PLACEHOLDER = "Negotiable"
FOOTER = "Generated by AutoApply.AI - Your Personal AI Job Application Agent"

SKILL_DELIMITER = ","
EXPERIENCE_HIGHLIGHT_SKILLS = 3


def compose(profile: ProfileData) -> MarkupTree:
    """Render profile data into a document tree."""
    first = _value(profile.first_name)
    last = _value(profile.last_name)
    name = escape(f"{first} {last}")
    position = _value(profile.current_position)
    skills = split_skills(profile.skills)

    contact = [escape(_value(profile.email)), escape(_value(profile.phone))]
    if profile.location:
        contact.append(escape(profile.location))

    if profile.experience_level is not None:
        experience = f"{profile.experience_level.value.lower()} of experience"
    else:
        experience = "professional experience"
    summary = escape(
        f"{position} with {experience}. Passionate about delivering "
        "high-quality solutions and driving innovation in technology."
    )

    if skills:
        expertise = Markup(", ").join(skills[:EXPERIENCE_HIGHLIGHT_SKILLS])
    else:
        expertise = Markup(MISSING_PLACEHOLDER)

    sections = (
        Section("Professional Summary", (TextBlock(summary),)),
        Section(
            "Skills",
            (SkillsBlock(skills) if skills else TextBlock(Markup(MISSING_PLACEHOLDER)),),
        ),
        Section(
            "Experience",
            (
                EntryBlock(
                    heading=escape(position),
                    subheading=Markup("Current Position"),
                    text=Markup("Experienced professional with expertise in ")
                    + expertise
                    + Markup("."),
                ),
            ),
        ),
        Section("Job Preferences", (FieldListBlock(_preferences(profile)),)),
    )

    return MarkupTree(
        title=Markup("Resume - ") + name,
        name=name,
        contact=tuple(contact),
        sections=sections,
        footer=FOOTER,
    )


def split_skills(skills: str | None) -> tuple[Markup, ...]:
    """Split the comma-delimited skills string into escaped, de-duplicated tags."""
    if not skills:
        return ()
    seen: set[str] = set()
    tags: list[Markup] = []
    for token in skills.split(SKILL_DELIMITER):
        token = token.strip()
        if not token or token.lower() in seen:
            continue
        seen.add(token.lower())
        tags.append(escape(token))
    return tuple(tags)


def _preferences(profile: ProfileData) -> tuple[tuple[Markup, Markup], ...]:
    rows = (
        ("Desired Salary", profile.desired_salary or SALARY_PLACEHOLDER),
        ("Work Type", _enum_value(profile.work_type)),
        ("Job Type", _enum_value(profile.job_type)),
        ("Experience Level", _enum_value(profile.experience_level)),
    )
    return tuple((Markup(label), escape(value)) for label, value in rows)


def _value(value: str | None) -> str:
    return value if value else MISSING_PLACEHOLDER


def _enum_value(value) -> str:
    return value.value if value is not None else UNSPECIFIED_PLACEHOLDER
