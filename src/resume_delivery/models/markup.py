"""Structured document tree produced by the compositor.

All text held by the tree is already HTML-escaped (``markupsafe.Markup``),
so serializers can emit it without escaping it a second time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from markupsafe import Markup


@dataclass(frozen=True)
class TextBlock:
    text: Markup
    kind: str = field(default="text", init=False)


@dataclass(frozen=True)
class EntryBlock:
    heading: Markup
    subheading: Markup
    text: Markup
    kind: str = field(default="entry", init=False)


@dataclass(frozen=True)
class FieldListBlock:
    fields: tuple[tuple[Markup, Markup], ...]
    kind: str = field(default="fields", init=False)


@dataclass(frozen=True)
class SkillsBlock:
    tags: tuple[Markup, ...]
    kind: str = field(default="skills", init=False)


Block = Union[TextBlock, EntryBlock, FieldListBlock, SkillsBlock]


@dataclass(frozen=True)
class Section:
    title: str
    blocks: tuple[Block, ...]


@dataclass(frozen=True)
class MarkupTree:
    title: Markup
    name: Markup
    contact: tuple[Markup, ...]
    sections: tuple[Section, ...]
    footer: str = ""

    def section(self, title: str) -> Section | None:
        for s in self.sections:
            if s.title == title:
                return s
        return None

    @property
    def skills(self) -> tuple[Markup, ...]:
        for s in self.sections:
            for block in s.blocks:
                if isinstance(block, SkillsBlock):
                    return block.tags
        return ()
