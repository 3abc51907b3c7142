"""Document composition and HTML serialization."""
from resume_delivery.templates.compositor import compose, split_skills
from resume_delivery.templates.html import AVAILABLE_THEMES, render_html

__all__ = ["AVAILABLE_THEMES", "compose", "render_html", "split_skills"]
