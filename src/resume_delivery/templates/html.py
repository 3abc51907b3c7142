"""Serialize a MarkupTree to a themed HTML document."""

from __future__ import annotations

import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup

from resume_delivery.models.markup import MarkupTree

logger = logging.getLogger(__name__)

BASE_TEMPLATE_DIR = Path(__file__).parent
CSS_THEMES_DIR = BASE_TEMPLATE_DIR / "css_themes"

AVAILABLE_THEMES = ("professional", "minimal")
DEFAULT_THEME = "professional"

_env = Environment(
    loader=FileSystemLoader(str(BASE_TEMPLATE_DIR)),
    autoescape=True,
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_html(tree: MarkupTree, theme: str = DEFAULT_THEME) -> str:
    """Render the tree with the given CSS theme. Unknown themes fall back to the default."""
    if theme not in AVAILABLE_THEMES:
        logger.warning("Unknown theme %r, using %r", theme, DEFAULT_THEME)
        theme = DEFAULT_THEME
    css_path = CSS_THEMES_DIR / f"{theme}.css"
    css = css_path.read_text(encoding="utf-8") if css_path.exists() else ""
    template = _env.get_template("resume.html")
    return template.render(tree=tree, css=Markup(css))


def save_html(html_content: str, output_path: str | Path) -> Path:
    """Save HTML content to file."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(html_content, encoding="utf-8")
    return path
