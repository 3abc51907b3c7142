"""PDF export for resume-delivery."""
from resume_delivery.export.engines import (
    PlaywrightLauncher,
    WeasyPrintLauncher,
    create_launcher,
)
from resume_delivery.export.renderer import DocumentRenderer, page_options_from_config

__all__ = [
    "DocumentRenderer",
    "PlaywrightLauncher",
    "WeasyPrintLauncher",
    "create_launcher",
    "page_options_from_config",
]
