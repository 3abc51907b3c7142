"""HTTP interface."""
from resume_delivery.api.app import create_app

__all__ = ["create_app"]
