"""FastAPI backend for LingoWeb."""

from .app import create_app

__all__ = ["create_app"]
