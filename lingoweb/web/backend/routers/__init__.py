"""API routers."""

from .jobs import router as jobs_router
from .languages import router as languages_router
from .pages import router as pages_router
from .translations import router as translations_router
from .ui import router as ui_router

__all__ = [
    "jobs_router",
    "languages_router",
    "pages_router",
    "translations_router",
    "ui_router",
]
