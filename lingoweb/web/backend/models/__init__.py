"""Pydantic models for API requests and responses."""

from .requests import TranslateRequest
from .responses import (
    JobResponse,
    JobStartedResponse,
    LanguageInfo,
    PageStateResponse,
)

__all__ = [
    # Requests
    "TranslateRequest",
    # Responses
    "JobResponse",
    "JobStartedResponse",
    "LanguageInfo",
    "PageStateResponse",
]
