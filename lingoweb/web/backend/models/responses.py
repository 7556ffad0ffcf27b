"""Pydantic response models for API endpoints."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


class LanguageInfo(BaseModel):
    """A language offered for translation."""

    code: str
    name: str
    native: str
    is_default: bool = False


class PageStateResponse(BaseModel):
    """Current page state of a session."""

    session_id: str
    status: Literal["idle", "fetching", "translating", "ready", "failed"]
    request_id: int
    url: str | None = None
    language: LanguageInfo
    title: str | None = None
    message: str = ""
    original_html: str | None = None
    translated_html: str | None = None
    truncated: bool = False


class JobStartedResponse(BaseModel):
    """Response when a translation job is started."""

    job_id: str
    session_id: str
    request_id: int
    status: Literal["pending", "running"] = "pending"
    message: str


class JobResponse(BaseModel):
    """Full job status response."""

    job_id: str
    type: str
    session_id: str
    status: Literal["pending", "running", "completed", "failed", "cancelled"]
    progress: float = Field(ge=0.0, le=1.0, description="Progress from 0.0 to 1.0")
    message: str
    result: dict[str, Any] | None = None
    error: str | None = None
    created_at: datetime
    updated_at: datetime
