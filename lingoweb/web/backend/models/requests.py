"""Pydantic request models for API endpoints."""

from pydantic import BaseModel, Field


class TranslateRequest(BaseModel):
    """Request to translate a webpage."""

    url: str = Field(..., min_length=1, max_length=2048, description="Page URL to translate")
    language: str = Field(default="te", description="Target language code")
    session_id: str = Field(
        default="default",
        pattern=r"^[A-Za-z0-9_-]{1,64}$",
        description="Session that owns the page state",
    )
