"""Content ingestion module - fetch and sanitize web pages."""

from .fetcher import ContentFetcher, FetchError, fetch_page, validate_url
from .sanitizer import EXCLUDED_TAGS, extract_title, sanitize_html

__all__ = [
    "ContentFetcher",
    "EXCLUDED_TAGS",
    "FetchError",
    "extract_title",
    "fetch_page",
    "sanitize_html",
    "validate_url",
]
