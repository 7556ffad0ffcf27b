"""Webpage translation via text-generation models."""

from .client import TranslationClient, TranslationError, strip_code_fences
from .prompts import build_detect_language_prompt, build_translation_prompt

__all__ = [
    "TranslationClient",
    "TranslationError",
    "build_detect_language_prompt",
    "build_translation_prompt",
    "strip_code_fences",
]
