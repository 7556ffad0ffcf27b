"""Webpage translation through a single text-generation request."""

import logging
import re

from ..config import TranslationConfig
from ..models import TranslationOutcome, TranslationRequest
from ..understanding.llm_provider import LLMProvider
from .prompts import build_detect_language_prompt, build_translation_prompt

logger = logging.getLogger(__name__)

# Hard ceiling on HTML embedded into the prompt. Anything beyond it is not
# translated.
DEFAULT_MAX_INPUT_CHARS = 15000

DEFAULT_TEMPERATURE = 0.1

_CODE_FENCE = re.compile(r"^```[a-zA-Z]*\s*\n?([\s\S]*?)\n?```$")


class TranslationError(Exception):
    """The model call failed or produced no usable output."""

    pass


def strip_code_fences(text: str) -> str:
    """Remove a markdown code fence wrapped around a whole response."""
    text = text.strip()
    match = _CODE_FENCE.match(text)
    if match:
        return match.group(1).strip()
    return text


class TranslationClient:
    """Translates sanitized HTML with an injected LLM provider.

    One call to ``translate`` issues exactly one generation request. There is
    no retry, caching or chunking.
    """

    def __init__(
        self,
        provider: LLMProvider,
        max_input_chars: int = DEFAULT_MAX_INPUT_CHARS,
        temperature: float = DEFAULT_TEMPERATURE,
        detect_chars: int = 500,
    ):
        """Initialize the translation client.

        Args:
            provider: Text-generation provider to call.
            max_input_chars: Ceiling on HTML characters embedded in the prompt.
            temperature: Sampling temperature for translation requests.
            detect_chars: Characters of text sent for language detection.
        """
        if max_input_chars <= 0:
            raise ValueError("max_input_chars must be positive")
        self.provider = provider
        self.max_input_chars = max_input_chars
        self.temperature = temperature
        self.detect_chars = detect_chars

    @classmethod
    def from_config(
        cls,
        provider: LLMProvider,
        config: TranslationConfig | None = None,
    ) -> "TranslationClient":
        config = config or TranslationConfig()
        return cls(
            provider,
            max_input_chars=config.max_input_chars,
            temperature=provider.config.temperature,
            detect_chars=config.detect_chars,
        )

    def build_request(self, clean_html: str, target_language_name: str) -> TranslationRequest:
        """Apply the input ceiling and package a request."""
        return TranslationRequest(
            clean_html=clean_html[: self.max_input_chars],
            target_language_name=target_language_name,
        )

    def translate(self, clean_html: str, target_language_name: str) -> str:
        """Translate an HTML fragment into the target language.

        Args:
            clean_html: Sanitized HTML fragment
            target_language_name: Display name of the language, e.g. "Telugu"

        Returns:
            Translated HTML

        Raises:
            TranslationError: If the provider fails or returns empty output
        """
        if not target_language_name or not target_language_name.strip():
            raise TranslationError("No target language given")

        request = self.build_request(clean_html, target_language_name)
        if len(clean_html) > self.max_input_chars:
            logger.warning(
                "Input truncated from %d to %d characters before translation",
                len(clean_html),
                self.max_input_chars,
            )

        prompt = build_translation_prompt(request.clean_html, request.target_language_name)
        try:
            response = self.provider.generate(prompt, temperature=self.temperature)
        except Exception as e:
            logger.error("Translation request failed: %s", e)
            raise TranslationError(f"Failed to translate page content: {e}") from e

        translated = strip_code_fences(response or "")
        if not translated:
            raise TranslationError("Translation failed: the model returned no content.")
        return translated

    def translate_outcome(self, clean_html: str, target_language_name: str) -> TranslationOutcome:
        """Translate and report the result as a TranslationOutcome instead of raising."""
        truncated = len(clean_html) > self.max_input_chars
        try:
            html = self.translate(clean_html, target_language_name)
        except TranslationError as e:
            return TranslationOutcome(error=str(e), truncated=truncated)
        return TranslationOutcome(translated_html=html, truncated=truncated)

    def detect_language(self, text: str) -> str:
        """Ask the model for the language name of a text sample.

        Args:
            text: Text to classify; only the first ``detect_chars`` are sent

        Returns:
            Language name, or "Unknown" if the model returned nothing

        Raises:
            TranslationError: If the provider fails
        """
        prompt = build_detect_language_prompt(text[: self.detect_chars])
        try:
            response = self.provider.generate(prompt)
        except Exception as e:
            raise TranslationError(f"Failed to detect language: {e}") from e
        return (response or "").strip() or "Unknown"
