"""LLM Provider abstraction and implementations."""

import logging
import os
import re
from abc import ABC, abstractmethod

from ..config import Config, LLMConfig

logger = logging.getLogger(__name__)


class LLMError(Exception):
    """Error from a text-generation provider."""

    pass


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    def __init__(self, config: LLMConfig):
        self.config = config

    @abstractmethod
    def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float | None = None,
    ) -> str:
        """Generate a response from the LLM.

        Args:
            prompt: The user prompt
            system_prompt: Optional system prompt
            temperature: Sampling temperature; falls back to the configured value

        Returns:
            The generated text response, possibly empty

        Raises:
            LLMError: If the provider call fails
        """
        pass

    def _temperature(self, temperature: float | None) -> float:
        return self.config.temperature if temperature is None else temperature


class MockLLMProvider(LLMProvider):
    """Mock LLM provider that echoes content for testing.

    Translation prompts get the embedded HTML back unchanged, language
    detection prompts get ``"English"``. Every call is recorded in ``calls``.
    """

    CONTENT_MARKER = "CONTENT TO TRANSLATE:"

    def __init__(self, config: LLMConfig | None = None):
        super().__init__(config or LLMConfig(provider="mock"))
        self.calls: list[dict] = []

    def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float | None = None,
    ) -> str:
        """Generate a mock response based on prompt patterns."""
        self.calls.append(
            {
                "prompt": prompt,
                "system_prompt": system_prompt,
                "temperature": self._temperature(temperature),
            }
        )

        if self.CONTENT_MARKER in prompt:
            return prompt.split(self.CONTENT_MARKER, 1)[1].strip()

        if re.search(r"detect the language", prompt, re.IGNORECASE):
            return "English"

        return "This is a mock LLM response for testing purposes."


class GeminiLLMProvider(LLMProvider):
    """LLM provider using the Google Gen AI SDK."""

    def __init__(self, config: LLMConfig, api_key: str | None = None):
        """Initialize the Gemini provider.

        Args:
            config: LLM configuration
            api_key: API key. Falls back to config, then GEMINI_API_KEY / API_KEY.

        Raises:
            LLMError: If no API key is available
        """
        super().__init__(config)
        api_key = (
            api_key
            or config.api_key
            or os.getenv("GEMINI_API_KEY")
            or os.getenv("API_KEY")
        )
        if not api_key:
            raise LLMError("Missing GEMINI_API_KEY for the Gemini provider")

        from google import genai
        from google.genai import types

        self._types = types
        self.client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(config.timeout * 1000)),
        )

    def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float | None = None,
    ) -> str:
        """Generate a text response via the Gemini API."""
        config_params = {"temperature": self._temperature(temperature)}
        if system_prompt:
            config_params["system_instruction"] = system_prompt
        if self.config.max_tokens is not None:
            config_params["max_output_tokens"] = self.config.max_tokens

        try:
            response = self.client.models.generate_content(
                model=self.config.model,
                contents=prompt,
                config=self._types.GenerateContentConfig(**config_params),
            )
        except Exception as e:
            raise LLMError(f"Gemini request failed: {e}") from e

        return response.text or ""


class OpenAILLMProvider(LLMProvider):
    """LLM provider using the OpenAI chat completions API."""

    def __init__(self, config: LLMConfig, api_key: str | None = None):
        """Initialize the OpenAI provider.

        Args:
            config: LLM configuration
            api_key: API key. Falls back to config, then OPENAI_API_KEY.

        Raises:
            LLMError: If no API key is available
        """
        super().__init__(config)
        api_key = api_key or config.api_key or os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise LLMError("Missing OPENAI_API_KEY for the OpenAI provider")

        import openai

        self.client = openai.OpenAI(api_key=api_key, timeout=config.timeout)

    def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float | None = None,
    ) -> str:
        """Generate a text response via the OpenAI API."""
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        params = {
            "model": self.config.model,
            "messages": messages,
            "temperature": self._temperature(temperature),
        }
        if self.config.max_tokens is not None:
            params["max_tokens"] = self.config.max_tokens

        try:
            response = self.client.chat.completions.create(**params)
        except Exception as e:
            raise LLMError(f"OpenAI request failed: {e}") from e

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""


def get_llm_provider(config: Config | None = None) -> LLMProvider:
    """Get the appropriate LLM provider based on configuration.

    Args:
        config: Configuration object. If None, loads default config.

    Returns:
        An LLM provider instance.

    Raises:
        ValueError: If provider name is not recognized.
        LLMError: If the provider cannot be constructed (e.g. missing key).
    """
    if config is None:
        from ..config import load_config

        config = load_config()

    provider_name = config.llm.provider.lower()
    logger.debug("Using LLM provider %s (%s)", provider_name, config.llm.model)

    if provider_name == "mock":
        return MockLLMProvider(config.llm)
    elif provider_name == "gemini":
        return GeminiLLMProvider(config.llm)
    elif provider_name == "openai":
        return OpenAILLMProvider(config.llm)
    else:
        raise ValueError(f"Unknown LLM provider: {provider_name}")
