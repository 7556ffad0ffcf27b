"""Text-generation providers."""

from .llm_provider import (
    GeminiLLMProvider,
    LLMError,
    LLMProvider,
    MockLLMProvider,
    OpenAILLMProvider,
    get_llm_provider,
)

__all__ = [
    "GeminiLLMProvider",
    "LLMError",
    "LLMProvider",
    "MockLLMProvider",
    "OpenAILLMProvider",
    "get_llm_provider",
]
