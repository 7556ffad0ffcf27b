"""LLM prompts for webpage translation."""

TRANSLATION_PROMPT_TEMPLATE = """Translate the following web content into {target_language}.
IMPORTANT INSTRUCTIONS:
1. Keep the HTML tags exactly as they are.
2. Only translate the human-readable text inside the tags.
3. Do not translate code blocks, script contents, or technical attributes (like IDs, classes, URLs).
4. Return ONLY the translated HTML content. No explanations.
5. Ensure the resulting HTML is valid.

CONTENT TO TRANSLATE:
{html}
"""

DETECT_LANGUAGE_PROMPT_TEMPLATE = """Detect the language of the following text and return ONLY the language name: "{text}\""""


def build_translation_prompt(html: str, target_language: str) -> str:
    """Build the instruction prompt for translating an HTML fragment."""
    return TRANSLATION_PROMPT_TEMPLATE.format(target_language=target_language, html=html)


def build_detect_language_prompt(text: str) -> str:
    """Build the prompt asking the model to name the language of a text."""
    return DETECT_LANGUAGE_PROMPT_TEMPLATE.format(text=text)
