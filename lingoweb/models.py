"""
Core data models used across the application.

Includes models for:
- The static language catalog offered for translation
- Fetched page content and translation requests/outcomes
- Page state snapshots owned by the page controller
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# LANGUAGE CATALOG
# ============================================================================


class UnknownLanguageError(KeyError):
    """Raised when a language code is not in the catalog."""

    pass


class Language(BaseModel):
    """A translation target offered in the language selector."""

    model_config = ConfigDict(frozen=True)

    code: str = Field(description="Short identifier, e.g. 'te'")
    name: str = Field(description="English display name, e.g. 'Telugu'")
    native: str = Field(description="Name in the language's own script")

    @property
    def prompt_name(self) -> str:
        """Name embedded into the translation prompt."""
        return self.name

    @property
    def label(self) -> str:
        return f"{self.name} ({self.native})"


LANGUAGES: tuple[Language, ...] = (
    Language(code="te", name="Telugu", native="తెలుగు"),
    Language(code="hi", name="Hindi", native="हिन्दी"),
    Language(code="ta", name="Tamil", native="தமிழ்"),
    Language(code="kn", name="Kannada", native="ಕನ್ನಡ"),
    Language(code="ml", name="Malayalam", native="മലയാളം"),
    Language(code="es", name="Spanish", native="Español"),
    Language(code="fr", name="French", native="Français"),
    Language(code="de", name="German", native="Deutsch"),
    Language(code="ja", name="Japanese", native="日本語"),
    Language(code="zh", name="Chinese", native="中文"),
)

DEFAULT_LANGUAGE = LANGUAGES[0]


def get_language(code: str) -> Language:
    """Look up a catalog entry by code.

    Args:
        code: Language code (case-insensitive)

    Returns:
        The matching Language

    Raises:
        UnknownLanguageError: If the code is not in the catalog
    """
    wanted = code.strip().lower()
    for language in LANGUAGES:
        if language.code == wanted:
            return language
    raise UnknownLanguageError(f"Unknown language code: {code}")


# ============================================================================
# CONTENT AND TRANSLATION MODELS
# ============================================================================


class PageContent(BaseModel):
    """A fetched page, before and after sanitization."""

    model_config = ConfigDict(frozen=True)

    url: str
    raw_html: str
    clean_html: str
    title: str = "Untitled Page"


class TranslationRequest(BaseModel):
    """Input for a single translation call."""

    model_config = ConfigDict(frozen=True)

    clean_html: str
    target_language_name: str


class TranslationOutcome(BaseModel):
    """Result of a single translation call: HTML on success, error otherwise."""

    model_config = ConfigDict(frozen=True)

    translated_html: str | None = None
    error: str | None = None
    truncated: bool = False

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.translated_html is not None


# ============================================================================
# PAGE STATE
# ============================================================================


class PageStatus(str, Enum):
    """Lifecycle of a translation cycle."""

    IDLE = "idle"
    FETCHING = "fetching"
    TRANSLATING = "translating"
    READY = "ready"
    FAILED = "failed"

    @property
    def is_busy(self) -> bool:
        return self in (PageStatus.FETCHING, PageStatus.TRANSLATING)


class ViewMode(str, Enum):
    """How ready content is displayed."""

    SPLIT = "split"
    FULL = "full"


class PageState(BaseModel):
    """
    Immutable snapshot of the page controller's state.

    ``original_html`` and ``translated_html`` are only ever populated
    together and always belong to the cycle identified by ``request_id``.
    """

    model_config = ConfigDict(frozen=True)

    status: PageStatus = PageStatus.IDLE
    request_id: int = 0
    url: str | None = None
    language: Language = DEFAULT_LANGUAGE
    original_html: str | None = None
    translated_html: str | None = None
    title: str | None = None
    message: str = ""
    truncated: bool = False

    @property
    def is_ready(self) -> bool:
        return self.status == PageStatus.READY
