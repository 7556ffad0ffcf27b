"""Language catalog router."""

from fastapi import APIRouter

from ....models import DEFAULT_LANGUAGE, LANGUAGES, Language
from ..models.responses import LanguageInfo

router = APIRouter(prefix="/languages", tags=["languages"])


def language_info(language: Language) -> LanguageInfo:
    return LanguageInfo(
        code=language.code,
        name=language.name,
        native=language.native,
        is_default=language == DEFAULT_LANGUAGE,
    )


@router.get("", response_model=list[LanguageInfo])
def list_languages() -> list[LanguageInfo]:
    """List the languages pages can be translated into."""
    return [language_info(language) for language in LANGUAGES]
