"""Translation cycle orchestration."""

from .controller import (
    EMPTY_PAGE_MESSAGE,
    FETCHING_MESSAGE,
    TRANSLATING_MESSAGE,
    PageController,
    StateListener,
    build_controller,
)

__all__ = [
    "EMPTY_PAGE_MESSAGE",
    "FETCHING_MESSAGE",
    "TRANSLATING_MESSAGE",
    "PageController",
    "StateListener",
    "build_controller",
]
