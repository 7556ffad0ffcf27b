"""Dependency injection for FastAPI."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from ...config import Config, load_config
from ...pipeline import PageController, build_controller
from ...understanding.llm_provider import LLMProvider, get_llm_provider
from .services.job_manager import JobManager
from .services.page_service import PageService
from .websocket.manager import WebSocketManager


@lru_cache
def get_config() -> Config:
    """Get the application configuration (cached)."""
    return load_config()


@lru_cache
def get_websocket_manager() -> WebSocketManager:
    """Get the WebSocket manager (cached singleton)."""
    return WebSocketManager()


@lru_cache
def get_job_manager() -> JobManager:
    """Get the job manager (cached singleton)."""
    server = get_config().server
    return JobManager(
        max_workers=server.max_workers,
        retention_seconds=server.job_retention_seconds,
    )


@lru_cache
def get_llm() -> LLMProvider:
    """Get the LLM provider (cached singleton, constructed once with its credential)."""
    return get_llm_provider(get_config())


@lru_cache
def get_page_service() -> PageService:
    """Get the page service (cached singleton, it owns the sessions)."""
    config = get_config()
    provider = get_llm()

    def controller_factory() -> PageController:
        return build_controller(config, provider=provider)

    return PageService(
        job_manager=get_job_manager(),
        controller_factory=controller_factory,
        max_sessions=config.server.max_sessions,
        idle_seconds=config.server.session_idle_seconds,
    )


# Type aliases for cleaner router signatures
ConfigDep = Annotated[Config, Depends(get_config)]
JobManagerDep = Annotated[JobManager, Depends(get_job_manager)]
WebSocketManagerDep = Annotated[WebSocketManager, Depends(get_websocket_manager)]
PageServiceDep = Annotated[PageService, Depends(get_page_service)]
