"""Test fixtures for web backend tests."""

import time
from typing import Generator
from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.testclient import TestClient

from lingoweb.config import Config
from lingoweb.pipeline import build_controller
from lingoweb.understanding.llm_provider import MockLLMProvider
from lingoweb.web.backend import dependencies
from lingoweb.web.backend.services.job_manager import JobManager
from lingoweb.web.backend.services.page_service import PageService
from lingoweb.web.backend.websocket.manager import WebSocketManager

PAGE_HTML = (
    "<html><head><title>Greeting</title></head>"
    "<body><h1>Hello</h1><script>track()</script></body></html>"
)


@pytest.fixture
def test_config() -> Config:
    """Create a test configuration using the mock provider."""
    config = Config()
    config.llm.provider = "mock"
    config.server.cors_origins = ["*"]
    config.server.max_workers = 2
    return config


@pytest.fixture
def relay() -> Generator[MagicMock, None, None]:
    """Patch the fetch relay to serve PAGE_HTML."""
    response = MagicMock()
    response.raise_for_status = MagicMock()
    response.json.return_value = {"contents": PAGE_HTML}

    client = MagicMock()
    client.get.return_value = response
    client.__enter__ = MagicMock(return_value=client)
    client.__exit__ = MagicMock(return_value=False)

    with patch("lingoweb.ingestion.fetcher.httpx.Client") as mock_client_class:
        mock_client_class.return_value = client
        yield mock_client_class


@pytest.fixture
def job_manager() -> Generator[JobManager, None, None]:
    """Create a fresh job manager for testing."""
    manager = JobManager(max_workers=2)
    yield manager
    manager.shutdown(wait=True)


@pytest.fixture
def ws_manager() -> WebSocketManager:
    """Create a fresh WebSocket manager for testing."""
    return WebSocketManager()


@pytest.fixture
def mock_provider() -> MockLLMProvider:
    return MockLLMProvider()


@pytest.fixture
def page_service(
    test_config: Config,
    job_manager: JobManager,
    mock_provider: MockLLMProvider,
) -> PageService:
    """Create a page service whose sessions use the mock provider."""
    return PageService(
        job_manager=job_manager,
        controller_factory=lambda: build_controller(test_config, provider=mock_provider),
    )


@pytest.fixture
def wait_for_job(job_manager: JobManager):
    """Poll until a job leaves the pending/running states."""

    def wait(job_id: str, timeout: float = 5.0):
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            job = job_manager.get_job(job_id)
            if job is not None and not job.status.is_active:
                return job
            time.sleep(0.01)
        raise AssertionError(f"Job {job_id} did not finish in {timeout}s")

    return wait


@pytest.fixture
def test_client(
    test_config: Config,
    job_manager: JobManager,
    ws_manager: WebSocketManager,
    page_service: PageService,
) -> Generator[TestClient, None, None]:
    """Create a test client with mocked dependencies."""
    from lingoweb.web.backend.routers import (
        jobs_router,
        languages_router,
        pages_router,
        translations_router,
        ui_router,
    )

    # Clear any cached dependencies
    dependencies.get_config.cache_clear()
    dependencies.get_job_manager.cache_clear()
    dependencies.get_websocket_manager.cache_clear()
    dependencies.get_llm.cache_clear()
    dependencies.get_page_service.cache_clear()

    job_manager.set_websocket_manager(ws_manager)
    page_service.set_websocket_manager(ws_manager)

    # Create app without lifespan to avoid building the configured provider
    app = FastAPI(title="LingoWeb API - Test")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(languages_router, prefix="/api/v1")
    app.include_router(translations_router, prefix="/api/v1")
    app.include_router(pages_router, prefix="/api/v1")
    app.include_router(jobs_router, prefix="/api/v1")
    app.include_router(ui_router)

    @app.get("/health")
    def health_check() -> dict[str, str]:
        return {"status": "ok"}

    # Override dependencies
    app.dependency_overrides[dependencies.get_config] = lambda: test_config
    app.dependency_overrides[dependencies.get_job_manager] = lambda: job_manager
    app.dependency_overrides[dependencies.get_websocket_manager] = lambda: ws_manager
    app.dependency_overrides[dependencies.get_page_service] = lambda: page_service

    with TestClient(app) as client:
        yield client

    # Cleanup
    app.dependency_overrides.clear()
