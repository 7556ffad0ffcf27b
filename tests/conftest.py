"""Shared test fixtures."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from lingoweb.config import Config
from lingoweb.understanding.llm_provider import MockLLMProvider


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-llm-tests",
        action="store_true",
        default=False,
        help="Run LLM integration tests (makes real API calls)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip LLM tests unless --run-llm-tests is provided."""
    if not config.getoption("--run-llm-tests", default=False):
        skip_llm = pytest.mark.skip(
            reason="LLM integration tests skipped. Use --run-llm-tests to run."
        )
        for item in items:
            if "llm_integration" in item.keywords:
                item.add_marker(skip_llm)


@pytest.fixture
def test_config() -> Config:
    """Provide a test configuration."""
    return Config()


@pytest.fixture
def mock_config() -> Config:
    """Provide a test configuration with mock LLM provider."""
    config = Config()
    config.llm.provider = "mock"
    return config


@pytest.fixture
def mock_provider() -> MockLLMProvider:
    """Provide a mock LLM provider that echoes the content to translate."""
    return MockLLMProvider()


@pytest.fixture
def sample_html() -> str:
    """Provide a realistic page with markup that must be removed."""
    return """<!DOCTYPE html>
<html>
<head>
  <title>Sample Article</title>
  <style>body { color: red; }</style>
  <script src="/analytics.js"></script>
</head>
<body>
  <noscript><img src="/pixel.gif"></noscript>
  <h1>Hello</h1>
  <p onclick="track()">Every page has <a href="javascript:alert(1)">links</a>
     and <a href="https://example.com/about">more links</a>.</p>
  <div class="embed"><iframe src="https://ads.example.com"></iframe></div>
  <script>window.tracking = true;</script>
</body>
</html>
"""


@pytest.fixture
def make_http_client():
    """Factory for a mock httpx.Client usable as a context manager."""

    def factory(response: MagicMock) -> MagicMock:
        client = MagicMock()
        client.get.return_value = response
        client.__enter__ = MagicMock(return_value=client)
        client.__exit__ = MagicMock(return_value=False)
        return client

    return factory


@pytest.fixture
def make_envelope_response():
    """Factory for a mock relay response returning a JSON payload."""

    def factory(payload) -> MagicMock:
        response = MagicMock()
        response.raise_for_status = MagicMock()
        response.json.return_value = payload
        return response

    return factory


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent
