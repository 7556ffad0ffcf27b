"""Tests for the CLI module."""

import argparse
import os
from unittest.mock import MagicMock, patch

import pytest

from lingoweb.cli.main import cmd_languages, main


@pytest.fixture
def relay(make_http_client, make_envelope_response):
    """Patch the relay to serve a fixed page."""

    def serve(html: str) -> MagicMock:
        return make_http_client(make_envelope_response({"contents": html}))

    with patch("lingoweb.ingestion.fetcher.httpx.Client") as mock_client_class:
        mock_client_class.return_value = serve(
            "<html><head><title>Greeting</title></head>"
            "<body><h1>Hello</h1><script>x()</script></body></html>"
        )
        yield mock_client_class


class TestCmdLanguages:
    """Tests for the languages command."""

    def test_lists_catalog(self, capsys):
        assert cmd_languages(argparse.Namespace()) == 0

        out = capsys.readouterr().out
        assert "Telugu" in out
        assert "Chinese" in out
        assert "(default)" in out


class TestCmdFetch:
    """Tests for the fetch command."""

    def test_prints_sanitized_html(self, relay, capsys):
        assert main(["--mock", "fetch", "https://example.com"]) == 0

        out = capsys.readouterr().out
        assert "<h1>Hello</h1>" in out
        assert "<script>" not in out

    def test_raw(self, relay, capsys):
        assert main(["--mock", "fetch", "--raw", "https://example.com"]) == 0

        assert "<script>x()</script>" in capsys.readouterr().out

    def test_writes_output_file(self, relay, tmp_path):
        output = tmp_path / "page.html"

        assert main(["--mock", "fetch", "https://example.com", "-o", str(output)]) == 0

        assert output.read_text(encoding="utf-8") == "<h1>Hello</h1>"

    def test_fetch_failure(self, relay, make_http_client, make_envelope_response, capsys):
        relay.return_value = make_http_client(make_envelope_response({"contents": None}))

        assert main(["--mock", "fetch", "https://example.com"]) == 1

        assert "Could not retrieve content" in capsys.readouterr().err

    def test_invalid_url(self, relay, capsys):
        assert main(["--mock", "fetch", "example.com"]) == 1


class TestCmdDetect:
    """Tests for the detect command."""

    def test_detects_with_mock(self, relay, capsys):
        assert main(["--mock", "detect", "https://example.com"]) == 0

        assert "English" in capsys.readouterr().out

    def test_unknown_provider(self, relay, tmp_path, capsys):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("llm:\n  provider: bogus\n")

        assert main(["--config", str(config_path), "detect", "https://example.com"]) == 1

        assert "Error: Unknown LLM provider: bogus" in capsys.readouterr().err


class TestCmdTranslate:
    """Tests for the translate command."""

    def test_prints_translation(self, relay, capsys):
        """The mock provider echoes the sanitized page back."""
        assert main(["--mock", "translate", "https://example.com", "--lang", "te"]) == 0

        out = capsys.readouterr().out
        assert "<h1>Hello</h1>" in out
        assert "x()" not in out

    def test_writes_document(self, relay, tmp_path):
        output = tmp_path / "out" / "page.html"

        code = main(
            ["--mock", "translate", "https://example.com", "-l", "hi", "--view", "full", "-o", str(output)]
        )

        assert code == 0
        html = output.read_text(encoding="utf-8")
        assert "Translated Content" in html
        assert "Original Content" not in html
        assert "Hindi" in html

    def test_unknown_language(self, relay, capsys):
        assert main(["--mock", "translate", "https://example.com", "--lang", "xx"]) == 1

        assert "Unknown language code" in capsys.readouterr().err
        relay.assert_not_called()

    def test_fetch_failure(self, relay, make_http_client, make_envelope_response, capsys):
        relay.return_value = make_http_client(make_envelope_response({}))

        assert main(["--mock", "translate", "https://example.com"]) == 1

        assert "Error: Could not retrieve content from the URL." in capsys.readouterr().err

    def test_missing_api_key(self, relay, monkeypatch, tmp_path, capsys):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.delenv("API_KEY", raising=False)
        monkeypatch.delenv("LINGOWEB_CONFIG", raising=False)
        monkeypatch.chdir(tmp_path)

        assert main(["translate", "https://example.com"]) == 1

        assert "GEMINI_API_KEY" in capsys.readouterr().err

    def test_unknown_provider(self, relay, tmp_path, capsys):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("llm:\n  provider: bogus\n")

        assert main(["--config", str(config_path), "translate", "https://example.com"]) == 1

        assert "Unknown LLM provider" in capsys.readouterr().err
        relay.assert_not_called()


class TestMain:
    """Tests for argument handling."""

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()

    def test_unknown_command(self):
        with pytest.raises(SystemExit):
            main(["bogus"])

    def test_loads_dotenv_from_working_directory(self, tmp_path, monkeypatch):
        """Variables from .env reach the configuration even via the installed script."""
        config_path = tmp_path / "mock.yaml"
        config_path.write_text("llm:\n  provider: mock\n")
        (tmp_path / ".env").write_text(f"LINGOWEB_CONFIG={config_path}\n")
        monkeypatch.chdir(tmp_path)

        with patch.dict(os.environ):
            os.environ.pop("LINGOWEB_CONFIG", None)
            assert main(["languages"]) == 0
            assert os.environ["LINGOWEB_CONFIG"] == str(config_path)
