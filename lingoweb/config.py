"""Configuration loading and management."""

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field


class LLMConfig(BaseModel):
    """Text-generation provider configuration."""

    provider: str = "gemini"
    model: str = "gemini-3-flash-preview"
    temperature: float = 0.1
    max_tokens: int | None = None
    api_key: str | None = None
    timeout: float = 120.0


class ProxyConfig(BaseModel):
    """Cross-origin fetch proxy configuration.

    ``kind`` selects how pages are retrieved:

    - ``allorigins``: the public allorigins relay (JSON envelope).
    - ``template``: any JSON relay; ``endpoint`` must contain ``{url}``.
    - ``direct``: fetch the page from this process without a relay.
    """

    kind: Literal["allorigins", "template", "direct"] = "allorigins"
    endpoint: str = "https://api.allorigins.win/get?url={url}"
    content_field: str = "contents"
    timeout: float = 30.0


class TranslationConfig(BaseModel):
    """Prompt composition limits."""

    max_input_chars: int = Field(default=15000, gt=0)
    detect_chars: int = Field(default=500, gt=0)


class ServerConfig(BaseModel):
    """Web server configuration."""

    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:8000", "http://127.0.0.1:8000"]
    )
    max_workers: int = 4
    # Finished jobs stay queryable this long
    job_retention_seconds: int = Field(default=3600, ge=0)
    # Sessions untouched this long are forgotten
    session_idle_seconds: int = Field(default=3600, ge=0)
    max_sessions: int = Field(default=1000, gt=0)


class Config(BaseModel):
    """Main application configuration."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    proxy: ProxyConfig = Field(default_factory=ProxyConfig)
    translation: TranslationConfig = Field(default_factory=TranslationConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @classmethod
    def from_yaml(cls, path: Path | str) -> "Config":
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f)

        if data is None:
            return cls()

        return cls(**data)

    def to_yaml(self, path: Path | str) -> None:
        """Save configuration to a YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = self.model_dump()
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False)


def load_config(config_path: Path | str | None = None) -> Config:
    """Load configuration from file or use defaults.

    Without an explicit path, LINGOWEB_CONFIG is used, then config.yaml
    in the current directory or project root.
    """
    if config_path is None:
        config_path = os.environ.get("LINGOWEB_CONFIG") or None

    if config_path is None:
        # Look for config.yaml in current directory or project root
        candidates = [Path("config.yaml"), Path(__file__).parent.parent / "config.yaml"]
        for candidate in candidates:
            if candidate.exists():
                config_path = candidate
                break

    if config_path is not None:
        return Config.from_yaml(config_path)

    return Config()
