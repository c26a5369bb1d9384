"""Configuration loading.

Sources, highest priority first:
  1. Environment variables  (RUSTDOCS__SERVER__TRANSPORT=http)
  2. rustdocs.yaml          (searched in cwd, then platform config dir)
  3. Hardcoded defaults

rustdocs.yaml is optional; every field has a default.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

ExtractionMode = Literal["structured", "markdown"]


def _find_config_file() -> str | None:
    """Return the path of the first rustdocs.yaml found, or None."""
    candidates = [
        Path("rustdocs.yaml"),
        Path(platformdirs.user_config_dir("rustdocs")) / "rustdocs.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class ServerSettings(BaseModel):
    transport: Literal["stdio", "http"] = "stdio"
    host: str = "127.0.0.1"
    port: int = 8080
    # Origins accepted in addition to localhost by the HTTP transport
    allowed_origins: list[str] = []


class DocsSettings(BaseModel):
    base_url: str = "https://docs.rs"
    timeout_seconds: float = 30.0
    max_redirects: int = Field(default=3, ge=0)
    # Hard character cutoff for the overview ``content`` field
    content_limit: int = Field(default=5000, ge=0)


class RegistrySettings(BaseModel):
    api_url: str = "https://crates.io/api/v1"
    # crates.io asks API clients to identify themselves with a contact address
    contact: str | None = None


class CacheSettings(BaseModel):
    search_ttl_minutes: int = Field(default=30, ge=0)
    latest_ttl_hours: int = Field(default=2, ge=0)
    versioned_ttl_hours: int = Field(default=24, ge=0)
    sweep_interval_minutes: int = Field(default=60, ge=1)


class ExtractionSettings(BaseModel):
    overview: ExtractionMode = "structured"
    item_docs: ExtractionMode = "structured"
    modules: ExtractionMode = "structured"


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: RUSTDOCS__SERVER__PORT=9090
        env_prefix="RUSTDOCS__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    server: ServerSettings = ServerSettings()
    docs: DocsSettings = DocsSettings()
    registry: RegistrySettings = RegistrySettings()
    cache: CacheSettings = CacheSettings()
    extraction: ExtractionSettings = ExtractionSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
