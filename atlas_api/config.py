from __future__ import annotations

import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from loguru import logger
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from atlas_api.client import DEFAULT_ENDPOINT, version
from atlas_api.errors import ConfigError

log = logger.bind(module="atlas_api.config")

CONFIG_ENV = "ATLAS_CONFIG"
CONFIG_DIR_NAME = "atlas-api"
CONFIG_FILE_NAME = "config.toml"


def default_config_path() -> Path:
    """Return the TOML file consulted when no explicit path is given."""
    explicit = os.getenv(CONFIG_ENV)
    if explicit:
        return Path(explicit).expanduser()
    base = os.getenv("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / CONFIG_DIR_NAME / CONFIG_FILE_NAME


class ProbeSet(BaseModel):
    """Default set of probes used for measurement requests."""

    pool_size: int = 10
    type: str = "area"
    value: str = "WW"
    tags: str = ""


class MeasurementsConfig(BaseModel):
    # RIPE account billed for measurements instead of the key owner.
    bill_to: str


class Settings(BaseSettings):
    """Client configuration snapshot."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_key: str | None = Field(default=None, alias="ATLAS_API_KEY")
    endpoint: str = Field(default=DEFAULT_ENDPOINT, alias="ATLAS_ENDPOINT")
    default_probe: int = Field(default=0, ge=0, alias="ATLAS_DEFAULT_PROBE")
    timeout_seconds: float = Field(default=5.0, alias="ATLAS_TIMEOUT_SECONDS")
    connect_timeout_seconds: float = Field(default=10.0, alias="ATLAS_CONNECT_TIMEOUT_SECONDS")
    user_agent: str = Field(default_factory=version, alias="ATLAS_USER_AGENT")
    want_af: Literal["4", "6", "46"] = Field(default="46", alias="ATLAS_WANT_AF")
    is_oneoff: bool = Field(default=True, alias="ATLAS_ONEOFF")
    verbose: bool = Field(default=False, alias="ATLAS_VERBOSE")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    probe_set: ProbeSet = Field(default_factory=ProbeSet)
    measurements: MeasurementsConfig | None = None
    default_options: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=default_config_path()),
        )

    def export_safe(self) -> dict[str, Any]:
        """Return non-sensitive settings for debugging/logging."""
        return {
            "endpoint": self.endpoint,
            "api_key_set": bool(self.api_key),
            "default_probe": self.default_probe,
            "timeout_seconds": self.timeout_seconds,
            "connect_timeout_seconds": self.connect_timeout_seconds,
            "want_af": self.want_af,
            "probe_set": self.probe_set.model_dump(),
            "default_options": sorted(self.default_options),
        }


def load_settings(path: str | Path, **overrides: Any) -> Settings:
    """Load settings from an explicit TOML file.

    Values from the file take precedence over the environment; ``overrides``
    take precedence over both.
    """
    target = Path(path).expanduser()
    try:
        with target.open("rb") as fh:
            data = tomllib.load(fh)
    except FileNotFoundError as exc:
        raise ConfigError(f"Configuration file not found: {target}") from exc
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Cannot read configuration file {target}: {exc}") from exc

    data.update(overrides)
    try:
        settings = Settings(**data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {target}: {exc}") from exc
    log.info("Settings loaded from {}: {}", target, settings.export_safe())
    return settings


@lru_cache
def get_settings() -> Settings:
    """Load and cache settings from the environment and the default file."""
    try:
        settings = Settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    log.info("Settings initialised: {}", settings.export_safe())
    return settings
