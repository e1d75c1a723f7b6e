"""Root settings model for Gist configuration.

Values resolve from four layers, each overriding the one before:

1. Pydantic model defaults (in code)
2. ``default.toml`` in the config directory
3. ``{GIST_ENV}.toml`` in the same directory
4. ``GIST_*`` environment variables, ``__`` separating nested keys

The config directory is ``GIST_CONFIG_DIR`` when set, otherwise the
nearest ``config/`` holding a ``default.toml`` at or above the working
directory.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from gist.config.models.agent import AgentConfig
from gist.config.models.api import APIConfig
from gist.config.models.observability import ObservabilityConfig
from gist.config.models.streaming import StreamingConfig
from gist.observability.logging import get_logger

logger = get_logger(__name__)

CONFIG_DIR_VAR = "GIST_CONFIG_DIR"
ENVIRONMENT_VAR = "GIST_ENV"
DEFAULT_ENVIRONMENT = "development"
BASE_FILE = "default.toml"


def find_config_dir() -> Path | None:
    """Return the directory holding Gist's TOML files, if there is one."""
    override = os.environ.get(CONFIG_DIR_VAR)
    if override:
        return Path(override)
    cwd = Path.cwd()
    for directory in (cwd, *cwd.parents):
        candidate = directory / "config"
        if (candidate / BASE_FILE).is_file():
            return candidate
    return None


def overlay(base: dict[str, Any], top: dict[str, Any]) -> dict[str, Any]:
    """Merge ``top`` over ``base`` table by table, leaving both untouched."""
    merged = dict(base)
    for key, value in top.items():
        below = merged.get(key)
        if isinstance(below, dict) and isinstance(value, dict):
            merged[key] = overlay(below, value)
        else:
            merged[key] = value
    return merged


def read_config_files(config_dir: Path | None, environment: str) -> dict[str, Any]:
    """Read the base file and the environment file from ``config_dir``.

    Without a base file the result is empty and the code defaults apply.
    The environment file is optional. Invalid TOML raises
    ``tomllib.TOMLDecodeError``.
    """
    base_path = config_dir / BASE_FILE if config_dir is not None else None
    if base_path is None or not base_path.is_file():
        logger.warning(
            "config_file_not_found",
            path=str(base_path) if base_path else None,
            msg="Using default configuration",
        )
        return {}

    with base_path.open("rb") as f:
        values = tomllib.load(f)

    env_path = config_dir / f"{environment}.toml"
    if env_path.is_file():
        with env_path.open("rb") as f:
            values = overlay(values, tomllib.load(f))
    return values


class TomlConfigSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by the layered TOML files."""

    def __init__(self, settings_cls: type[BaseSettings]) -> None:
        super().__init__(settings_cls)
        self.config_dir = find_config_dir()
        self.environment = os.environ.get(ENVIRONMENT_VAR, DEFAULT_ENVIRONMENT)
        self._values = read_config_files(self.config_dir, self.environment)

    def get_field_value(
        self, field: Any, field_name: str  # noqa: ARG002
    ) -> tuple[Any, str, bool]:
        value = self._values.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        return dict(self._values)


class Settings(BaseSettings):
    """Root configuration object containing all nested configuration sections."""

    model_config = SettingsConfigDict(
        env_prefix="GIST_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="gist", description="Application name for logging/tracing")
    debug: bool = Field(default=False, description="Enable debug mode")

    api: APIConfig = Field(default_factory=APIConfig, description="API server configuration")
    agent: AgentConfig = Field(
        default_factory=AgentConfig,
        description="Agent event source configuration",
    )
    streaming: StreamingConfig = Field(
        default_factory=StreamingConfig,
        description="Event stream transport configuration",
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Observability configuration",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Put the TOML config underneath constructor arguments and GIST_* env vars."""
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls),
        )
