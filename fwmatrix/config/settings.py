"""Settings for matrix resolution and command rendering."""

import logging
import os
from pathlib import Path
from typing import Annotated, Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from fwmatrix.core.errors import ConfigError


logger = logging.getLogger(__name__)

ENV_PREFIX = "FWMATRIX_"

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class MatrixSettings(BaseSettings):
    """Resolution settings with automatic environment variable support.

    Precedence order (highest to lowest):
    1. Environment variables (highest)
    2. Constructor arguments (file data)
    3. .env file
    4. Default values (lowest)
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: Any,
        env_settings: Any,
        dotenv_settings: Any,
        file_secret_settings: Any,
    ) -> tuple[Any, ...]:
        """Return sources in priority order: env > init > dotenv > file_secret."""
        return (
            env_settings,
            init_settings,
            dotenv_settings,
            file_secret_settings,
        )

    # Feature composition
    feature_separator: str = Field(
        default=",", description="Separator placed between feature flags"
    )
    target_attribute: str = Field(
        default="target", description="Attribute holding the toolchain triple"
    )
    vendor_alias_attribute: str = Field(
        default="espname", description="Attribute holding the vendor build-target alias"
    )
    bootloader_attribute: str = Field(
        default="boot", description="Attribute holding the bootloader variant"
    )
    routing_attributes: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["target", "espname"],
        description="Attributes used for toolchain routing, never rendered as features",
    )

    # Command rendering
    cargo_command: str = "cargo"
    default_toolchain: str = "stable"
    vendor_toolchains: dict[str, str] = Field(
        default_factory=lambda: {"xtensa": "esp"},
        description="Target triple prefix to vendor toolchain channel",
    )

    # Logging
    log_level: str = "WARNING"
    log_file: str | None = None
    json_logs: bool = False

    @field_validator("routing_attributes", mode="before")
    @classmethod
    def decode_routing_attributes(cls, v: Any) -> list[str]:
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        if isinstance(v, list | tuple):
            return [str(item).strip() for item in v if str(item).strip()]
        return []

    @field_validator("feature_separator")
    @classmethod
    def validate_separator(cls, v: str) -> str:
        if not v:
            raise ValueError("feature_separator must not be empty")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is recognized."""
        upper_v = v.strip().upper()
        if upper_v not in VALID_LOG_LEVELS:
            raise ValueError(f"Log level must be one of {VALID_LOG_LEVELS}")
        return upper_v

    @property
    def all_routing_attributes(self) -> frozenset[str]:
        """Routing attributes including the target and vendor alias keys."""
        return frozenset(
            [*self.routing_attributes, self.target_attribute, self.vendor_alias_attribute]
        )


def _config_search_paths(config_file: str | Path | None) -> list[Path]:
    if config_file:
        return [Path(config_file)]

    paths = [Path.cwd() / "fwmatrix.yaml", Path.cwd() / "fwmatrix.yml"]
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    config_root = (
        Path(xdg_config_home) if xdg_config_home else Path.home() / ".config"
    )
    paths.extend(
        [config_root / "fwmatrix" / "config.yaml", config_root / "fwmatrix" / "config.yml"]
    )
    return paths


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Error reading configuration file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Invalid configuration format in {path}: expected a mapping")
    return data


def create_settings(config_file: str | Path | None = None) -> MatrixSettings:
    """Create settings from the first configuration file found plus environment.

    Args:
        config_file: Explicit configuration file; when given it must exist

    Returns:
        Validated settings

    Raises:
        ConfigError: If the configuration file is missing, unreadable or invalid
    """
    if config_file and not Path(config_file).is_file():
        raise ConfigError(f"Configuration file not found: {config_file}")

    config_data: dict[str, Any] = {}
    for path in _config_search_paths(config_file):
        if path.is_file():
            logger.debug("Loading settings from %s", path)
            config_data = _read_config_file(path)
            break
    else:
        logger.debug("No settings file found, using defaults and environment")

    try:
        return MatrixSettings(**config_data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
