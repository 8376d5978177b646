"""
Configuration management for idx.

Values come from three places, highest priority first:

1. ``IDX_<SECTION>_<KEY>`` environment variables (e.g. ``IDX_STORAGE_FORMAT``)
2. the ``[section]`` tables of an idx.toml file
3. the defaults below
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Literal, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "idx.toml"


class _Section(BaseSettings):
    """A config table whose env variables outrank values read from TOML."""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # TOML values arrive as init kwargs
        return env_settings, init_settings, dotenv_settings, file_secret_settings


class StorageConfig(_Section):
    """SQL storage configuration."""

    model_config = SettingsConfigDict(env_prefix="IDX_STORAGE_")

    format: Literal["binary", "text"] = Field(
        default="binary",
        description="Column representation: 16-byte bytea or 26-char text",
    )


class CliConfig(_Section):
    """Command line configuration."""

    model_config = SettingsConfigDict(env_prefix="IDX_CLI_")

    json_indent: int = Field(default=2, ge=0, description="Indent for --json output")
    default_count: int = Field(
        default=1, ge=1, description="IDs printed by 'idx generate' without --count"
    )


class LoggingConfig(_Section):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="IDX_LOGGING_")

    level: str = Field(default="WARNING", description="Root log level")
    format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="logging.Formatter format string",
    )


_SECTIONS: dict[str, type[_Section]] = {
    "storage": StorageConfig,
    "cli": CliConfig,
    "logging": LoggingConfig,
}


class Config(BaseSettings):
    """Main configuration for idx."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    cli: CliConfig = Field(default_factory=CliConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("storage", "cli", "logging", mode="before")
    @classmethod
    def _build_section(cls, value: Any, info: ValidationInfo) -> Any:
        # Plain tables go through the section's own sources so env still applies
        if isinstance(value, dict):
            return _SECTIONS[info.field_name](**value)
        return value

    @classmethod
    def from_toml(cls, path: Path | str) -> Config:
        """
        Load configuration from a TOML file, with IDX_* env variables on top.

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If the file is not valid TOML or has unknown tables
        """
        config_path = Path(path)
        try:
            text = config_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise FileNotFoundError(f"Config file not found: {config_path}") from None

        try:
            tables = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {config_path}: {e}") from e

        unknown = sorted(set(tables) - set(_SECTIONS))
        if unknown:
            raise ValueError(
                f"Unknown tables in {config_path}: {', '.join(unknown)}. "
                f"Available: {', '.join(_SECTIONS)}"
            )

        logger.debug(f"Read {config_path} (tables: {', '.join(tables) or 'none'})")
        return cls(**tables)

    @staticmethod
    def locate(start_dir: Optional[Path] = None) -> Path | None:
        """Return the nearest idx.toml at or above start_dir (default: cwd)."""
        here = Path(start_dir if start_dir is not None else Path.cwd()).resolve()
        for directory in (here, *here.parents):
            candidate = directory / CONFIG_FILENAME
            if candidate.is_file():
                return candidate
        return None

    @classmethod
    def find_and_load(cls, start_dir: Optional[Path] = None) -> Config:
        """
        Load the nearest idx.toml (see locate()).

        Raises:
            FileNotFoundError: If no config file found
        """
        found = cls.locate(start_dir)
        if found is None:
            raise FileNotFoundError(
                f"No {CONFIG_FILENAME} found in {start_dir or Path.cwd()} "
                f"or parent directories."
            )
        return cls.from_toml(found)

    def to_toml(self, path: Path | str) -> None:
        """
        Write configuration to TOML file.

        Args:
            path: Path to write idx.toml
        """
        config_path = Path(path)

        toml_content = f"""# idx configuration

[storage]
format = "{self.storage.format}"

[cli]
json_indent = {self.cli.json_indent}
default_count = {self.cli.default_count}

[logging]
level = "{self.logging.level}"
format = "{self.logging.format}"
"""

        config_path.write_text(toml_content)


# Default configuration instance
DEFAULT_CONFIG = Config()
