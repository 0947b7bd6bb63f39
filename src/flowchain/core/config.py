"""
Configuration management for the flowchain runner.

Loads settings from environment variables and provides a centralized
configuration object for all components.

Configuration precedence (highest to lowest):
1. Explicit kwargs passed to FlowChainConfig
2. Environment variables (FLOWCHAIN_* prefix)
3. .env file
4. pyproject.toml [tool.flowchain] section
5. Hardcoded defaults
"""

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from ..models.enums import LogLevel, UnknownToolPolicy

logger = logging.getLogger(__name__)


def load_pyproject_defaults() -> dict[str, Any]:
    """
    Load defaults from [tool.flowchain] section in pyproject.toml.

    Returns:
        Dictionary of configuration overrides from pyproject.toml
    """
    pyproject_path = Path("pyproject.toml")

    if not pyproject_path.exists():
        return {}

    try:
        with pyproject_path.open("rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        logger.warning(f"Could not load pyproject.toml: {e}")
        return {}
    except tomllib.TOMLDecodeError as e:
        logger.warning(f"Could not parse pyproject.toml: {e}")
        return {}

    tool_config = data.get("tool", {}).get("flowchain", {})

    if tool_config:
        logger.debug(f"Loaded {len(tool_config)} settings from pyproject.toml")

    return tool_config


class PyProjectTomlSettingsSource(PydanticBaseSettingsSource):
    """
    A pydantic-settings source that loads configuration from pyproject.toml.
    """

    def get_field_value(self, field_name: str, field_info: Any) -> tuple[Any, str, bool]:
        """Not used in this implementation."""
        return None, "", False

    def __call__(self) -> dict[str, Any]:
        """Load and return configuration from pyproject.toml."""
        return load_pyproject_defaults()


class FlowChainConfig(BaseSettings):
    """
    Main configuration class for the flow agent runner.
    """

    model_config = SettingsConfigDict(
        env_prefix="FLOWCHAIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Reserved run parameters
    memory_id_key: str = Field(
        default="memory_id", description="Run parameter holding the memory identifier"
    )
    parent_interaction_id_key: str = Field(
        default="parent_interaction_id",
        description="Run parameter holding the interaction to update after the run",
    )
    additional_info_field: str = Field(
        default="additional_info",
        description="Field of the interaction update that carries step outputs",
    )

    # Failure reporting
    unknown_tool_policy: UnknownToolPolicy = Field(
        default=UnknownToolPolicy.RAISE,
        description="raise: unknown tool types escape execute(); callback: go to the listener",
    )

    # Monitoring and Logging
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    log_file: Path | None = Field(
        default=None,
        description="Path to main application log file (set to None to disable file logging)",
    )
    log_max_bytes: int = Field(
        default=10 * 1024 * 1024, description="Maximum log file size before rotation"  # 10MB
    )
    log_backup_count: int = Field(default=5, description="Number of backup log files to keep")
    enable_rich_console: bool = Field(
        default=True, description="Enable rich console output in the CLI"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """
        Customize the sources and their priority for loading configuration.

        Returns:
            Tuple of settings sources in priority order
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            PyProjectTomlSettingsSource(settings_cls),
            file_secret_settings,
        )

    @field_validator("memory_id_key", "parent_interaction_id_key", "additional_info_field")
    @classmethod
    def validate_reserved_key(cls, v: str) -> str:
        """Reserved keys must be non-empty and carry no surrounding whitespace"""
        if not v or v.strip() != v:
            raise ValueError(f"Reserved key must be a non-empty trimmed string, got {v!r}")
        return v

    @field_validator("log_max_bytes", "log_backup_count")
    @classmethod
    def validate_rotation(cls, v: int) -> int:
        """Rotation settings must be positive"""
        if v <= 0:
            raise ValueError(f"Log rotation settings must be positive, got {v}")
        return v

    @model_validator(mode="after")
    def validate_distinct_keys(self) -> "FlowChainConfig":
        """The memory id and the parent interaction id cannot share a key"""
        if self.memory_id_key == self.parent_interaction_id_key:
            raise ValueError(
                f"memory_id_key and parent_interaction_id_key must differ "
                f"(both are {self.memory_id_key!r})"
            )
        return self

    def ensure_log_directory(self) -> None:
        """Ensure the log directory exists."""
        if self.log_file and self.log_file.parent:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)


# Global configuration instance
_config: FlowChainConfig | None = None


def get_config() -> FlowChainConfig:
    """
    Get the global configuration instance.

    Returns:
        FlowChainConfig instance
    """
    global _config
    if _config is None:
        _config = FlowChainConfig()
        _config.ensure_log_directory()
    return _config


def reset_config() -> None:
    """Reset the global configuration (mainly for testing)."""
    global _config
    _config = None
