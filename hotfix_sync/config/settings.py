"""
Configuration system using Pydantic for type-safe settings management.

Settings come from, in increasing order of precedence: defaults,
``HOTFIX_SYNC_*`` environment variables, and an optional YAML file. Command-line
options override all of them.

Example configuration file::

    skip_tag: "@branch-specific"
    wait_for_resolution: false
    logging:
      level: INFO
      format: console
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hotfix_sync.engine.skip import BRANCH_SPECIFIC_TAG
from hotfix_sync.exceptions import ConfigurationError

DEFAULT_CONFIG_FILENAME = ".hotfix-sync.yaml"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING", description="Minimum log level"
    )
    format: Literal["console", "json"] = Field(default="console", description="Log renderer")

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        """Accept log levels in any case."""
        return v.upper() if isinstance(v, str) else v


class IntegratorSettings(BaseSettings):
    """Main hotfix-sync settings.

    Nested values can be set from the environment with a double underscore,
    e.g. ``HOTFIX_SYNC_LOGGING__LEVEL=DEBUG``.
    """

    model_config = SettingsConfigDict(
        env_prefix="HOTFIX_SYNC_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    skip_tag: str = Field(default=BRANCH_SPECIFIC_TAG, description="Message line marking branch-specific changes")
    state_directory: str | None = Field(
        default=None, description="Directory for suspended-integration state (default: <git-dir>/hotfix-sync)"
    )
    wait_for_resolution: bool = Field(
        default=False, description="Prompt and wait for conflict resolution instead of exiting"
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("skip_tag")
    @classmethod
    def validate_skip_tag(cls, v: str) -> str:
        """Ensure the tag is a single, non-empty line."""
        if not v.strip():
            raise ValueError("skip_tag must not be empty")
        if "\n" in v or "\r" in v:
            raise ValueError("skip_tag must be a single line")
        return v

    @property
    def state_dir(self) -> Path | None:
        """Get the configured state directory as a Path, if any."""
        return Path(self.state_directory) if self.state_directory else None

    @classmethod
    def load(cls, config_path: str | Path | None = None, repo_root: Path | None = None) -> IntegratorSettings:
        """Load settings from an explicit file, the repository default file, or nothing.

        Args:
            config_path: Explicit configuration file; must exist.
            repo_root: Working-copy root searched for ``.hotfix-sync.yaml``.

        Raises:
            ConfigurationError: If the configuration is invalid.
        """
        if config_path is not None:
            return cls.from_yaml(config_path)

        if repo_root is not None:
            default_file = repo_root / DEFAULT_CONFIG_FILENAME
            if default_file.exists():
                return cls.from_yaml(default_file)

        try:
            return cls()
        except ValueError as e:
            raise ConfigurationError(f"Invalid configuration from environment: {e}") from e

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> IntegratorSettings:
        """Load settings from YAML file with environment variable interpolation.

        Supports ${VAR_NAME} syntax for environment variable substitution.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            IntegratorSettings instance

        Raises:
            ConfigurationError: If config file is invalid or missing
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            yaml_content = config_file.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file: {config_path}") from e

        try:
            yaml_content = cls._interpolate_env_vars(yaml_content)
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment variable reference in config: {e}") from e

        try:
            config_dict = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {config_path}: {e}") from e

        if config_dict is None:
            config_dict = {}
        if not isinstance(config_dict, dict):
            raise ConfigurationError("Configuration must be a YAML object, not a list or scalar")

        try:
            return cls(**config_dict)
        except ValueError as e:
            raise ConfigurationError(f"Failed to validate configuration: {e}") from e

    @staticmethod
    def _interpolate_env_vars(content: str) -> str:
        """Interpolate ${VAR_NAME} placeholders with environment variables.

        Supports two syntaxes:
        - ${VAR_NAME} - Required environment variable (raises if not set)
        - ${VAR_NAME:-default} - Optional with default value

        YAML comment lines are left unchanged.

        Raises:
            ValueError: If a required environment variable is not set
        """
        pattern = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            default_value = match.group(2)
            value = os.getenv(var_name)

            if value is not None:
                return value
            elif default_value is not None:
                return default_value
            else:
                raise ValueError(f"Environment variable {var_name} is not set")

        def process_line(line: str) -> str:
            if line.lstrip().startswith("#"):
                return line
            return pattern.sub(replace_var, line)

        return "\n".join(process_line(line) for line in content.split("\n"))
