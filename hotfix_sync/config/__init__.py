"""Configuration for hotfix-sync."""

from hotfix_sync.config.settings import DEFAULT_CONFIG_FILENAME, IntegratorSettings, LoggingConfig

__all__ = ["DEFAULT_CONFIG_FILENAME", "IntegratorSettings", "LoggingConfig"]
