"""Configuration management for DB Browser."""

from dbbrowser.config.models import (
    EngineKind,
    ConnectionDescriptor,
    BrowserConfig,
    EnvironmentSettings,
)
from dbbrowser.config.parser import (
    ConfigParser,
    get_config,
    validate_config_file,
    create_sample_config,
)

__all__ = [
    # Models
    "EngineKind",
    "ConnectionDescriptor",
    "BrowserConfig",
    "EnvironmentSettings",
    # Parser
    "ConfigParser",
    "get_config",
    "validate_config_file",
    "create_sample_config",
]
