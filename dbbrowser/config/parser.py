"""Configuration parser for DB Browser."""

import logging
import os
import re
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from dbbrowser.config.models import BrowserConfig, EnvironmentSettings
from dbbrowser.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Searched in order, relative to the working directory
DEFAULT_CONFIG_FILES = ("dbbrowser.yaml", "dbbrowser.yml", "config/dbbrowser.yaml")

# ${NAME} or ${NAME:-fallback}
_ENV_REFERENCE = re.compile(r'\$\{\s*([^}:\s]+)\s*(?::-([^}]*))?\}')


def _resolve_env_reference(match: "re.Match[str]") -> str:
    name, fallback = match.group(1), match.group(2)
    value = os.environ.get(name)
    if value is not None:
        return value
    if fallback is not None:
        return fallback.strip()
    raise ConfigurationError(f"Required environment variable '{name}' is not set")


def interpolate_env(value: Any) -> Any:
    """Expand environment references in every string of a parsed YAML tree."""
    if isinstance(value, str):
        return _ENV_REFERENCE.sub(_resolve_env_reference, value)
    if isinstance(value, list):
        return [interpolate_env(item) for item in value]
    if isinstance(value, dict):
        return {key: interpolate_env(item) for key, item in value.items()}
    return value


class ConfigParser:
    """Loads connection configuration from YAML."""

    def __init__(self) -> None:
        self.env_settings = EnvironmentSettings()

    def load_config(self, config_path: Optional[Union[str, Path]] = None) -> BrowserConfig:
        """Load and validate configuration from YAML file.

        Args:
            config_path: Path to configuration file. If None, looks for default locations.

        Returns:
            Validated BrowserConfig instance.

        Raises:
            ConfigurationError: If configuration is invalid or file not found.
        """
        config_file = self.locate(config_path)
        logger.debug("Loading configuration from %s", config_file)

        try:
            raw_config = yaml.safe_load(config_file.read_text(encoding='utf-8'))
        except FileNotFoundError:
            raise ConfigurationError(f"Configuration file '{config_file}' not found")
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file '{config_file}': {e}")
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in '{config_file}': {e}")

        if not raw_config:
            raise ConfigurationError(f"Configuration file '{config_file}' is empty")
        if not isinstance(raw_config, dict):
            raise ConfigurationError(f"Configuration file '{config_file}' must contain a mapping")

        try:
            return BrowserConfig(**interpolate_env(raw_config))
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed: {e}")

    def locate(self, config_path: Optional[Union[str, Path]] = None) -> Path:
        """Resolve the configuration file to load.

        An explicit path wins, then ``DBBROWSER_CONFIG_FILE``, then the
        default file names in the working directory.

        Raises:
            ConfigurationError: If no configuration file is found.
        """
        if config_path:
            path = Path(config_path)
            if not path.exists():
                raise ConfigurationError(f"Configuration file '{config_path}' not found")
            return path

        candidates = [Path.cwd() / name for name in DEFAULT_CONFIG_FILES]
        if self.env_settings.config_file:
            candidates.insert(0, Path(self.env_settings.config_file))

        for candidate in candidates:
            if candidate.exists():
                return candidate
        raise ConfigurationError(
            f"No configuration file found; looked for {', '.join(str(c) for c in candidates)}"
        )

    def validate_config_file(self, config_path: Union[str, Path]) -> bool:
        """Validate a configuration file.

        Raises:
            ConfigurationError: If configuration is invalid.
        """
        self.load_config(config_path)
        return True

    def create_sample_config(self, output_path: Union[str, Path]) -> None:
        """Create a sample configuration file."""
        sample_config = {
            'connections': [
                {
                    'name': 'local',
                    'engine': 'sqlite',
                    'file_path': './local.db',
                },
                {
                    'name': 'app',
                    'engine': 'postgresql',
                    'server': 'localhost',
                    'port': 5432,
                    'database': 'app',
                    'username': 'app_user',
                    'password': '${APP_DB_PASSWORD:-app_password}',
                },
                {
                    'name': 'shop',
                    'engine': 'mysql',
                    'server': 'localhost',
                    'database': 'shop',
                    'username': 'shop_user',
                    'password': '${SHOP_DB_PASSWORD:-shop_password}',
                },
                {
                    'name': 'reporting',
                    'engine': 'sqlserver',
                    'server': 'localhost',
                    'database': 'Reporting',
                    'integrated_security': True,
                    'trust_server_certificate': False,
                    'options': {'driver': 'ODBC Driver 18 for SQL Server'},
                },
            ],
            'default_connection': 'local',
        }

        with open(output_path, 'w', encoding='utf-8') as file:
            yaml.safe_dump(sample_config, file, default_flow_style=False, sort_keys=False)


# Global configuration instance
_config_parser = ConfigParser()
_loaded_config: Optional[BrowserConfig] = None


def get_config(config_path: Optional[Union[str, Path]] = None, reload: bool = False) -> BrowserConfig:
    """Get the global configuration instance.

    Args:
        config_path: Path to configuration file.
        reload: Force reload of configuration.
    """
    global _loaded_config

    if _loaded_config is None or reload or config_path:
        _loaded_config = _config_parser.load_config(config_path)

    return _loaded_config


def validate_config_file(config_path: Union[str, Path]) -> bool:
    """Validate a configuration file."""
    return _config_parser.validate_config_file(config_path)


def create_sample_config(output_path: Union[str, Path]) -> None:
    """Create a sample configuration file."""
    _config_parser.create_sample_config(output_path)
