"""Configuration loading service"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from ..api.exceptions import ConfigError
from ..constants import ENV_CONFIG_PATH, PROJECT_CONFIG_FILE
from ..models.config import PluginConfig


class ConfigService:
    """Service for loading plugin configuration"""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize config service

        Args:
            config_path: Configuration file (defaults to $DEPLOY_SENTRY_CONFIG
                or .deploy-sentry.yaml in the working directory)
        """
        if config_path is None:
            config_path = os.environ.get(ENV_CONFIG_PATH, PROJECT_CONFIG_FILE)
        self.config_path = Path(config_path)

    def load_raw(self) -> Dict[str, Any]:
        """Load the configuration mapping from file

        A missing file yields an empty mapping so everything can come from
        the environment and command line.

        Returns:
            Raw configuration mapping
        """
        if not self.config_path.exists():
            return {}

        with open(self.config_path, 'r') as f:
            content = f.read()

        # Simple environment variable expansion
        content = os.path.expandvars(content)

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {self.config_path}: {e}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration in {self.config_path} must be a mapping")

        # Allow the plugin section to be nested under its name
        if isinstance(data.get("sentry"), dict):
            data = data["sentry"]

        return data

    def load_config(self, overrides: Optional[Dict[str, Any]] = None) -> PluginConfig:
        """Load configuration and apply overrides

        Args:
            overrides: Values taking precedence over the file (None values
                are ignored)

        Returns:
            Validated plugin configuration
        """
        data = self.load_raw()
        for key, value in (overrides or {}).items():
            if value is not None:
                data[key] = value
        return PluginConfig.from_dict(data)
