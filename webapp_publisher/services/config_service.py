# webapp_publisher/services/config_service.py
"""Configuration management service"""

import logging
import os
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from ..api.exceptions import ConfigurationError
from ..constants import (
    ENV_CONFIG_PATH,
    ENV_DEPLOYMENT_PASSWORD,
    ENV_DEPLOYMENT_USER,
    ENV_PREFIX,
    PROJECT_CONFIG_FILE,
)
from ..models.config import PublishConfig

logger = logging.getLogger(__name__)


class ConfigService:
    """Builds the merged configuration for a publish run

    Precedence, highest first: caller-supplied values, environment
    variables (``WEBAPP_PUBLISHER_<FIELD>``), the YAML configuration file.
    """

    def __init__(self,
                 config_path: Optional[Union[str, Path]] = None,
                 environ: Optional[Mapping[str, str]] = None):
        """Initialize config service

        Args:
            config_path: YAML configuration file (optional)
            environ: Environment mapping (defaults to os.environ)
        """
        self.environ = os.environ if environ is None else environ
        if config_path is None:
            config_path = self.environ.get(ENV_CONFIG_PATH)
        if config_path is None and Path(PROJECT_CONFIG_FILE).exists():
            config_path = PROJECT_CONFIG_FILE
        self.config_path = Path(config_path) if config_path else None

    def load_file(self) -> Dict[str, Any]:
        """Load configuration values from the YAML file

        Returns:
            Mapping of configuration values (empty without a file)
        """
        if self.config_path is None:
            return {}

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file {self.config_path}: {e}") from e

        # Simple environment variable expansion
        content = os.path.expandvars(content)

        try:
            data = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {self.config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {self.config_path} must contain a mapping")

        logger.debug(f"Loaded configuration from {self.config_path}")
        return data

    def environment_defaults(self) -> Dict[str, Any]:
        """Collect ``WEBAPP_PUBLISHER_<FIELD>`` environment variables"""
        values = {}
        for f in fields(PublishConfig):
            value = self.environ.get(f"{ENV_PREFIX}{f.name.upper()}")
            if value:
                values[f.name] = value

        # Fallback transfer credentials
        if ENV_DEPLOYMENT_USER in self.environ:
            values.setdefault("deployment_user", self.environ[ENV_DEPLOYMENT_USER])
        if ENV_DEPLOYMENT_PASSWORD in self.environ:
            values.setdefault("deployment_password", self.environ[ENV_DEPLOYMENT_PASSWORD])
        return values

    def defaults(self) -> PublishConfig:
        """Process defaults: file values overridden by environment values"""
        return PublishConfig.from_dict(self.load_file()).merged(self.environment_defaults())

    def build(self, overrides: Optional[Mapping[str, Any]] = None) -> PublishConfig:
        """Merge caller-supplied values over the process defaults

        Args:
            overrides: Caller-supplied configuration (snake_case or camelCase)

        Returns:
            Fresh PublishConfig for one run
        """
        if isinstance(overrides, PublishConfig):
            overrides = overrides.explicit_values()
        return self.defaults().merged(overrides or {})
