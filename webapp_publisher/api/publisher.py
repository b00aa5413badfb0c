"""Publisher API for publishing operations"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from ..models.config import PublishConfig
from ..models.result import PublishResult, Result
from ..services.config_service import ConfigService
from ..services.publish_service import PublishService
from ..utils.async_utils import run_async

logger = logging.getLogger(__name__)

ConfigInput = Union[PublishConfig, Mapping[str, Any], None]


class Publisher:
    """Publisher class for publish and cleanup operations"""

    def __init__(self,
                 config_path: Optional[Union[str, Path]] = None,
                 environ: Optional[Mapping[str, str]] = None):
        """
        Initialize publisher

        Args:
            config_path: YAML file holding process defaults (optional)
            environ: Environment mapping (defaults to os.environ)
        """
        self.config_service = ConfigService(config_path, environ)

    def resolve_config(self, config: ConfigInput = None, **options) -> PublishConfig:
        """Merge caller-supplied values over the process defaults"""
        overrides: Dict[str, Any] = {}
        if isinstance(config, PublishConfig):
            overrides.update(config.explicit_values())
        elif config:
            overrides.update(config)
        overrides.update(options)
        return self.config_service.build(overrides)

    async def publish_async(self,
                            config: ConfigInput = None,
                            cancel_event: Optional[asyncio.Event] = None,
                            **options) -> PublishResult:
        """
        Publish the site directory to the Web App

        Args:
            config: Caller-supplied configuration (PublishConfig or mapping)
            cancel_event: Set to abort the deployment poll
            **options: Individual configuration values

        Returns:
            PublishResult: Publishing result

        Raises:
            WebAppPublisherError: Tagged with the failing stage
        """
        publish_config = self.resolve_config(config, **options)
        logger.debug(f"Publishing with {publish_config!r}")
        return await PublishService(cancel_event=cancel_event).publish(publish_config)

    async def cleanup_async(self,
                            rg_name: str,
                            config: ConfigInput = None,
                            **options) -> Result:
        """
        Delete a resource group

        Args:
            rg_name: Resource group to delete
            config: Caller-supplied configuration holding the identity fields
            **options: Individual configuration values

        Returns:
            Result: Cleanup result
        """
        publish_config = self.resolve_config(config, **options)
        return await PublishService().cleanup(rg_name, publish_config)

    def publish(self, config: ConfigInput = None, **options) -> PublishResult:
        """Synchronous wrapper for publish_async"""
        return run_async(self.publish_async(config, **options))

    def cleanup(self, rg_name: str, config: ConfigInput = None, **options) -> Result:
        """Synchronous wrapper for cleanup_async"""
        return run_async(self.cleanup_async(rg_name, config, **options))


# Convenience functions
def publish(config: ConfigInput = None, **options) -> PublishResult:
    """
    Publish a site directory (convenience function)

    Args:
        config: Configuration mapping (snake_case or camelCase keys)
        **options: Options
            - config_path: YAML file holding process defaults
            - any PublishConfig field

    Returns:
        PublishResult: Publishing result
    """
    config_path = options.pop('config_path', None)
    publisher = Publisher(config_path)
    return publisher.publish(config, **options)


def cleanup(rg_name: str, config: ConfigInput = None, **options) -> Result:
    """
    Delete a resource group (convenience function)

    Args:
        rg_name: Resource group to delete
        config: Configuration mapping holding the identity fields
        **options: Options
            - config_path: YAML file holding process defaults
            - any PublishConfig field

    Returns:
        Result: Cleanup result
    """
    config_path = options.pop('config_path', None)
    publisher = Publisher(config_path)
    return publisher.cleanup(rg_name, config, **options)
