# webapp_publisher/storage/factory.py
"""Transfer session factory"""

from typing import Any, Dict, List, Type

from .base import TransferSession
from .ftps import FTPSSession
from ..api.exceptions import ConfigurationError
from ..models.remote import PublishProfile


class SessionFactory:
    """Factory for creating transfer sessions keyed by publish method"""

    # Registry of transfer sessions
    _sessions: Dict[str, Type[TransferSession]] = {
        "FTP": FTPSSession,
    }

    @classmethod
    def create_for_profile(cls, profile: PublishProfile, **options) -> TransferSession:
        """Create a transfer session from a publish profile

        Args:
            profile: Publish profile with endpoint and credentials
            **options: Additional session options (timeout, passive, ...)

        Returns:
            Unopened transfer session

        Raises:
            ConfigurationError: If the publish method is not supported
        """
        if not cls.is_supported(profile.publish_method):
            raise ConfigurationError(
                f"Unsupported publish method: {profile.publish_method} "
                f"(supported: {', '.join(cls.get_supported_methods())})"
            )

        config: Dict[str, Any] = {
            "host": profile.host,
            "port": profile.port,
            "username": profile.username,
            "password": profile.password,
        }
        config.update(options)

        return cls._sessions[profile.publish_method.upper()](config)

    @classmethod
    def get_supported_methods(cls) -> List[str]:
        """Get list of supported publish methods"""
        return list(cls._sessions.keys())

    @classmethod
    def is_supported(cls, publish_method: str) -> bool:
        """Check if a publish method is supported"""
        return publish_method.upper() in cls._sessions
