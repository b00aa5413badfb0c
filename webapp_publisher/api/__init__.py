# webapp_publisher/api/__init__.py
"""API layer for webapp-publisher"""

from .exceptions import (
    WebAppPublisherError,
    ConfigurationError,
    AuthenticationError,
    NotFoundError,
    RemoteOperationError,
    DeploymentFailedError,
    DeploymentTimeoutError,
    PublishProfileNotFoundError,
    FileSystemError,
    TransferError,
    PublishCancelledError,
)
from .publisher import Publisher, publish, cleanup

__all__ = [
    # Main classes
    "Publisher",

    # Convenience functions
    "publish",
    "cleanup",

    # Exceptions
    "WebAppPublisherError",
    "ConfigurationError",
    "AuthenticationError",
    "NotFoundError",
    "RemoteOperationError",
    "DeploymentFailedError",
    "DeploymentTimeoutError",
    "PublishProfileNotFoundError",
    "FileSystemError",
    "TransferError",
    "PublishCancelledError",
]
