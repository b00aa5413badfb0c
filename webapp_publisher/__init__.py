"""Web App Publisher - publish a static site directory to an Azure Web App.

Acquires management credentials, provisions the resource group, App Service
plan and Web App from a deployment template when they are missing, fetches
the FTP publish profile and mirrors the local site directory over FTPS.
"""

from .__version__ import __version__, __version_info__, __author__, __email__, __license__

# Exceptions
from .api.exceptions import (
    WebAppPublisherError,
    ConfigurationError,
    AuthenticationError,
    RemoteOperationError,
    DeploymentFailedError,
    DeploymentTimeoutError,
    PublishProfileNotFoundError,
    FileSystemError,
    TransferError,
    PublishCancelledError,
)

# Core API
from .api.publisher import Publisher, publish, cleanup

# Data models
from .models.config import PublishConfig
from .models.result import PublishResult, TransferResult, Result

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__author__",
    "__email__",
    "__license__",

    # Main classes
    "Publisher",

    # Core API functions
    "publish",
    "cleanup",

    # Data models
    "PublishConfig",
    "PublishResult",
    "TransferResult",
    "Result",

    # Exceptions
    "WebAppPublisherError",
    "ConfigurationError",
    "AuthenticationError",
    "RemoteOperationError",
    "DeploymentFailedError",
    "DeploymentTimeoutError",
    "PublishProfileNotFoundError",
    "FileSystemError",
    "TransferError",
    "PublishCancelledError",
]
