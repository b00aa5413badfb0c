# webapp_publisher/services/__init__.py
"""Business logic services for webapp-publisher"""

from .config_service import ConfigService
from .transfer_service import TransferService
from .publish_service import PublishContext, PublishService

__all__ = [
    "ConfigService",
    "TransferService",
    "PublishContext",
    "PublishService",
]
