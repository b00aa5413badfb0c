# webapp_publisher/storage/__init__.py
"""Transfer sessions for webapp-publisher"""

from .base import TransferSession
from .ftps import FTPSSession
from .factory import SessionFactory

__all__ = [
    'TransferSession',
    'FTPSSession',
    'SessionFactory',
]
