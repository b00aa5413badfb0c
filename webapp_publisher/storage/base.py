# webapp_publisher/storage/base.py
"""Transfer session abstract base class"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict


class TransferSession(ABC):
    """Abstract base class for remote transfer sessions"""

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize transfer session

        Args:
            config: Session-specific configuration
        """
        self.config = config or {}
        self._initialized = False

    @property
    def is_open(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """Open the session (e.g., connect and authenticate)"""
        if not self._initialized:
            await self._do_initialize()
            self._initialized = True

    @abstractmethod
    async def _do_initialize(self) -> None:
        """Actual connection logic to be implemented by subclasses"""
        pass

    @abstractmethod
    async def mkdir(self, remote_path: str, recursive: bool = True) -> None:
        """
        Create a remote directory

        Args:
            remote_path: Absolute remote directory path
            recursive: Create missing parent directories too
        """
        pass

    @abstractmethod
    async def upload(self, local_path: Path, remote_path: str) -> int:
        """
        Upload a local file

        Args:
            local_path: Local file path
            remote_path: Absolute remote file path

        Returns:
            Number of bytes transferred
        """
        pass

    async def close(self) -> None:
        """Close the session"""
        if self._initialized:
            await self._do_close()
            self._initialized = False

    async def _do_close(self) -> None:
        """Actual cleanup logic to be implemented by subclasses"""
        pass

    async def __aenter__(self):
        """Async context manager entry"""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()
