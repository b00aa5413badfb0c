# webapp_publisher/services/transfer_service.py
"""Site content transfer service"""

import logging
from pathlib import Path
from typing import Awaitable, Callable, Optional, Type

from ..core.directory_walker import walk_directory
from ..models.config import PublishConfig
from ..models.remote import PublishProfile
from ..models.result import OperationStatus, TransferResult
from ..models.walk import WalkResult
from ..storage.base import TransferSession
from ..storage.factory import SessionFactory
from ..utils.async_utils import run_phase
from ..utils.file_utils import format_size, to_remote_path

logger = logging.getLogger(__name__)


class TransferService:
    """Mirrors the local site directory onto the Web App filesystem"""

    def __init__(self,
                 config: PublishConfig,
                 session_factory: Type[SessionFactory] = SessionFactory,
                 walker: Callable[[str], Awaitable[WalkResult]] = walk_directory):
        """
        Initialize transfer service

        Args:
            config: Publish configuration
            session_factory: Creates the transfer session for a profile
            walker: Coroutine function collecting local directories and files
        """
        self.config = config
        self.session_factory = session_factory
        self.walker = walker

    def remote_path(self, local_path: Path) -> str:
        """Map a local path under the site root to its remote path"""
        return to_remote_path(local_path, self.config.directory, self.config.remote_root)

    async def transfer(self,
                       profile: PublishProfile,
                       session: Optional[TransferSession] = None) -> TransferResult:
        """
        Upload site content

        Opens the session, walks the site directory, creates every remote
        directory and only then uploads every file. The session is closed
        whether or not the transfer succeeds.

        Args:
            profile: Publish profile with endpoint and credentials
            session: Pre-built session (created from the profile if omitted)

        Returns:
            TransferResult with created directories and uploaded files

        Raises:
            TransferError: On connection, mkdir or upload failure
            FileSystemError: On local read or stat failure
        """
        result = TransferResult(
            status=OperationStatus.IN_PROGRESS,
            host=profile.host,
            remote_root=self.config.remote_root,
        )
        if session is None:
            session = self.session_factory.create_for_profile(profile)

        logger.info(f"Uploading site content to {profile.host}")
        async with session:
            walk = await self.walker(self.config.directory)

            await self._create_directories(session, walk, result)
            await self._upload_files(session, walk, result)

        total = result.metadata.get("bytes_uploaded", 0)
        result.message = (
            f"{len(result.files_uploaded)} file(s) uploaded "
            f"({format_size(total)})"
        )
        result.complete(OperationStatus.SUCCESS)
        logger.info("Files uploaded successfully")
        return result

    async def _create_directories(self,
                                  session: TransferSession,
                                  walk: WalkResult,
                                  result: TransferResult) -> None:
        async def create(directory: Path) -> None:
            remote = self.remote_path(directory)
            await session.mkdir(remote, recursive=True)
            result.directories_created.append(remote)

        await run_phase(walk.directories, create, self.config.transfer_concurrency)

    async def _upload_files(self,
                            session: TransferSession,
                            walk: WalkResult,
                            result: TransferResult) -> None:
        result.metadata.setdefault("bytes_uploaded", 0)

        async def upload(local_file: Path) -> None:
            remote = self.remote_path(local_file)
            size = await session.upload(local_file, remote)
            result.files_uploaded.append(remote)
            result.metadata["bytes_uploaded"] += size or 0

        await run_phase(walk.files, upload, self.config.transfer_concurrency)
