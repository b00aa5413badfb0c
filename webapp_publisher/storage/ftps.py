# webapp_publisher/storage/ftps.py
"""FTP over explicit TLS transfer session"""

import asyncio
import ftplib
import logging
from pathlib import Path
from typing import Any, Dict, List

from .base import TransferSession
from ..api.exceptions import FileSystemError, TransferError
from ..constants import DEFAULT_FTP_PORT, DEFAULT_FTP_TIMEOUT
from ..utils.async_utils import run_blocking

logger = logging.getLogger(__name__)


def _parent_chain(remote_path: str) -> List[str]:
    """'/a/b/c' -> ['/a', '/a/b', '/a/b/c']"""
    parts = [p for p in remote_path.split("/") if p]
    return ["/" + "/".join(parts[:i]) for i in range(1, len(parts) + 1)]


class FTPSSession(TransferSession):
    """FTPS session on a single control connection

    ftplib is synchronous, so every command runs in the default executor.
    Commands are serialised with a lock because one control connection
    handles one command at a time.
    """

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize FTPS session

        Args:
            config: Session configuration including:
                - host: FTPS host name
                - port: Control port (default 21)
                - username: Login user
                - password: Login password
                - timeout: Socket timeout in seconds
                - passive: Use passive mode (default True)
        """
        super().__init__(config)
        self.host = self.config.get('host')
        self.port = self.config.get('port') or DEFAULT_FTP_PORT
        self.username = self.config.get('username')
        self.password = self.config.get('password')
        self.timeout = self.config.get('timeout', DEFAULT_FTP_TIMEOUT)
        self.passive = self.config.get('passive', True)
        self._ftp = None
        self._lock = None

    async def _do_initialize(self) -> None:
        """Connect, upgrade to TLS, log in and protect the data channel"""
        if not self.host:
            raise TransferError("FTPS session requires a host")

        def _connect():
            ftp = ftplib.FTP_TLS(timeout=self.timeout)
            try:
                ftp.connect(self.host, self.port)
                # FTP_TLS.login sends AUTH TLS before USER/PASS
                ftp.login(self.username or "", self.password or "")
                ftp.prot_p()
                ftp.set_pasv(self.passive)
            except ftplib.all_errors:
                ftp.close()
                raise
            return ftp

        self._lock = asyncio.Lock()
        logger.info(f"Connecting to {self.host}:{self.port} over FTPS")
        try:
            self._ftp = await run_blocking(_connect)
        except ftplib.all_errors as e:
            raise TransferError(f"Failed to open FTPS session to {self.host}: {e}") from e

    async def _run(self, func, *args):
        async with self._lock:
            future = asyncio.ensure_future(run_blocking(func, *args))
            try:
                return await asyncio.shield(future)
            except asyncio.CancelledError:
                # The executor thread cannot be interrupted, so keep the
                # control connection locked until the command settles
                await asyncio.wait([future])
                if not future.cancelled():
                    future.exception()
                raise

    def _directory_exists(self, remote_path: str) -> bool:
        try:
            self._ftp.cwd(remote_path)
        except ftplib.error_perm:
            return False
        return True

    def _mkdir_sync(self, remote_path: str, recursive: bool) -> None:
        targets = _parent_chain(remote_path) if recursive else [remote_path]
        for target in targets:
            try:
                self._ftp.mkd(target)
            except ftplib.error_perm:
                # 550 is returned both for "exists" and "denied"
                if not self._directory_exists(target):
                    raise

    def _upload_sync(self, local_path: Path, remote_path: str) -> int:
        try:
            f = open(local_path, 'rb')
        except OSError as e:
            raise FileSystemError(f"Cannot read {local_path}: {e}", str(local_path)) from e

        with f:
            self._ftp.storbinary(f"STOR {remote_path}", f)
            return f.tell()

    async def mkdir(self, remote_path: str, recursive: bool = True) -> None:
        """Create a remote directory"""
        if not self._initialized:
            raise TransferError("FTPS session is not open", remote_path)
        try:
            await self._run(self._mkdir_sync, remote_path, recursive)
        except ftplib.all_errors as e:
            raise TransferError(f"Failed to create directory '{remote_path}': {e}", remote_path) from e

        logger.debug(f"FTP directory '{remote_path}' created")

    async def upload(self, local_path: Path, remote_path: str) -> int:
        """Upload file over the data channel"""
        if not self._initialized:
            raise TransferError("FTPS session is not open", remote_path)
        try:
            size = await self._run(self._upload_sync, Path(local_path), remote_path)
        except ftplib.all_errors as e:
            raise TransferError(f"Failed to upload '{local_path}' to '{remote_path}': {e}", remote_path) from e

        logger.debug(f"File '{local_path}' uploaded successfully to '{remote_path}'")
        return size

    async def _do_close(self) -> None:
        """Send QUIT, dropping the socket if the server does not answer"""
        ftp, self._ftp = self._ftp, None
        if ftp is None:
            return

        def _quit():
            try:
                ftp.quit()
            except ftplib.all_errors as e:
                logger.debug(f"QUIT failed ({e}), closing connection")
                ftp.close()

        async with self._lock:
            await run_blocking(_quit)
        logger.info("FTPS connection closed")
