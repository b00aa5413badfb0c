# webapp_publisher/core/directory_walker.py
"""Concurrent recursive walk of the local site directory"""

import logging
import os
import stat
from pathlib import Path
from typing import Union

import aiofiles.os

from ..api.exceptions import FileSystemError
from ..models.walk import WalkResult
from ..utils.async_utils import run_phase

logger = logging.getLogger(__name__)


async def _stat(path: Path) -> os.stat_result:
    try:
        return await aiofiles.os.stat(path)
    except OSError as e:
        raise FileSystemError(f"Cannot stat {path}: {e}", str(path)) from e


async def _walk_directory(directory: Path) -> WalkResult:
    result = WalkResult(root=directory)

    try:
        names = sorted(await aiofiles.os.listdir(directory))
    except OSError as e:
        raise FileSystemError(f"Cannot read directory {directory}: {e}", str(directory)) from e

    paths = [directory / name for name in names]
    stats = await run_phase(paths, _stat, concurrency=max(1, len(paths)))

    subdirectories = []
    for path, st in zip(paths, stats):
        if stat.S_ISDIR(st.st_mode):
            result.directories.append(path)
            subdirectories.append(path)
        else:
            result.files.append(path)

    # Parents are recorded before any of their descendants
    sub_results = await run_phase(
        subdirectories, _walk_directory, concurrency=max(1, len(subdirectories))
    )
    for sub_result in sub_results:
        result.extend(sub_result)

    return result


async def walk_directory(root: Union[str, Path]) -> WalkResult:
    """
    Collect every directory and file below root

    Entries of one directory are statted concurrently and sub-directories
    are walked concurrently. Any read or stat error aborts the whole walk.

    Args:
        root: Site root directory

    Returns:
        WalkResult with directories (ancestors first) and files

    Raises:
        FileSystemError: If root is missing, not a directory, or unreadable
    """
    root = Path(root)
    st = await _stat(root)
    if not stat.S_ISDIR(st.st_mode):
        raise FileSystemError(f"Site directory {root} is not a directory", str(root))

    result = await _walk_directory(root)
    result.root = root

    logger.debug(
        f"Collected {len(result.directories)} directories and "
        f"{len(result.files)} files under {root}"
    )
    return result
