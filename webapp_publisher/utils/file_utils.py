# webapp_publisher/utils/file_utils.py
"""File and path utilities"""

import posixpath
from pathlib import Path, PurePosixPath
from typing import Union

from ..constants import DEFAULT_REMOTE_ROOT

PathLike = Union[str, Path]


def to_posix(path: PathLike) -> str:
    """Normalize a local path to forward-slash separators"""
    return str(path).replace("\\", "/")


def to_remote_path(local_path: PathLike,
                   local_root: PathLike,
                   remote_root: str = DEFAULT_REMOTE_ROOT) -> str:
    """
    Map a local path under local_root onto the remote filesystem

    Args:
        local_path: Local file or directory path
        local_root: Local site root the path lives under
        remote_root: Remote directory the site root maps to

    Returns:
        Absolute remote path with forward-slash separators

    Raises:
        ValueError: If local_path is not under local_root
    """
    local = PurePosixPath(posixpath.normpath(to_posix(local_path)))
    root = PurePosixPath(posixpath.normpath(to_posix(local_root)))
    relative = local.relative_to(root)

    remote = PurePosixPath("/") / to_posix(remote_root).strip("/")
    if str(relative) != ".":
        remote = remote / relative
    return str(remote)


def format_size(size: int) -> str:
    """
    Format file size in human-readable format

    Args:
        size: Size in bytes

    Returns:
        Formatted size string
    """
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0
    return f"{size:.2f} PB"
