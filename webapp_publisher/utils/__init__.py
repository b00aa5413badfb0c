# webapp_publisher/utils/__init__.py
"""Utility functions for webapp-publisher"""

from .async_utils import (
    run_async,
    run_blocking,
    run_phase,
    poll_until,
)

from .file_utils import (
    to_posix,
    to_remote_path,
    format_size,
)

__all__ = [
    # Async utilities
    "run_async",
    "run_blocking",
    "run_phase",
    "poll_until",

    # File utilities
    "to_posix",
    "to_remote_path",
    "format_size",
]
