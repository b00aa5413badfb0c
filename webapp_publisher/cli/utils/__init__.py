"""CLI utility functions"""

from .output import (
    format_publish_result,
    format_cleanup_result,
    format_error,
)

__all__ = [

    # Output utilities
    'format_publish_result',
    'format_cleanup_result',
    'format_error',
]
