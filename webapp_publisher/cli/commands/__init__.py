# webapp_publisher/cli/commands/__init__.py
"""CLI commands"""

from . import publish
from . import cleanup

__all__ = [
    "publish",
    "cleanup",
]
