# webapp_publisher/cli/decorators/__init__.py
"""CLI decorators"""

from .options import config_file_option, identity_options, target_options

__all__ = [
    'config_file_option',
    'identity_options',
    'target_options',
]
