# webapp_publisher/core/__init__.py
"""Core pipeline components"""

from .credentials import AzureSession, StaticTokenCredential, acquire_token, create_session
from .provisioner import Provisioner
from .resource_checker import ResourceChecker
from .profile_fetcher import fetch_publish_profile, parse_publish_profiles
from .directory_walker import walk_directory

__all__ = [
    "AzureSession",
    "StaticTokenCredential",
    "acquire_token",
    "create_session",
    "Provisioner",
    "ResourceChecker",
    "fetch_publish_profile",
    "parse_publish_profiles",
    "walk_directory",
]
