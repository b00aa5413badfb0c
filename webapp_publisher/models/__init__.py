# webapp_publisher/models/__init__.py
"""Data models for webapp-publisher"""

from .config import PublishConfig, REQUIRED_FIELDS, AUTH_FIELDS
from .remote import Credentials, ResourceGroup, DeploymentStatus, PublishProfile
from .result import OperationStatus, Result, TransferResult, PublishResult
from .walk import EntryKind, FileSystemEntry, WalkResult

__all__ = [
    # Config models
    "PublishConfig",
    "REQUIRED_FIELDS",
    "AUTH_FIELDS",

    # Remote models
    "Credentials",
    "ResourceGroup",
    "DeploymentStatus",
    "PublishProfile",

    # Result models
    "OperationStatus",
    "Result",
    "TransferResult",
    "PublishResult",

    # Walk models
    "EntryKind",
    "FileSystemEntry",
    "WalkResult",
]
