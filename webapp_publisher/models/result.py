"""Operation result models"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Any


def _now() -> datetime:
    return datetime.now(timezone.utc)


class OperationStatus(Enum):
    """Operation status"""
    SUCCESS = "success"
    IN_PROGRESS = "in_progress"


@dataclass
class Result:
    """Base result class"""

    status: OperationStatus
    message: str = ""
    warnings: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    start_time: datetime = field(default_factory=_now)
    end_time: Optional[datetime] = None

    @property
    def is_success(self) -> bool:
        """Check if operation was successful"""
        return self.status == OperationStatus.SUCCESS

    @property
    def duration(self) -> Optional[float]:
        """Get operation duration in seconds"""
        if self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None

    def add_warning(self, message: str) -> None:
        """Add a warning"""
        self.warnings.append(message)

    def complete(self, status: Optional[OperationStatus] = None) -> None:
        """Mark operation as complete"""
        self.end_time = _now()
        if status:
            self.status = status


@dataclass
class TransferResult(Result):
    """Result of the content transfer stage"""

    host: Optional[str] = None
    remote_root: Optional[str] = None
    directories_created: List[str] = field(default_factory=list)
    files_uploaded: List[str] = field(default_factory=list)


@dataclass
class PublishResult(Result):
    """Result of a publish run"""

    web_app_name: Optional[str] = None
    resource_group: Optional[str] = None
    provisioned: bool = False
    completed_stages: List[str] = field(default_factory=list)
    transfer: Optional[TransferResult] = None

    @property
    def files_uploaded(self) -> int:
        return len(self.transfer.files_uploaded) if self.transfer else 0

    @property
    def directories_created(self) -> int:
        return len(self.transfer.directories_created) if self.transfer else 0

    def mark_stage(self, stage: str) -> None:
        """Record a completed pipeline stage"""
        self.completed_stages.append(stage)
