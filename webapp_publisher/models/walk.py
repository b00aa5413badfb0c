"""Local filesystem walk models"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List


class EntryKind(Enum):
    """Classification of a local path"""
    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class FileSystemEntry:
    """A local path classified as file or directory"""

    path: Path
    kind: EntryKind

    @property
    def is_directory(self) -> bool:
        return self.kind == EntryKind.DIRECTORY


@dataclass
class WalkResult:
    """Directories and files collected under a site root

    Every directory appears after all of its ancestors.
    """

    root: Path
    directories: List[Path] = field(default_factory=list)
    files: List[Path] = field(default_factory=list)

    def extend(self, other: 'WalkResult') -> None:
        """Append the entries collected by a sub-walk"""
        self.directories.extend(other.directories)
        self.files.extend(other.files)

    @property
    def entries(self) -> List[FileSystemEntry]:
        return (
            [FileSystemEntry(d, EntryKind.DIRECTORY) for d in self.directories]
            + [FileSystemEntry(f, EntryKind.FILE) for f in self.files]
        )

    def __len__(self) -> int:
        return len(self.directories) + len(self.files)
