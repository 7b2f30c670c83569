from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class DirectoryStats:
    """
    Aggregate of a directory subtree. The walked root itself is not counted.
    """
    total_size_bytes: int = 0
    file_count: int = 0
    directory_count: int = 0

    def __str__(self) -> str:
        return (f"DirectoryStats(files={self.file_count}, "
                f"dirs={self.directory_count}, size={self.total_size_bytes})")


@dataclass(frozen=True)
class WalkResult:
    """Stats plus the bookkeeping counters of a single walk."""
    stats: DirectoryStats
    inaccessible_count: int = 0
    visited_count: int = 0


@dataclass(frozen=True)
class FileRecord:
    """
    Snapshot of one filesystem entry taken at scan time.
    """
    name: str
    path: str
    absolute_path: str
    size_bytes: int
    is_directory: bool
    is_symlink: bool = False

    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    owner: Optional[str] = None
    extension: Optional[str] = None  # lowercase, no dot; never set for directories

    # Only meaningful on records returned by with_stats()
    child_file_count: int = 0
    child_directory_count: int = 0

    def with_stats(self, stats: DirectoryStats) -> "FileRecord":
        """Returns a copy of this directory record carrying the aggregate of its subtree."""
        if not self.is_directory:
            raise ValueError(f"{self.path} is not a directory")
        return replace(
            self,
            size_bytes=stats.total_size_bytes,
            child_file_count=stats.file_count,
            child_directory_count=stats.directory_count,
        )
