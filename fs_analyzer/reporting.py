"""
Text rendering of scan results for terminal or UI display.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from . import config
from .models import DirectoryStats, FileRecord


@dataclass(frozen=True)
class ListingSummary:
    folder_count: int
    file_count: int
    total_size_bytes: int  # immediate files only, directories are not measured

    def __str__(self) -> str:
        return (f"Summary: {self.folder_count} folders, {self.file_count} files, "
                f"total size: {format_size(self.total_size_bytes)}")


def format_size(size_bytes: int) -> str:
    """1536 -> '1.5 KB'. Bytes below 1 KB are shown exact."""
    if size_bytes < 0:
        return "N/A"
    if size_bytes < 1024:
        return f"{size_bytes} B"

    value = float(size_bytes)
    for unit in config.SIZE_UNITS:
        value /= 1024.0
        if value < 1024 or unit == config.SIZE_UNITS[-1]:
            return f"{value:.1f} {unit}"


def format_timestamp(dt: Optional[datetime]) -> str:
    return dt.strftime(config.TIMESTAMP_FORMAT) if dt else "-"


def summarize_listing(records: Iterable[FileRecord]) -> ListingSummary:
    folders = 0
    files = 0
    total = 0
    for rec in records:
        if rec.is_directory:
            folders += 1
        else:
            files += 1
            total += rec.size_bytes
    return ListingSummary(folder_count=folders, file_count=files, total_size_bytes=total)


def sort_for_display(records: Iterable[FileRecord]) -> list:
    """Directories first, then case-insensitive by name."""
    return sorted(records, key=lambda r: (not r.is_directory, r.name.lower()))


def describe_record(record: FileRecord, stats: Optional[DirectoryStats] = None) -> str:
    """
    Multi-line detail text for one entry. For a directory, pass the stats
    of its subtree to show totals; without them the size reads as pending.
    """
    lines = [
        f"Name: {record.name}",
        f"Path: {record.path}",
        f"Absolute path: {record.absolute_path}",
        f"Type: {'Directory' if record.is_directory else 'File'}",
    ]

    if record.is_directory:
        if stats is None:
            lines.append("Size: calculating...")
        else:
            lines.append(f"Size: {format_size(stats.total_size_bytes)}")
            lines.append(f"Files: {stats.file_count}")
            lines.append(f"Folders: {stats.directory_count}")
    else:
        lines.append(f"Size: {format_size(record.size_bytes)}")

    if record.owner:
        lines.append(f"Owner: {record.owner}")
    if record.created_at:
        lines.append(f"Created: {format_timestamp(record.created_at)}")
    if record.modified_at:
        lines.append(f"Modified: {format_timestamp(record.modified_at)}")
    if record.extension:
        lines.append(f"Extension: .{record.extension}")

    return "\n".join(lines)
