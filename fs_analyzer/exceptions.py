"""
Custom exception hierarchy for the filesystem analyzer.

Per-entry failures (AccessError) are recovered inside the scanner; only
root-level and pool-lifecycle errors reach the caller.
"""
import os
from concurrent.futures import CancelledError


class FileAnalyzerError(Exception):
    """Base exception for all filesystem analyzer errors."""
    pass


class AccessError(FileAnalyzerError):
    """Raised when the attributes of a single entry cannot be read."""

    def __init__(self, path, message: str = "cannot read attributes"):
        self.path = os.fspath(path)
        super().__init__(f"{message}: {self.path}")


class DirectoryAccessError(FileAnalyzerError):
    """Raised when a root directory is missing, not a directory, or cannot be opened."""

    def __init__(self, path, message: str = "directory is not accessible"):
        self.path = os.fspath(path)
        super().__init__(f"{message}: {self.path}")


class GatewayClosedError(FileAnalyzerError):
    """Raised when a task is submitted after the gateway was shut down."""
    pass


class ScanCancelledError(FileAnalyzerError, CancelledError):
    """Raised inside a worker when a running scan is cancelled by shutdown."""
    pass
