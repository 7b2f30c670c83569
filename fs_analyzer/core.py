import logging
from concurrent.futures import Future
from typing import List, Optional

from . import config
from .metadata.extract import MetadataExtractor
from .models import DirectoryStats, FileRecord
from .scanning.filesystem import DirectoryScanner, PathLike
from .scanning.gateway import TaskGateway


class FileSystemAnalyzer:
    """
    Entry point for callers (CLI or a UI): blocking and future-returning
    variants of the two scanner operations, plus shutdown.

    The *_async methods run on the analyzer's own worker pool. The plain
    methods run on the calling thread and raise directly.
    """

    def __init__(self,
                 max_workers: Optional[int] = None,
                 grace_period: float = config.SHUTDOWN_GRACE_SECONDS,
                 extractor: Optional[MetadataExtractor] = None):
        self.extractor = extractor or MetadataExtractor()
        self.scanner = DirectoryScanner(self.extractor)
        self.gateway = TaskGateway(self.scanner, max_workers=max_workers, grace_period=grace_period)

    def scan_file(self, path: PathLike) -> FileRecord:
        return self.extractor.extract(path)

    def list_directory(self, path: PathLike) -> List[FileRecord]:
        return self.scanner.list_directory(path)

    def list_directory_async(self, path: PathLike) -> "Future[List[FileRecord]]":
        return self.gateway.submit_list(path)

    def get_directory_stats(self, path: PathLike) -> DirectoryStats:
        return self.scanner.get_directory_stats(path)

    def get_directory_stats_async(self, path: PathLike) -> "Future[DirectoryStats]":
        return self.gateway.submit_stats(path)

    def shutdown(self, grace_period: Optional[float] = None) -> int:
        logging.info("Stopping filesystem analyzer")
        return self.gateway.shutdown(grace_period)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
