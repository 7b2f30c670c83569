import os
import logging
import stat
import threading
from pathlib import Path
from typing import List, Optional, Union

from ..exceptions import AccessError, DirectoryAccessError, ScanCancelledError
from ..metadata.extract import MetadataExtractor
from ..models import DirectoryStats, FileRecord, WalkResult

PathLike = Union[str, os.PathLike]


class DirectoryScanner:
    """
    Synchronous directory listing and subtree aggregation.

    Both operations block the calling thread; run them through a
    TaskGateway to keep an interactive thread responsive. A scanner holds
    no per-scan state, so one instance may serve many threads at once.
    """

    def __init__(self, extractor: Optional[MetadataExtractor] = None):
        self.extractor = extractor or MetadataExtractor()

    def list_directory(self,
                       directory: PathLike,
                       cancel_event: Optional[threading.Event] = None) -> List[FileRecord]:
        """
        Returns a FileRecord for every immediate child of `directory`.

        Children whose attributes cannot be read are logged and left out,
        so the result may be shorter than the real child count. Order is
        whatever the OS enumerates; sort if you need determinism.
        """
        root = self._check_root(directory)
        logging.info(f"Listing directory: {root}")

        records = []
        error_count = 0
        try:
            with os.scandir(root) as it:
                for entry in it:
                    self._check_cancelled(cancel_event, root)
                    try:
                        records.append(self.extractor.extract(entry.path))
                    except AccessError as e:
                        error_count += 1
                        logging.warning(f"Skipping {entry.path}: {e}")
        except OSError as e:
            logging.error(f"Cannot open directory {root}: {e}")
            raise DirectoryAccessError(root, "cannot open directory") from e

        logging.info(f"Listing complete. Listed: {len(records)}, errors: {error_count}, "
                     f"total: {len(records) + error_count}")
        return records

    def get_directory_stats(self,
                            directory: PathLike,
                            cancel_event: Optional[threading.Event] = None) -> DirectoryStats:
        """Recursive size, file count and directory count below `directory`."""
        return self.walk(directory, cancel_event).stats

    def walk(self,
             directory: PathLike,
             cancel_event: Optional[threading.Event] = None) -> WalkResult:
        """
        Depth-first walk of the subtree rooted at `directory`.

        Symlinks are never followed. Entries that vanish or cannot be read
        are counted as inaccessible and skipped; a subdirectory that cannot
        be opened contributes nothing to the totals. Only a bad root raises.

        Raises:
            DirectoryAccessError: root missing, not a directory, or unreadable.
            ScanCancelledError: `cancel_event` was set mid-walk.
        """
        root = self._check_root(directory)
        logging.info(f"Collecting stats for directory: {root}")

        total_size = 0
        file_count = 0
        dir_count = 0
        inaccessible = 0
        visited = 1  # root

        stack = [root]
        while stack:
            current = stack.pop()
            self._check_cancelled(cancel_event, root)

            try:
                with os.scandir(current) as it:
                    entries = list(it)
            except OSError as e:
                if current == root:
                    logging.error(f"Cannot open directory {root}: {e}")
                    raise DirectoryAccessError(root, "cannot open directory") from e
                inaccessible += 1
                logging.warning(f"No access to {current}: {e}")
                continue

            if current != root:
                dir_count += 1

            for entry in entries:
                self._check_cancelled(cancel_event, root)
                visited += 1
                try:
                    st = entry.stat(follow_symlinks=False)
                except OSError as e:
                    inaccessible += 1
                    logging.warning(f"No access to {entry.path}: {e}")
                    continue

                if stat.S_ISDIR(st.st_mode):
                    # Counted once it has been opened successfully
                    stack.append(Path(entry.path))
                else:
                    file_count += 1
                    total_size += st.st_size
                    logging.debug(f"File: {entry.name}, size: {st.st_size} bytes")

        stats = DirectoryStats(total_size_bytes=total_size,
                               file_count=file_count,
                               directory_count=dir_count)
        logging.info(f"Stats for {root}: files={file_count}, dirs={dir_count}, "
                     f"size={total_size} bytes, inaccessible={inaccessible}")
        return WalkResult(stats=stats, inaccessible_count=inaccessible, visited_count=visited)

    def _check_root(self, directory: PathLike) -> Path:
        root = Path(directory)
        try:
            is_dir = root.is_dir()
        except OSError:
            is_dir = False
        if not is_dir:
            logging.error(f"Directory does not exist or is not a directory: {root}")
            raise DirectoryAccessError(root, "directory does not exist or is not a directory")
        return root

    @staticmethod
    def _check_cancelled(cancel_event: Optional[threading.Event], root: Path):
        if cancel_event is not None and cancel_event.is_set():
            logging.warning(f"Scan of {root} cancelled")
            raise ScanCancelledError(f"scan of {root} cancelled")
