import os
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Callable, List, Optional, Set, Union

from .. import config
from ..exceptions import GatewayClosedError
from ..models import DirectoryStats, FileRecord, WalkResult
from .filesystem import DirectoryScanner

PathLike = Union[str, os.PathLike]

_OPEN = "open"
_SHUTTING_DOWN = "shutting_down"
_CLOSED = "closed"


class TaskGateway:
    """
    Runs DirectoryScanner calls on a fixed-size thread pool and hands back
    futures, so the submitting thread never blocks on a walk.

    Errors raised by a scan (DirectoryAccessError and friends) arrive through
    the future. The gateway is single-use: once shutdown() has been called,
    every submission raises GatewayClosedError.
    """

    def __init__(self,
                 scanner: Optional[DirectoryScanner] = None,
                 max_workers: Optional[int] = None,
                 grace_period: float = config.SHUTDOWN_GRACE_SECONDS):
        if max_workers is None:
            max_workers = config.DEFAULT_MAX_WORKERS
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if grace_period < 0:
            raise ValueError("grace_period must not be negative")

        self.scanner = scanner or DirectoryScanner()
        self.max_workers = max_workers
        self.grace_period = grace_period

        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="fs-scan")
        self._lock = threading.Lock()
        self._state = _OPEN
        self._in_flight: Set[Future] = set()
        # Observed by running walks; set only when shutdown gives up waiting
        self._cancel_event = threading.Event()

        logging.debug(f"TaskGateway started with {max_workers} workers")

    @property
    def closed(self) -> bool:
        return self._state != _OPEN

    def submit_list(self, directory: PathLike) -> "Future[List[FileRecord]]":
        return self._submit(self.scanner.list_directory, directory)

    def submit_stats(self, directory: PathLike) -> "Future[DirectoryStats]":
        return self._submit(self.scanner.get_directory_stats, directory)

    def submit_walk(self, directory: PathLike) -> "Future[WalkResult]":
        return self._submit(self.scanner.walk, directory)

    def _submit(self, fn: Callable, directory: PathLike) -> Future:
        with self._lock:
            if self._state != _OPEN:
                raise GatewayClosedError(f"gateway is {self._state}; cannot scan {directory}")
            future = self._executor.submit(fn, directory, self._cancel_event)
            self._in_flight.add(future)

        future.add_done_callback(self._task_done)
        logging.debug(f"Submitted {fn.__name__} for {directory}")
        return future

    def _task_done(self, future: Future):
        with self._lock:
            self._in_flight.discard(future)

    def shutdown(self, grace_period: Optional[float] = None) -> int:
        """
        Stops accepting work, waits up to `grace_period` seconds (the
        gateway default when None) for submitted tasks, then cancels
        whatever is left.

        Queued tasks are cancelled outright; running walks see the cancel
        flag at their next entry and finish with ScanCancelledError.

        Returns:
            Number of tasks that did not finish within the grace period.
            Later calls do nothing and return 0.
        """
        with self._lock:
            if self._state != _OPEN:
                return 0
            self._state = _SHUTTING_DOWN
            pending = list(self._in_flight)

        if grace_period is None:
            grace_period = self.grace_period

        logging.info(f"Shutting down task gateway ({len(pending)} tasks in flight)")
        _, not_done = wait(pending, timeout=grace_period)

        if not_done:
            logging.warning(f"{len(not_done)} tasks did not finish within "
                            f"{grace_period}s, cancelling")
            self._cancel_event.set()
            for future in not_done:
                future.cancel()
            self._executor.shutdown(wait=False, cancel_futures=True)
        else:
            self._executor.shutdown(wait=True)

        with self._lock:
            self._state = _CLOSED
        logging.info("Task gateway stopped")
        return len(not_done)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
