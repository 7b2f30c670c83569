import logging
import os
import stat
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Union

from .. import config
from ..exceptions import AccessError
from ..models import FileRecord

PathLike = Union[str, os.PathLike]


def _default_owner(path: Path) -> str:
    return path.owner()


class MetadataExtractor:
    """
    Builds a FileRecord from a single attribute read of one entry.

    Symlinks are never followed: a link is described by its own lstat
    attributes, so a link to a directory is not a directory here.
    """

    def __init__(self, owner_resolver: Optional[Callable[[Path], str]] = None):
        self.owner_resolver = owner_resolver or _default_owner

    def extract(self, path: PathLike) -> FileRecord:
        """
        Reads the attributes of `path`.

        Raises:
            AccessError: the entry vanished or its attributes are unreadable.
        """
        p = Path(path)
        try:
            st = os.lstat(p)
        except OSError as e:
            logging.warning(f"Cannot read attributes of {p}: {e}")
            raise AccessError(p, e.strerror or "cannot read attributes") from e

        is_dir = stat.S_ISDIR(st.st_mode)
        name = p.name or str(p)

        record = FileRecord(
            name=name,
            path=os.fspath(path),
            absolute_path=str(p.absolute()),
            size_bytes=0 if is_dir else st.st_size,
            is_directory=is_dir,
            is_symlink=stat.S_ISLNK(st.st_mode),
            created_at=self._to_datetime(getattr(st, "st_birthtime", None)),
            modified_at=self._to_datetime(st.st_mtime),
            owner=self._resolve_owner(p),
            extension=self.extension_for(name, is_dir),
        )
        logging.debug(f"Scanned {p}: dir={is_dir}, size={record.size_bytes}")
        return record

    @staticmethod
    def extension_for(name: str, is_directory: bool) -> Optional[str]:
        """
        Lowercase text after the last dot, when that dot is neither the
        first nor the last character of `name`. Directories have none.
        """
        if is_directory:
            return None
        dot = name.rfind(".")
        if 0 < dot < len(name) - 1:
            return name[dot + 1:].lower()
        return None

    def _resolve_owner(self, path: Path) -> str:
        try:
            return self.owner_resolver(path)
        except (OSError, KeyError, NotImplementedError) as e:
            logging.warning(f"Could not resolve owner of {path}: {e}")
            return config.UNKNOWN_OWNER

    def _to_datetime(self, ts: Optional[float]) -> Optional[datetime]:
        if ts is None:
            return None
        try:
            return datetime.fromtimestamp(ts)
        except (OverflowError, OSError, ValueError):
            return None
