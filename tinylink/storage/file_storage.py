"""
FlatFileLinkStore – JSON flat-file storage for tinylink
======================================================

Persists every link in a single UTF-8 JSON document,
`<data-dir>/tinylink_map.json`. It reuses all index, locking and rollback
logic from the in-memory `LinkStore` and only replaces how the snapshot is
read and written.

Key Design Points
-----------------
- **Full rewrite**: every mutation rewrites the whole document; there is no
  append log.
- **Atomic replace**: the document is written to a temporary file in the same
  directory, fsynced, then moved over the target with `os.replace`, so a crash
  mid-write leaves the previous document intact.
- **Fail fast on configuration**: the data directory is checked once, at
  construction. A missing or non-directory path raises ConfigurationError
  before `initialize()` is ever called.
- **Single process**: nothing coordinates two processes pointing at the same
  file.

Example
-------
>>> store = FlatFileLinkStore(data_dir="/var/lib/tinylink")
>>> store.initialize()
>>> store.add(Record(key="2s", target_url="http://example.com"))
True
>>> store.get_by_key("2s").target_url
'http://example.com'
"""

import contextlib
import logging
import os
import tempfile
from typing import Optional

from ..config import settings
from ..errors import ConfigurationError, StorageIOError
from .storage import LinkStore

log = logging.getLogger(__name__)

BACKING_FILE_NAME = "tinylink_map.json"


class FlatFileLinkStore(LinkStore):
    """Flat-file implementation of the link store contract.

    Parameters
    ----------
    data_dir : str, optional
        Directory holding `tinylink_map.json`. Defaults to TLNK_DATA.

    Raises
    ------
    ConfigurationError
        If the directory is not configured or does not exist.
    """

    def __init__(self, data_dir: Optional[str] = None) -> None:
        super().__init__()
        data_dir = data_dir if data_dir is not None else settings.data_dir()
        if not data_dir or not os.path.isdir(data_dir):
            raise ConfigurationError(
                f"TLNK_DATA must be defined to indicate the location of {BACKING_FILE_NAME}"
            )
        self.data_dir = data_dir
        self.backing_file_path = os.path.join(data_dir, BACKING_FILE_NAME)

    # ---- Snapshot hooks ---------------------------------------------------

    def _describe(self) -> str:
        return self.backing_file_path

    def _read_snapshot(self) -> Optional[str]:
        if not os.path.exists(self.backing_file_path):
            return None
        try:
            with open(self.backing_file_path, "r", encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageIOError(f"Cannot read {self.backing_file_path}: {exc}") from exc

    def _write_snapshot(self, text: str) -> None:
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                prefix=".tinylink_map.", suffix=".tmp", dir=self.data_dir
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.backing_file_path)
            tmp_path = None
        except OSError as exc:
            log.error("Cannot write %s: %s", self.backing_file_path, exc)
            raise StorageIOError(f"Cannot write {self.backing_file_path}: {exc}") from exc
        finally:
            if tmp_path is not None:
                with contextlib.suppress(OSError):
                    os.remove(tmp_path)
