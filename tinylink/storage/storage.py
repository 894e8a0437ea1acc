"""
Storage module for tinylink (in-memory snapshot implementation).

Responsibilities:
    - Keep the two lookup indexes (by key, by alias) and the ordered record list
    - Enforce key and alias uniqueness on add
    - Rewrite the full snapshot after every mutation, rolling back on failure
    - Serialize every operation behind one lock per store instance

Design:
    - `LinkStore` holds the snapshot as a JSON string (`contents`). That makes it
      a fast, deterministic store for tests and local runs.
    - Persistent backends subclass it and override `_read_snapshot` /
      `_write_snapshot` only (see `file_storage.FlatFileLinkStore`); the index
      logic, locking and rollback live here once.

Indexing rule:
    A record with an alias is indexed only by alias; a record without one only
    by key. The key is still stored on aliased records.
"""

import logging
import threading
from typing import Dict, List, Optional

from pydantic import ValidationError

from ..errors import StorageIOError
from .base import BaseLinkStore
from .records import Record, dumps_snapshot, empty_snapshot, loads_snapshot

log = logging.getLogger(__name__)


def _normalize_alias(alias: Optional[str]) -> str:
    return (alias or "").strip().lower()


class LinkStore(BaseLinkStore):
    def __init__(self, contents: str = ""):
        """
        Initialize an empty store.

        Args:
            contents (str): Optional snapshot JSON to load on `initialize()`.
                An empty string means "no snapshot yet".

        Internal state:
            self._records   : List[Record]      snapshot order
            self._by_key    : Dict[str, Record] records without an alias
            self._by_alias  : Dict[str, Record] records with an alias (lowercase)
        """
        self.contents: str = contents
        self._records: List[Record] = []
        self._by_key: Dict[str, Record] = {}
        self._by_alias: Dict[str, Record] = {}
        self._lock = threading.RLock()

    # ---- Snapshot hooks ---------------------------------------------------

    def _describe(self) -> str:
        return "in-memory snapshot"

    def _read_snapshot(self) -> Optional[str]:
        """Return the snapshot text, or None when no snapshot exists yet."""
        return self.contents or None

    def _write_snapshot(self, text: str) -> None:
        """Replace the snapshot with `text`. Raise StorageIOError on failure."""
        self.contents = text

    # ---- Internal helpers -------------------------------------------------

    def _reset(self) -> None:
        self._records = []
        self._by_key = {}
        self._by_alias = {}

    def _ingest(self, records: List[Record]) -> None:
        self._reset()
        for record in records:
            if record.alias:
                if record.alias in self._by_alias:
                    log.warning("Skipping duplicate alias %r in %s", record.alias, self._describe())
                    continue
                self._by_alias[record.alias] = record
            else:
                if record.key in self._by_key:
                    log.warning("Skipping duplicate key %r in %s", record.key, self._describe())
                    continue
                self._by_key[record.key] = record
            self._records.append(record)

    def _persist(self) -> None:
        self._write_snapshot(dumps_snapshot(self._records))

    def _index_of(self, record: Record) -> Dict[str, Record]:
        return self._by_alias if record.index_field == "alias" else self._by_key

    def _index_value(self, record: Record) -> str:
        return getattr(record, record.index_field)

    def _remove(self, record: Record) -> bool:
        """Remove `record` and persist; restore the prior state if persisting fails."""
        position = self._records.index(record)
        index = self._index_of(record)
        del self._records[position]
        del index[self._index_value(record)]
        try:
            self._persist()
        except StorageIOError:
            self._records.insert(position, record)
            index[self._index_value(record)] = record
            raise
        return True

    # ---- Contract methods -------------------------------------------------

    def initialize(self) -> None:
        """
        Load the snapshot and rebuild both indexes.

        Rules:
            - No snapshot yet -> write an empty one and start empty.
            - Snapshot unreadable or unparsable -> log, start empty, leave the
              snapshot itself untouched.
        """
        with self._lock:
            try:
                text = self._read_snapshot()
            except StorageIOError as exc:
                log.error("Cannot read %s: %s", self._describe(), exc)
                self._reset()
                return

            if text is None:
                self._reset()
                self._write_snapshot(empty_snapshot())
                log.info("Created empty %s", self._describe())
                return

            try:
                records = loads_snapshot(text)
            except ValidationError as exc:
                log.error("Cannot parse %s, starting empty: %s", self._describe(), exc)
                self._reset()
                return

            self._ingest(records)
            log.info("Loaded %d link(s) from %s", len(self._records), self._describe())

    def key_exists(self, key: str) -> bool:
        with self._lock:
            return key in self._by_key

    def alias_exists(self, alias: str) -> bool:
        with self._lock:
            return _normalize_alias(alias) in self._by_alias

    def add(self, record: Record) -> bool:
        """
        Insert `record` and persist.

        Rules:
            - Alias already used (case-insensitive) -> False.
            - Key already indexed -> False, logged as a warning since the
              generator should never hand out a taken key.
            - Persist failure -> insertion rolled back, StorageIOError raised.
        """
        with self._lock:
            if record.alias and self.alias_exists(record.alias):
                return False
            if self.key_exists(record.key):
                log.warning("Duplicate key %s found.", record.key)
                return False

            index = self._index_of(record)
            self._records.append(record)
            index[self._index_value(record)] = record
            try:
                self._persist()
            except StorageIOError:
                log.error("Cannot add link for %s", record.target_url)
                self._records.pop()
                del index[self._index_value(record)]
                raise
            return True

    def delete_by_key(self, key: str) -> bool:
        with self._lock:
            record = self._by_key.get(key)
            if record is None:
                return False
            return self._remove(record)

    def delete_by_alias(self, alias: str) -> bool:
        with self._lock:
            record = self._by_alias.get(_normalize_alias(alias))
            if record is None:
                return False
            return self._remove(record)

    def get_by_key(self, key: str) -> Optional[Record]:
        with self._lock:
            return self._by_key.get(key)

    def get_by_alias(self, alias: str) -> Optional[Record]:
        with self._lock:
            return self._by_alias.get(_normalize_alias(alias))

    def delete_all(self) -> None:
        with self._lock:
            log.info("Deleting all links from %s", self._describe())
            saved = (self._records, self._by_key, self._by_alias)
            self._reset()
            try:
                self._persist()
            except StorageIOError:
                self._records, self._by_key, self._by_alias = saved
                raise

    # ---- Optional helpers -------------------------------------------------

    def records(self) -> List[Record]:
        """Stored records in snapshot order (a copy)."""
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
