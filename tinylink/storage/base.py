"""
Base storage interface for tinylink.

Purpose:
    Define the narrow contract the routing layer and the key generator rely on,
    so the in-memory snapshot store and the flat-file store are interchangeable.

Contract summary:
    - Lookups (key_exists, alias_exists, get_by_key, get_by_alias) never do I/O.
    - Duplicate and not-found outcomes are return values (False / None).
    - Mutations rewrite the whole snapshot and raise StorageIOError if that fails.

Testing & Coverage:
    These are abstract methods and are not executed directly in tests.
    We annotate them with `# pragma: no cover` so coverage tools don't
    penalize the project for un-runnable abstract declarations.
"""

from abc import ABC, abstractmethod
from typing import Optional

from .records import Record


class BaseLinkStore(ABC):
    """Abstract base class for link stores."""

    @abstractmethod  # pragma: no cover
    def initialize(self) -> None:
        """
        Load (or create) the snapshot and rebuild both indexes from scratch.

        Raises:
            StorageIOError: If a missing snapshot cannot be created.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def key_exists(self, key: str) -> bool:
        """Return True if a record without an alias is indexed under `key`."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def alias_exists(self, alias: str) -> bool:
        """Return True if `alias` (case-insensitive) is already used."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def add(self, record: Record) -> bool:
        """
        Insert a record and persist the snapshot.

        Returns:
            bool: True on success, False on alias or key collision (no mutation).

        Raises:
            StorageIOError: If the snapshot could not be written (insert is rolled back).
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def delete_by_key(self, key: str) -> bool:
        """Remove the record indexed under `key`. False if there is none."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def delete_by_alias(self, alias: str) -> bool:
        """Remove the record indexed under `alias`. False if there is none."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def get_by_key(self, key: str) -> Optional[Record]:
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def get_by_alias(self, alias: str) -> Optional[Record]:
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def delete_all(self) -> None:
        """Drop every record and persist an empty snapshot."""
        raise NotImplementedError
