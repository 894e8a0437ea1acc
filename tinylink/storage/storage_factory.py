"""
Storage factory – switch storage backend from config
====================================================

This module centralizes selection of the link store (flat file vs in-memory)
so the rest of the app can stay ignorant of where data lives.

Environment variables
---------------------
- TLNK_STORAGE_BACKEND: "file" (default) or "memory"
- TLNK_DATA:            data directory if backend=="file"

Both are read at call time through `tinylink.config.settings`.
"""

import logging
from typing import Optional

from tinylink.config import settings
from tinylink.errors import ConfigurationError
from tinylink.storage.base import BaseLinkStore
from tinylink.storage.storage import LinkStore

log = logging.getLogger(__name__)


def get_storage(backend: Optional[str] = None, **kwargs) -> BaseLinkStore:
    """
    Return a link store based on configuration.

    Parameters
    ----------
    backend : str, optional
        "file" or "memory". If omitted, reads TLNK_STORAGE_BACKEND.
    kwargs : dict
        Extra args passed to the backend constructor. For file, use data_dir="...";
        for memory, contents="..." seeds the snapshot.

    Returns
    -------
    BaseLinkStore
        An uninitialized store; call `initialize()` before use.

    Raises
    ------
    ConfigurationError
        Unknown backend, or missing/invalid data directory for "file".
    """
    be = (backend or settings.storage_backend()).lower()
    log.info("Selected storage backend: %r", be)

    if be == "memory":
        return LinkStore(contents=kwargs.get("contents", ""))

    if be == "file":
        from tinylink.storage.file_storage import FlatFileLinkStore
        return FlatFileLinkStore(data_dir=kwargs.get("data_dir"))

    raise ConfigurationError(f"Unknown storage backend: {be!r}")
