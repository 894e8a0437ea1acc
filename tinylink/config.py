"""
Runtime configuration for tinylink
==================================

Simple settings module that reads from environment variables (only here),
and exposes a stable `settings` object for the rest of the codebase.
Avoid reading env vars anywhere else; import from this module instead.

Values are read at access time rather than import time, so tests can
`monkeypatch.setenv(...)` without reloading modules.

Storage
-------
- TLNK_DATA              : directory holding tinylink_map.json (required for "file")
- TLNK_STORAGE_BACKEND   : "file" (default) or "memory"

Access
------
- TLNK_ACCESS_KEY        : shared secret for the management endpoints;
                           generated and logged at startup when unset

Key generation
--------------
- TLNK_KEYGEN_START      : initial upper bound for random keys (default int("100", 36))

Logging
-------
- TLNK_LOG_LEVEL         : root log level name (default "INFO")
"""

import os
from typing import Optional


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name, str(default))
    try:
        return int(raw)
    except ValueError:
        return default


class _Settings:
    DEFAULT_KEYGEN_START: int = int("100", 36)

    # -------- Storage --------
    def data_dir(self) -> Optional[str]:
        return os.getenv("TLNK_DATA")

    def storage_backend(self) -> str:
        return os.getenv("TLNK_STORAGE_BACKEND", "file").strip().lower()

    # -------- Access --------
    def access_key(self) -> Optional[str]:
        return os.getenv("TLNK_ACCESS_KEY") or None

    # -------- Key generation --------
    def keygen_start(self) -> int:
        return max(1, _get_int("TLNK_KEYGEN_START", self.DEFAULT_KEYGEN_START))

    # -------- Logging --------
    def log_level(self) -> str:
        return os.getenv("TLNK_LOG_LEVEL", "INFO").strip().upper()


settings = _Settings()
