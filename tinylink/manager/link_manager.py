"""
LinkManager module for tinylink.

Responsibilities:
    - Validate target URLs and aliases
    - Normalize aliases to lowercase before they reach the store
    - Allocate a fresh key and add the record (the store re-checks uniqueness)
    - Resolve keys/aliases back to target URLs
    - Format the public link for a created record

Design notes:
    - Storage and key generator are injected dependencies.
    - Duplicate aliases are an expected outcome: `create_link` returns None
      instead of raising. Invalid input raises ValueError; storage and
      exhaustion failures propagate as their typed errors.
"""

import logging
import re
from typing import Optional
from urllib.parse import urlparse

import requests

from ..config import settings
from ..storage.base import BaseLinkStore
from ..storage.records import Record
from .key_generator import KeyGenerator

log = logging.getLogger(__name__)

AliasPattern = re.compile(r"^[0-9A-Za-z_-]{1,32}$")
ALLOCATION_ATTEMPTS = 3


class LinkManager:
    """
    Coordinates creation and lookup rules for links.
    """

    def __init__(
        self,
        storage: BaseLinkStore,
        key_generator: Optional[KeyGenerator] = None,
        reachability_timeout: float = 5.0,
    ):
        """
        Args:
            storage (BaseLinkStore): Initialized link store.
            key_generator (Optional[KeyGenerator]): Defaults to a SystemRandom-backed
                generator starting at TLNK_KEYGEN_START.
            reachability_timeout (float): Seconds allowed for the optional reachability check.
        """
        self.storage = storage
        self.key_generator = key_generator or KeyGenerator(initial_max=settings.keygen_start())
        self.reachability_timeout = reachability_timeout

    # ---------------------------------------------------------------------
    # Validation Helpers
    # ---------------------------------------------------------------------
    def _validate_url(self, url: str) -> None:
        """
        Validate that a URL has an http/https scheme and a host.

        Raises:
            ValueError: If the URL is malformed.
        """
        parsed = urlparse(url or "")
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError("URL is invalid")

    def _validate_alias(self, alias: str) -> str:
        """
        Validate alias characters and length, return it lowercased.

        Raises:
            ValueError: If alias contains invalid characters or is too long.
        """
        if not AliasPattern.match(alias):
            raise ValueError("Alias must be 1-32 characters of 0-9a-zA-Z_-")
        return alias.lower()

    def _is_reachable(self, url: str) -> bool:
        """
        Best-effort reachability check.

        Tries HEAD first (following redirects); falls back to a streamed GET when
        the server refuses HEAD with 403/405. 2xx and 3xx count as reachable.
        """
        try:
            resp = requests.head(url, allow_redirects=True, timeout=self.reachability_timeout)
            if resp.status_code not in (403, 405):
                return resp.status_code < 400
            with requests.get(url, stream=True, timeout=self.reachability_timeout) as resp:
                return resp.status_code < 400
        except requests.RequestException as exc:
            log.info("Reachability check failed for %s: %s", url, exc)
            return False

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    def create_link(
        self, url: str, alias: Optional[str] = None, check_reachable: bool = False
    ) -> Optional[Record]:
        """
        Create a link for `url`, optionally under a vanity alias.

        Returns:
            Record: The stored record.
            None: The alias (or, in a lost race, the key) is already taken.

        Raises:
            ValueError: Invalid URL or alias, or URL unreachable when checked.
            StorageIOError: The snapshot could not be written.
            AddressSpaceExhausted: No free key left.
        """
        self._validate_url(url)
        normalized = self._validate_alias(alias) if alias else None

        if check_reachable and not self._is_reachable(url):
            raise ValueError("URL is not reachable")

        if normalized and self.storage.alias_exists(normalized):
            return None

        # Allocation and add are separate steps; a concurrent create can take
        # the key in between, in which case a fresh key is allocated.
        for _ in range(ALLOCATION_ATTEMPTS):
            key = self.key_generator.allocate(self.storage)
            record = Record(key=key, alias=normalized, target_url=url)
            if self.storage.add(record):
                log.info("Created link %s -> %s", normalized or key, url)
                return record
            if normalized and self.storage.alias_exists(normalized):
                return None
        log.error("Gave up allocating a key for %s after %d attempts", url, ALLOCATION_ATTEMPTS)
        return None

    def resolve_key(self, key: str) -> Optional[str]:
        record = self.storage.get_by_key(key)
        return record.target_url if record else None

    def resolve_alias(self, alias: str) -> Optional[str]:
        record = self.storage.get_by_alias(alias)
        return record.target_url if record else None

    def format_link(self, record: Record, service_domain: str) -> str:
        """
        Build the public link for a record: /a/<alias> when aliased, else /l/<key>.

        Example:
            format_link(Record(key="2s", target_url=...), "tny.example") -> "http://tny.example/l/2s"
        """
        path = f"/a/{record.alias}" if record.alias else f"/l/{record.key}"
        return f"http://{service_domain}{path}"
