"""
Utility functions for the auth module.
"""

import hmac
import secrets

from tinylink.manager.key_generator import base36_encode


def generate_access_key(upper: int = 1_000_000) -> str:
    """Return a random base-36 access key for a value in [1, upper]."""
    return base36_encode(secrets.randbelow(upper) + 1)


def keys_match(provided: str, expected: str) -> bool:
    """Constant-time comparison of two access keys."""
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))
