"""
Configuration for the auth module.

The access key comes from TLNK_ACCESS_KEY. When it is unset, a random key is
generated once per app and written to the log, so only someone with access to
the server's log can create links.
"""

import logging
from typing import Optional

from tinylink.config import settings

from .utils import generate_access_key

log = logging.getLogger(__name__)


def resolve_access_key(explicit: Optional[str] = None) -> str:
    """
    Return the access key to use for an app instance.

    Order: explicit argument, TLNK_ACCESS_KEY, freshly generated key.
    """
    key = explicit or settings.access_key()
    if key:
        return key
    key = generate_access_key()
    log.info("********** Access Key is k%s **********", key)
    return key
