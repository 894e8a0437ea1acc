"""
Error types for tinylink.

Expected outcomes (duplicate key/alias, unknown key/alias) are reported as
plain return values by the store (False / None). Only the conditions below
are raised.

- ConfigurationError     : data directory or backend selection is invalid; fatal at startup
- StorageIOError         : backing file could not be created or rewritten
- AddressSpaceExhausted  : no free key left in the generator's numeric range
"""


class TinylinkError(Exception):
    """Base class for all tinylink failures."""


class ConfigurationError(TinylinkError, ValueError):
    """Missing or invalid configuration (e.g. TLNK_DATA not a directory)."""


class StorageIOError(TinylinkError, OSError):
    """The backing file could not be created or written."""


class AddressSpaceExhausted(TinylinkError, RuntimeError):
    """Every key in the representable range is already taken."""
