"""
Key generation for tinylink.

Keys are base-36 encodings (0-9a-z) of positive integers drawn at random from
an expanding range:

    1. Start with an upper bound of int("100", 36) so early keys are two or
       three characters long.
    2. Draw up to 3 random candidates in [1, bound]; return the first one the
       store does not know.
    3. Otherwise double the bound and try again, while the bound stays below
       half of the numeric limit (signed 32-bit by default).
    4. If the random phase runs out of room, scan 1..bound in order and return
       the first free key.
    5. If even the scan finds nothing, raise AddressSpaceExhausted.

Random keys keep other users' links from being enumerated; the ordered scan
guarantees termination when the space is nearly full.

The bound lives on the generator instance and only grows. The random source
is injected so tests can use a seeded `random.Random`.
"""

import logging
import random
import threading
from typing import Optional

from ..errors import AddressSpaceExhausted
from ..storage.base import BaseLinkStore

log = logging.getLogger(__name__)

_BASE36_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
_BASE36_BASE = len(_BASE36_ALPHABET)

INT32_MAX = 2**31 - 1
ATTEMPTS_PER_BOUND = 3


def base36_encode(num: int) -> str:
    """
    Convert a non-negative integer to a lowercase base-36 string.
    0 -> "0", 35 -> "z", 36 -> "10"
    """
    if num < 0:
        raise ValueError("num must be non-negative")
    if num == 0:
        return "0"
    out = []
    while num > 0:
        num, rem = divmod(num, _BASE36_BASE)
        out.append(_BASE36_ALPHABET[rem])
    return "".join(reversed(out))


class KeyGenerator:
    """
    Allocates keys that are free in a given store at the time of the call.

    Args:
        rng (random.Random, optional): Random source; defaults to SystemRandom.
        initial_max (int): Starting upper bound for random candidates.
        value_limit (int): Largest representable key value; the random phase
            stops once the bound reaches half of it.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        initial_max: int = int("100", 36),
        value_limit: int = INT32_MAX,
    ):
        if initial_max < 1:
            raise ValueError("initial_max must be positive")
        self.rng = rng if rng is not None else random.SystemRandom()
        self.max_value = initial_max
        self.value_limit = value_limit
        self._lock = threading.Lock()

    def _random_key(self, bound: int) -> str:
        return base36_encode(self.rng.randint(1, bound))

    def allocate(self, store: BaseLinkStore) -> str:
        """
        Return a key that `store.key_exists` reports as free.

        Raises:
            AddressSpaceExhausted: If no value in 1..max_value is free.
        """
        with self._lock:
            while self.max_value < self.value_limit // 2:
                for _ in range(ATTEMPTS_PER_BOUND):
                    candidate = self._random_key(self.max_value)
                    if not store.key_exists(candidate):
                        return candidate
                self.max_value *= 2
                log.debug("Key space grown to %d", self.max_value)

            log.warning("Random key search exhausted; scanning 1..%d", self.max_value)
            for value in range(1, self.max_value + 1):
                candidate = base36_encode(value)
                if not store.key_exists(candidate):
                    return candidate

        log.critical("Completely exhausted address space for links")
        raise AddressSpaceExhausted("Completely exhausted address space.")
