"""
Unit tests for tinylink.manager.key_generator.

Focus on base-36 encoding, the expanding random search, the ordered
fallback scan and exhaustion.
"""

import random
import re

import pytest

from tinylink.errors import AddressSpaceExhausted
from tinylink.manager.key_generator import KeyGenerator, base36_encode

BASE36_PATTERN = re.compile(r"^[0-9a-z]+$")


class _KeySet:
    """Minimal store stand-in: only answers key_exists, and counts calls."""

    def __init__(self, keys=()):
        self.keys = set(keys)
        self.checks = 0

    def key_exists(self, key):
        self.checks += 1
        return key in self.keys


class _FixedRandom(random.Random):
    """Random source that always returns the same value."""

    def __init__(self, value):
        super().__init__()
        self.value = value

    def randint(self, a, b):
        return self.value


def test_base36_progression_sanity():
    assert base36_encode(0) == "0"
    assert base36_encode(35) == "z"
    assert base36_encode(36) == "10"
    assert base36_encode(int("100", 36)) == "100"
    assert base36_encode(2**31 - 1) == "zik0zj"


def test_base36_rejects_negative():
    with pytest.raises(ValueError):
        base36_encode(-1)


def test_default_initial_bound_is_base36_100():
    assert KeyGenerator().max_value == 1296


def test_allocate_returns_free_short_key(generator):
    store = _KeySet()
    key = generator.allocate(store)
    assert BASE36_PATTERN.match(key)
    assert 1 <= int(key, 36) <= 1296
    assert store.checks == 1


def test_allocate_is_deterministic_with_seeded_rng():
    a = KeyGenerator(rng=random.Random(42)).allocate(_KeySet())
    b = KeyGenerator(rng=random.Random(42)).allocate(_KeySet())
    assert a == b


def test_allocate_never_returns_existing_key():
    gen = KeyGenerator(rng=random.Random(7))
    store = _KeySet()
    for _ in range(500):
        key = gen.allocate(store)
        assert key not in store.keys
        store.keys.add(key)
    assert len(store.keys) == 500


def test_bound_doubles_after_three_collisions():
    gen = KeyGenerator(rng=_FixedRandom(5), initial_max=10, value_limit=1000)
    store = _KeySet({"5"})
    # Every random candidate collides; the random phase doubles 10 -> 640, then scans.
    key = gen.allocate(store)
    assert gen.max_value == 640
    assert key == "1"
    # 6 bounds (10..320) x 3 attempts, then scan hits "1" on its first check.
    assert store.checks == 6 * 3 + 1


def test_fallback_scan_returns_first_gap():
    taken = {base36_encode(n) for n in range(1, 40)}  # 1..K-1 with K = 40
    gen = KeyGenerator(rng=_FixedRandom(1), initial_max=8, value_limit=200)
    key = gen.allocate(_KeySet(taken))
    assert gen.max_value > 40
    assert key == base36_encode(40) == "14"


def test_exhausted_space_raises(caplog):
    gen = KeyGenerator(rng=_FixedRandom(1), initial_max=4, value_limit=20)
    # Random phase: 4 -> 8 -> 16 (16 >= 20 // 2 stops it); the scan covers 1..16.
    taken = {base36_encode(n) for n in range(1, 17)}
    with pytest.raises(AddressSpaceExhausted):
        gen.allocate(_KeySet(taken))
    assert "exhausted address space" in caplog.text


def test_invalid_initial_max():
    with pytest.raises(ValueError):
        KeyGenerator(initial_max=0)
