"""
Global pytest fixtures for the tinylink test suite.

Responsibilities:
    - Provide isolated, initialized in-memory and flat-file stores
    - Provide a seeded KeyGenerator so allocations are reproducible
    - Provide a LinkManager wired to the in-memory store
    - Provide a fresh FastAPI TestClient via the app factory

Why an app factory?
    Using `create_app()` gives each test its own store and access key,
    eliminating cross-test state.
"""

import random

import pytest
from fastapi.testclient import TestClient

from main import create_app
from tinylink.manager.key_generator import KeyGenerator
from tinylink.manager.link_manager import LinkManager
from tinylink.storage.file_storage import FlatFileLinkStore
from tinylink.storage.storage import LinkStore

ACCESS_KEY = "testkey"


@pytest.fixture
def storage() -> LinkStore:
    """Fresh, initialized in-memory store."""
    store = LinkStore()
    store.initialize()
    return store


@pytest.fixture
def file_storage(tmp_path) -> FlatFileLinkStore:
    """Fresh, initialized flat-file store in a temporary data directory."""
    store = FlatFileLinkStore(data_dir=str(tmp_path))
    store.initialize()
    return store


@pytest.fixture
def generator() -> KeyGenerator:
    """Key generator with a seeded random source."""
    return KeyGenerator(rng=random.Random(1234))


@pytest.fixture
def manager(storage: LinkStore, generator: KeyGenerator) -> LinkManager:
    return LinkManager(storage=storage, key_generator=generator)


@pytest.fixture
def client(storage: LinkStore, generator: KeyGenerator) -> TestClient:
    """
    TestClient over a new app wired to the in-memory store fixture.

    Redirects are not followed so tests can assert on 302 responses.
    """
    app = create_app(storage=storage, key_generator=generator, access_key=ACCESS_KEY)
    return TestClient(app, follow_redirects=False)
