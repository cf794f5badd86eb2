"""
Shared fixtures for storage engine unit tests.
"""
import pytest

from browscap_cache.filters import PropertyFilter
from browscap_cache.parser import Coordinator
from browscap_cache.persist.hashing import compute_fingerprint
from browscap_cache.persist.sqlite_store import CapabilityStore


@pytest.fixture
def store(tmp_path):
    """Create a temporary CapabilityStore instance."""
    db_path = tmp_path / "dataset.sqlite"
    store = CapabilityStore(db_path)
    yield store
    store.close()


@pytest.fixture
def cache_dir(tmp_path):
    directory = tmp_path / "browscap" / "sqlite"
    directory.mkdir(parents=True)
    return directory


@pytest.fixture
def browser_filter():
    return PropertyFilter(["Browser", "Version"])


@pytest.fixture
def browser_hash(browser_filter):
    return compute_fingerprint(Coordinator, browser_filter)
