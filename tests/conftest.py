"""Test configuration and fixtures."""

from pathlib import Path

import pytest

from browscap_cache.source import StaticSource, reset_default_source


class FakeHandle:
    """Records what the coordinator pushes into a reader or writer."""

    def __init__(self, directory: Path, source=None):
        self.directory = directory
        self.source = source
        self.property_filter = None
        self.data_version_hash = None
        self.calls = []

    def set_property_filter(self, property_filter):
        self.calls.append(("filter", property_filter))
        self.property_filter = property_filter

    def set_data_version_hash(self, data_version_hash):
        self.calls.append(("hash", data_version_hash))
        self.data_version_hash = data_version_hash


@pytest.fixture
def fake_handles():
    """Factories producing FakeHandle readers and writers."""
    created = {"readers": [], "writers": []}

    def reader_factory(directory):
        handle = FakeHandle(directory)
        created["readers"].append(handle)
        return handle

    def writer_factory(directory, source):
        handle = FakeHandle(directory, source)
        created["writers"].append(handle)
        return handle

    created["reader_factory"] = reader_factory
    created["writer_factory"] = writer_factory
    return created


@pytest.fixture
def sample_records():
    """Small set of capability records."""
    return [
        {
            "pattern": "Mozilla/5.0 (*Linux*) Gecko* Firefox/120.0*",
            "properties": {"Browser": "Firefox", "Version": "120.0", "Platform": "Linux"},
        },
        {
            "pattern": "Mozilla/5.0 (*Windows NT 10.0*) *Chrome/119.*",
            "properties": {"Browser": "Chrome", "Version": "119.0", "Platform": "Win10"},
        },
        {
            "pattern": "DefaultProperties",
            "properties": {"Browser": "Default Browser", "Version": "0.0"},
        },
    ]


@pytest.fixture
def static_source(sample_records):
    return StaticSource(sample_records, version=6000031, release_time=1700000000)


@pytest.fixture(autouse=True)
def isolated_default_source(monkeypatch):
    """Keep the process-wide default source out of the environment."""
    monkeypatch.delenv("BROWSCAP_SOURCE", raising=False)
    monkeypatch.delenv("BROWSCAP_DATA_DIR", raising=False)
    monkeypatch.delenv("BROWSCAP_LOG_LEVEL", raising=False)
    reset_default_source()
    yield
    reset_default_source()
