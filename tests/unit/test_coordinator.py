"""
Unit tests for browscap_cache/parser/coordinator.py

Tests lazy construction and filter/hash propagation using fake handles.
"""
import hashlib
import threading

import pytest

from browscap_cache.errors import ConfigurationError, InvalidInputError, PreconditionError
from browscap_cache.filters import NoneFilter, PropertyFilter
from browscap_cache.parser import Coordinator
from browscap_cache.persist.hashing import compute_fingerprint
from browscap_cache.persist.reader import Reader
from browscap_cache.persist.writer import Writer
from browscap_cache.source import StaticSource, default_source


@pytest.fixture
def coordinator(tmp_path, fake_handles, static_source):
    return Coordinator(
        tmp_path,
        source=static_source,
        reader_factory=fake_handles["reader_factory"],
        writer_factory=fake_handles["writer_factory"],
    )


def test_configure_data_directory(tmp_path):
    coordinator = Coordinator()
    directory = coordinator.configure_data_directory(tmp_path)

    assert directory == tmp_path / "browscap" / "sqlite"
    assert coordinator.data_directory() == directory
    assert directory.is_dir()


def test_missing_base_fails_without_creating(tmp_path):
    base = tmp_path / "nonexistent-root"

    with pytest.raises(ConfigurationError) as exc_info:
        Coordinator(base)

    assert "does not exist" in str(exc_info.value)
    assert not base.exists()


def test_reconfigure_replaces_directory(tmp_path):
    first_base = tmp_path / "a"
    second_base = tmp_path / "b"
    first_base.mkdir()
    second_base.mkdir()

    coordinator = Coordinator(first_base)
    coordinator.configure_data_directory(second_base)

    assert coordinator.data_directory() == second_base / "browscap" / "sqlite"


def test_default_directory_uses_temp_factory(tmp_path):
    coordinator = Coordinator(temp_dir_factory=lambda: str(tmp_path))

    assert coordinator.data_directory() == tmp_path / "browscap" / "sqlite"


def test_default_source_is_used(tmp_path):
    coordinator = Coordinator(tmp_path)
    assert coordinator.source() is default_source()


def test_injected_source_factory(tmp_path):
    source = StaticSource()
    coordinator = Coordinator(tmp_path, source_factory=lambda: source)

    assert coordinator.source() is source
    assert coordinator.source() is source


def test_set_source_rejects_invalid(tmp_path):
    coordinator = Coordinator(tmp_path)
    with pytest.raises(InvalidInputError):
        coordinator.set_source("not a source")


def test_set_property_filter_rejects_invalid(coordinator):
    with pytest.raises(InvalidInputError):
        coordinator.set_property_filter(["Browser", "Version"])


def test_hash_requires_filter(coordinator):
    with pytest.raises(PreconditionError):
        coordinator.data_version_hash()
    with pytest.raises(PreconditionError):
        coordinator.property_filter()


def test_handles_require_filter(coordinator, fake_handles):
    with pytest.raises(PreconditionError):
        coordinator.reader()
    with pytest.raises(PreconditionError):
        coordinator.writer()

    assert fake_handles["readers"] == []
    assert fake_handles["writers"] == []


def test_hash_matches_example(coordinator):
    coordinator.set_property_filter(PropertyFilter(["Browser", "Version"]))
    expected = hashlib.sha1(b"Coordinator|1.0.0|PropertyFilter|Browser,Version").hexdigest()

    assert coordinator.data_version_hash() == expected

    coordinator.set_property_filter(PropertyFilter(["Version", "Browser"]))
    assert coordinator.data_version_hash() == expected


def test_version_bump_changes_hash(tmp_path):
    f = PropertyFilter(["Browser", "Version"])

    class BumpedCoordinator(Coordinator):
        VERSION = "1.0.1"

    current = Coordinator(tmp_path, property_filter=f).data_version_hash()
    bumped = BumpedCoordinator(tmp_path, property_filter=f).data_version_hash()

    assert current != bumped


def test_reader_is_cached(coordinator, fake_handles):
    f = PropertyFilter(["Browser"])
    coordinator.set_property_filter(f)

    first = coordinator.reader()
    second = coordinator.reader()

    assert first is second
    assert len(fake_handles["readers"]) == 1
    assert first.directory == coordinator.data_directory()
    assert first.property_filter is f
    assert first.data_version_hash == coordinator.data_version_hash()


def test_reader_force_new(coordinator, fake_handles):
    coordinator.set_property_filter(PropertyFilter(["Browser"]))
    first = coordinator.reader()

    coordinator.set_property_filter(PropertyFilter(["Version"]))
    fresh = coordinator.reader(force_new=True)

    assert fresh is not first
    assert coordinator.reader() is fresh
    assert fresh.property_filter.get_properties() == ["Version"]
    assert fresh.data_version_hash == coordinator.data_version_hash()


def test_writer_is_created_once(coordinator, fake_handles, static_source):
    coordinator.set_property_filter(PropertyFilter(["Browser"]))

    writer = coordinator.writer()

    assert coordinator.writer() is writer
    assert len(fake_handles["writers"]) == 1
    assert writer.source is static_source
    assert writer.data_version_hash == coordinator.data_version_hash()


def test_filter_change_propagates_to_existing_handles(coordinator):
    f1 = PropertyFilter(["Browser"])
    f2 = PropertyFilter(["Browser", "Platform"])
    coordinator.set_property_filter(f1)
    reader = coordinator.reader()
    writer = coordinator.writer()
    old_hash = coordinator.data_version_hash()

    coordinator.set_property_filter(f2)
    new_hash = coordinator.data_version_hash()

    assert new_hash != old_hash
    for handle in (reader, writer):
        assert handle.property_filter is f2
        assert handle.data_version_hash == new_hash
        # Filter first, then its hash
        assert handle.calls[-2:] == [("filter", f2), ("hash", new_hash)]


def test_filter_without_handles_creates_none(coordinator, fake_handles):
    coordinator.set_property_filter(NoneFilter())

    assert fake_handles["readers"] == []
    assert fake_handles["writers"] == []


def test_set_property_filter_resolves_directory(tmp_path):
    coordinator = Coordinator(temp_dir_factory=lambda: str(tmp_path / "missing"))

    with pytest.raises(ConfigurationError):
        coordinator.set_property_filter(PropertyFilter(["Browser"]))

    with pytest.raises(PreconditionError):
        coordinator.data_version_hash()


def test_default_factories_build_sqlite_handles(tmp_path, static_source):
    coordinator = Coordinator(tmp_path, PropertyFilter(["Browser"]), static_source)

    assert isinstance(coordinator.reader(), Reader)
    assert isinstance(coordinator.writer(), Writer)
    assert coordinator.writer().directory == coordinator.data_directory()


def test_concurrent_filter_changes_keep_pairs_consistent(coordinator):
    filters = [PropertyFilter([f"Prop{i}"]) for i in range(20)]
    coordinator.set_property_filter(filters[0])
    reader = coordinator.reader()
    writer = coordinator.writer()
    errors = []

    def worker(f):
        try:
            for _ in range(20):
                coordinator.set_property_filter(f)
                coordinator.reader(force_new=True)
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(f,)) for f in filters]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    for handle in (coordinator.reader(), writer):
        assert handle.data_version_hash == compute_fingerprint(
            Coordinator, handle.property_filter
        )
    assert reader.data_version_hash == compute_fingerprint(Coordinator, reader.property_filter)


def test_from_settings(tmp_path):
    from browscap_cache.config import Settings

    coordinator = Coordinator.from_settings(Settings(data_dir=str(tmp_path)))

    assert coordinator.data_directory() == tmp_path / "browscap" / "sqlite"
    assert isinstance(coordinator.source(), StaticSource)


def test_from_settings_source_path_wins_over_cached_default(tmp_path, sample_records):
    """An explicit source path is honoured even after the default was built."""
    import json

    from browscap_cache.config import Settings
    from browscap_cache.source import JsonLinesSource

    path = tmp_path / "browscap.jsonl"
    path.write_text(
        "\n".join(json.dumps(r) for r in sample_records) + "\n",
        encoding="utf-8",
    )
    assert isinstance(default_source(), StaticSource)

    coordinator = Coordinator.from_settings(
        Settings(data_dir=str(tmp_path), source_path=str(path))
    )

    source = coordinator.source()
    assert isinstance(source, JsonLinesSource)
    assert source.path == path
    assert len(list(source.iter_records())) == len(sample_records)
