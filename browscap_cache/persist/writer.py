"""
Writer side of the SQLite storage engine.

Generates a new dataset from the source, filtered by the active property
filter and stamped with the data version hash, then switches the link
file over to it.
"""

import json
import logging
import time
from pathlib import Path
from typing import Any, Optional, Union

from ..errors import PreconditionError
from ..filters.property_filter import PropertyFilterLike
from ..source.sources import SourceLike
from .sqlite_store import CapabilityStore, read_link, remove_dataset, write_link

logger = logging.getLogger(__name__)


def apply_filter(property_filter: PropertyFilterLike, properties: dict[str, Any]) -> dict[str, Any]:
    """Restrict properties to what the filter allows."""
    if hasattr(property_filter, "filter"):
        return property_filter.filter(properties)

    # Plain allow-list; an empty list keeps everything
    allowed = set(property_filter.get_properties())
    if not allowed:
        return dict(properties)
    return {k: v for k, v in properties.items() if k in allowed}


class Writer:
    """Builds datasets in the cache directory."""

    def __init__(self, directory: Union[str, Path], source: SourceLike):
        self.directory = Path(directory)
        self.source = source
        self._property_filter: Optional[PropertyFilterLike] = None
        self._data_version_hash: Optional[str] = None

    def set_property_filter(self, property_filter: PropertyFilterLike) -> None:
        self._property_filter = property_filter

    def get_property_filter(self) -> Optional[PropertyFilterLike]:
        return self._property_filter

    def set_data_version_hash(self, data_version_hash: str) -> None:
        self._data_version_hash = data_version_hash

    def get_data_version_hash(self) -> Optional[str]:
        return self._data_version_hash

    def _source_meta(self, name: str) -> int:
        getter = getattr(self.source, name, None)
        return int(getter()) if callable(getter) else 0

    def generate(self) -> Path:
        """
        Generate a new dataset and make it current.

        Returns:
            Path of the generated SQLite file

        Raises:
            PreconditionError: If filter or data version hash are missing
        """
        if self._property_filter is None or self._data_version_hash is None:
            raise PreconditionError(
                "Writer needs a property filter and data version hash before generating."
            )

        property_filter = self._property_filter
        data_version_hash = self._data_version_hash

        filename = f"browscap_{data_version_hash[:12]}_{time.time_ns()}.sqlite"
        db_path = self.directory / filename
        previous = read_link(self.directory)

        rows = (
            (
                record.pattern,
                json.dumps(
                    apply_filter(property_filter, record.properties),
                    sort_keys=True,
                    ensure_ascii=False,
                ).encode("utf-8"),
            )
            for record in self.source.iter_records()
        )

        try:
            with CapabilityStore(db_path) as store:
                count = store.put_records(rows)
                store.set_meta("data_version_hash", data_version_hash)
                store.set_meta("source_version", self._source_meta("get_version"))
                store.set_meta("release_time", self._source_meta("get_release_time"))
                store.set_meta("generated_at", int(time.time()))
                store.seal()
        except Exception:
            # Never leave a half-written dataset behind
            remove_dataset(db_path)
            raise

        write_link(self.directory, filename)

        if previous is not None and previous != db_path:
            remove_dataset(previous)

        logger.info("Generated %s with %d records", db_path, count)
        return db_path
