"""
Reader side of the SQLite storage engine.

A dataset counts as present only if its stored data version hash matches
the hash the reader was given; stale datasets are treated as absent.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Optional, Union

from ..errors import PreconditionError
from ..filters.property_filter import PropertyFilterLike
from .sqlite_store import CapabilityStore, read_link

logger = logging.getLogger(__name__)


class Reader:
    """Read access to the current generated dataset."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)
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

    def current_database(self) -> Optional[Path]:
        """Dataset named by the link file, None if missing on disk."""
        db_path = read_link(self.directory)
        if db_path is None or not db_path.is_file():
            return None
        return db_path

    def is_update_required(self) -> bool:
        """
        Check whether the dataset has to be (re)generated.

        Returns:
            True if no dataset exists, it cannot be read, or it was
            generated for another data version hash

        Raises:
            PreconditionError: If no data version hash has been set
        """
        if self._data_version_hash is None:
            raise PreconditionError("Reader has no data version hash.")

        db_path = self.current_database()
        if db_path is None:
            return True

        try:
            with CapabilityStore(db_path, read_only=True) as store:
                stored = store.get_meta("data_version_hash")
        except sqlite3.DatabaseError as e:
            # A corrupt dataset counts as missing
            logger.debug("Dataset %s is unreadable: %s", db_path, e)
            return True

        if stored != self._data_version_hash:
            logger.debug("Dataset %s is stale (hash %s)", db_path, stored)
            return True

        return False

    def _open_current(self) -> CapabilityStore:
        if self.is_update_required():
            raise PreconditionError(
                f"No valid dataset in '{self.directory}'; generate one first."
            )
        return CapabilityStore(self.current_database(), read_only=True)

    def get_version(self) -> int:
        """Source version of the current dataset."""
        with self._open_current() as store:
            return int(store.get_meta("source_version") or 0)

    def get_release_time(self) -> int:
        """Source release time (unix seconds) of the current dataset."""
        with self._open_current() as store:
            return int(store.get_meta("release_time") or 0)

    def count(self) -> int:
        """Number of records in the current dataset."""
        with self._open_current() as store:
            return store.count()
