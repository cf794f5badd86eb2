"""
Cache coordinator.

Owns the data directory, the property filter and its data version hash,
and the lazily created source, reader and writer. Whenever the filter
changes, the new filter and hash are pushed into the reader and writer so
neither can serve or write data for a mismatched configuration.
"""

import logging
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable, Optional, Union

from ..config.settings import Settings
from ..errors import PreconditionError
from ..filters.property_filter import ActiveFilter, PropertyFilterLike, ensure_property_filter
from ..persist.hashing import FORMAT_VERSION, compute_fingerprint
from ..persist.paths import DirectoryProvisioner
from ..persist.reader import Reader
from ..persist.writer import Writer
from ..source.sources import JsonLinesSource, SourceLike, default_source, ensure_source

logger = logging.getLogger(__name__)


class Coordinator:
    """
    Lifecycle and cache-coherence coordinator.

    The reader can be recreated on demand; the writer is created once and
    kept for the lifetime of the coordinator.

    Usage:
        >>> coordinator = Coordinator("/var/cache")
        >>> coordinator.set_property_filter(PropertyFilter(["Browser", "Version"]))
        >>> if coordinator.reader().is_update_required():
        ...     coordinator.writer().generate()
    """

    # Version saved in the generated data, see persist.hashing
    VERSION = FORMAT_VERSION

    def __init__(
        self,
        data_dir: Optional[Union[str, Path]] = None,
        property_filter: Optional[PropertyFilterLike] = None,
        source: Optional[SourceLike] = None,
        *,
        provisioner: Optional[DirectoryProvisioner] = None,
        source_factory: Callable[[], SourceLike] = default_source,
        temp_dir_factory: Callable[[], str] = tempfile.gettempdir,
        reader_factory: Callable[[Path], Any] = Reader,
        writer_factory: Callable[[Path, SourceLike], Any] = Writer,
    ):
        """
        Initialize the coordinator.

        Args:
            data_dir: Base directory (the cache lives in <data_dir>/browscap/sqlite)
            property_filter: Initial property filter
            source: Capability source for the writer
            provisioner: Directory provisioner
            source_factory: Returns the source when none was set
            temp_dir_factory: Returns the base directory when none was configured
            reader_factory: Builds a reader from a directory
            writer_factory: Builds a writer from a directory and a source

        Raises:
            ConfigurationError: If data_dir cannot be used
        """
        self._lock = threading.RLock()

        self._provisioner = provisioner or DirectoryProvisioner()
        self._source_factory = source_factory
        self._temp_dir_factory = temp_dir_factory
        self._reader_factory = reader_factory
        self._writer_factory = writer_factory

        self._data_directory: Optional[Path] = None
        self._source: Optional[SourceLike] = None
        self._active: Optional[ActiveFilter] = None
        self._reader = None
        self._writer = None

        if data_dir is not None:
            self.configure_data_directory(data_dir)
        if source is not None:
            self.set_source(source)
        if property_filter is not None:
            self.set_property_filter(property_filter)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **kwargs) -> "Coordinator":
        """
        Create a coordinator from Settings (environment when omitted).

        A configured source_path always gets its own JsonLinesSource; the
        process-wide default source is only used when none is set.
        """
        settings = settings or Settings.from_env()
        if settings.source_path:
            source_path = settings.source_path
            kwargs.setdefault("source_factory", lambda: JsonLinesSource(source_path))
        return cls(settings.data_dir, **kwargs)

    # Data directory

    def configure_data_directory(self, base: Union[str, Path]) -> Path:
        """
        Resolve and set the cache directory below base.

        Raises:
            ConfigurationError: If base is missing or the cache directory
                cannot be created, read or written
        """
        directory = self._provisioner.resolve(base)

        with self._lock:
            if self._writer is not None and directory != self._data_directory:
                logger.warning(
                    "Data directory changed to %s; the existing writer keeps %s",
                    directory,
                    self._data_directory,
                )
            self._data_directory = directory

        logger.debug("Data directory set to %s", directory)
        return directory

    def data_directory(self) -> Path:
        """Resolved cache directory, below the temp dir if never configured."""
        with self._lock:
            if self._data_directory is None:
                self.configure_data_directory(self._temp_dir_factory())
            return self._data_directory

    # Source

    def source(self) -> SourceLike:
        with self._lock:
            if self._source is None:
                self.set_source(self._source_factory())
            return self._source

    def set_source(self, source: SourceLike) -> None:
        """
        Raises:
            InvalidInputError: If source has no iter_records
        """
        ensure_source(source)
        with self._lock:
            self._source = source

    # Property filter

    def set_property_filter(self, property_filter: PropertyFilterLike) -> None:
        """
        Set the property filter and propagate it with its new hash.

        Raises:
            InvalidInputError: If the filter has no get_properties
            ConfigurationError: If the data directory cannot be resolved
        """
        ensure_property_filter(property_filter)

        with self._lock:
            self.data_directory()

            active = ActiveFilter(
                property_filter=property_filter,
                data_version_hash=compute_fingerprint(self, property_filter, self.VERSION),
            )
            self._active = active
            logger.debug("Data version hash is now %s", active.data_version_hash)

            if self._reader is not None:
                active.apply_to(self._reader)
            if self._writer is not None:
                active.apply_to(self._writer)

    def _require_active(self) -> ActiveFilter:
        if self._active is None:
            raise PreconditionError("No property filter has been set.")
        return self._active

    def property_filter(self) -> PropertyFilterLike:
        with self._lock:
            return self._require_active().property_filter

    def data_version_hash(self) -> str:
        """
        Hash of the current filter and format version.

        Raises:
            PreconditionError: If no property filter has been set
        """
        with self._lock:
            return self._require_active().data_version_hash

    # Reader / writer

    def reader(self, force_new: bool = False):
        """
        Cached reader, created on first use or when force_new is set.

        Raises:
            PreconditionError: If no property filter has been set
        """
        with self._lock:
            if force_new or self._reader is None:
                active = self._require_active()
                reader = self._reader_factory(self.data_directory())
                active.apply_to(reader)
                self._reader = reader
                logger.debug("Created reader for %s", self._data_directory)
            return self._reader

    def writer(self):
        """
        Cached writer, created on first use and never replaced.

        Raises:
            PreconditionError: If no property filter has been set
        """
        with self._lock:
            if self._writer is None:
                active = self._require_active()
                writer = self._writer_factory(self.data_directory(), self.source())
                active.apply_to(writer)
                self._writer = writer
                logger.debug("Created writer for %s", self._data_directory)
            return self._writer
