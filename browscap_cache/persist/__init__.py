"""
Persistence layer for the browscap cache.

Provides:
- Data directory provisioning
- Data version hashing
- SQLite-backed dataset storage with reader and writer handles
"""

from .hashing import FORMAT_VERSION, compute_fingerprint
from .paths import SUB_DIRECTORY, DirectoryProvisioner, normalize_directory
from .sqlite_store import LINK_FILENAME, CapabilityStore, read_link, write_link
from .reader import Reader
from .writer import Writer

__all__ = [
    "FORMAT_VERSION",
    "compute_fingerprint",
    "SUB_DIRECTORY",
    "DirectoryProvisioner",
    "normalize_directory",
    "LINK_FILENAME",
    "CapabilityStore",
    "read_link",
    "write_link",
    "Reader",
    "Writer",
]
