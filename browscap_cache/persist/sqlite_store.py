"""
SQLite-backed capability store.

Each generated dataset is one SQLite file with two tables:
- meta: data version hash, source version, release time, generation time
- records: user agent pattern → filtered properties (JSON BLOB)

A link file in the cache directory names the current dataset, so a new
dataset can be generated next to the old one and switched in atomically.
"""

import os
import sqlite3
import time
from pathlib import Path
from typing import Iterable, Optional

LINK_FILENAME = "browscap.link"


class CapabilityStore:
    """
    File-backed SQLite store for one generated dataset.

    Written in WAL mode, sealed to a rollback journal when complete.
    """

    def __init__(self, db_path: Path, read_only: bool = False):
        """
        Open (or create) the dataset at the given path.

        Args:
            db_path: Path to SQLite database file
            read_only: Open an existing dataset without writing to it
        """
        self.db_path = Path(db_path)
        self.read_only = read_only

        if read_only:
            self._conn = sqlite3.connect(
                f"{self.db_path.resolve().as_uri()}?mode=ro",
                uri=True,
                check_same_thread=False,
                timeout=10.0,
            )
            return

        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._conn = sqlite3.connect(
            str(self.db_path),
            check_same_thread=False,  # Allow multi-threaded access
            timeout=10.0,
        )

        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA synchronous=NORMAL")

        self._init_tables()

    def seal(self) -> None:
        """
        Leave WAL mode once the dataset is complete.

        Read-only connections cannot open a WAL database whose side files
        are gone, so finished datasets use a rollback journal.
        """
        self._conn.execute("PRAGMA journal_mode=DELETE")

    def _init_tables(self) -> None:
        """Create tables if they don't exist."""
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS meta (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
        """)
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS records (
                pattern TEXT PRIMARY KEY,
                value BLOB NOT NULL,
                ts INTEGER NOT NULL
            )
        """)
        self._conn.commit()

    def set_meta(self, key: str, value: str) -> None:
        self._conn.execute(
            "INSERT OR REPLACE INTO meta (key, value) VALUES (?, ?)",
            (key, str(value)),
        )
        self._conn.commit()

    def get_meta(self, key: str) -> Optional[str]:
        cursor = self._conn.execute("SELECT value FROM meta WHERE key = ?", (key,))
        row = cursor.fetchone()
        return row[0] if row else None

    def put_records(self, rows: Iterable[tuple[str, bytes]]) -> int:
        """
        Insert (pattern, value) rows in a single transaction.

        Returns:
            Number of rows written
        """
        ts = int(time.time())
        count = 0

        with self._conn:
            for pattern, value in rows:
                self._conn.execute(
                    "INSERT OR REPLACE INTO records (pattern, value, ts) VALUES (?, ?, ?)",
                    (pattern, value, ts),
                )
                count += 1

        return count

    def count(self) -> int:
        cursor = self._conn.execute("SELECT COUNT(*) FROM records")
        return cursor.fetchone()[0]

    def close(self) -> None:
        """Close database connection."""
        self._conn.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def read_link(directory: Path) -> Optional[Path]:
    """
    Return the dataset named by the link file, if any.

    Args:
        directory: Cache directory

    Returns:
        Path of the current dataset, or None if there is no link file
    """
    link_path = Path(directory) / LINK_FILENAME
    if not link_path.is_file():
        return None

    filename = link_path.read_text(encoding="utf-8").strip()
    if not filename:
        return None

    return Path(directory) / filename


def write_link(directory: Path, filename: str) -> None:
    """Atomically point the link file at filename."""
    link_path = Path(directory) / LINK_FILENAME
    tmp_path = link_path.with_name(f"{LINK_FILENAME}.{os.getpid()}.tmp")

    tmp_path.write_text(filename, encoding="utf-8")
    os.replace(tmp_path, link_path)


def remove_dataset(db_path: Path) -> None:
    """Delete a dataset file along with its WAL side files."""
    for suffix in ("", "-wal", "-shm"):
        Path(f"{db_path}{suffix}").unlink(missing_ok=True)
