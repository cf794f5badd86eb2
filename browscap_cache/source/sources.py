"""
Capability sources.

A source yields already-parsed capability records; decoding the upstream
browscap INI format is out of scope here. Sources only feed the writer.
"""

import json
import threading
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional, Protocol, Union, runtime_checkable

from pydantic import BaseModel, Field, ValidationError

from ..config.settings import Settings
from ..errors import ConfigurationError, InvalidInputError


class CapabilityRecord(BaseModel):
    """One user-agent pattern with its capability properties."""

    pattern: str = Field(..., description="User agent pattern")
    properties: dict[str, Any] = Field(default_factory=dict, description="Capability properties")


@runtime_checkable
class SourceLike(Protocol):
    """Contract the writer relies on."""

    def iter_records(self) -> Iterator[CapabilityRecord]:
        ...


class StaticSource:
    """In-memory source, mostly useful for tests and embedding."""

    def __init__(
        self,
        records: Iterable[Union[CapabilityRecord, dict]] = (),
        version: int = 0,
        release_time: int = 0,
    ):
        self._records = [
            r if isinstance(r, CapabilityRecord) else CapabilityRecord(**r)
            for r in records
        ]
        self.version = version
        self.release_time = release_time

    def iter_records(self) -> Iterator[CapabilityRecord]:
        return iter(self._records)

    def get_version(self) -> int:
        return self.version

    def get_release_time(self) -> int:
        return self.release_time


class JsonLinesSource:
    """
    Source backed by a JSONL file.

    Format:
        {"version": 6000031, "release_time": 1700000000}     (optional header)
        {"pattern": "Mozilla/5.0 *Firefox/*", "properties": {...}}
        ...
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        if not self.path.is_file():
            raise ConfigurationError(
                f"Source file '{self.path}' does not exist.",
                directory=str(self.path.parent),
                requirement="source",
            )
        self._header: Optional[dict] = None

    def _iter_lines(self) -> Iterator[tuple[int, dict]]:
        """Yield (line number, decoded object) for non-empty lines."""
        with open(self.path, "r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue

                try:
                    data = json.loads(line)
                except json.JSONDecodeError as e:
                    raise InvalidInputError(
                        f"Invalid JSON on line {lineno} of {self.path}: {e}"
                    ) from e

                if not isinstance(data, dict):
                    raise InvalidInputError(
                        f"Expected an object on line {lineno} of {self.path}"
                    )
                yield lineno, data

    def _read_header(self) -> dict:
        if self._header is None:
            self._header = {}
            for _, data in self._iter_lines():
                # Only the first line can be a header
                if "pattern" not in data:
                    self._header = data
                break
        return self._header

    def iter_records(self) -> Iterator[CapabilityRecord]:
        first = True
        for lineno, data in self._iter_lines():
            if first and "pattern" not in data:
                first = False
                continue
            first = False

            if "pattern" not in data:
                raise InvalidInputError(
                    f"Record on line {lineno} of {self.path} has no pattern"
                )

            try:
                yield CapabilityRecord(**data)
            except ValidationError as e:
                raise InvalidInputError(
                    f"Invalid record on line {lineno} of {self.path}: {e}"
                ) from e

    def get_version(self) -> int:
        return int(self._read_header().get("version", 0))

    def get_release_time(self) -> int:
        return int(self._read_header().get("release_time", 0))


def ensure_source(obj: Any) -> SourceLike:
    """Raise InvalidInputError unless obj satisfies the source contract."""
    if not isinstance(obj, SourceLike):
        raise InvalidInputError(
            f"{type(obj).__name__} is not a capability source (missing iter_records)"
        )
    return obj


_default_source: Optional[SourceLike] = None
_default_lock = threading.Lock()


def default_source(settings: Optional[Settings] = None) -> SourceLike:
    """
    Return the process-wide default source.

    A JsonLinesSource when a source path is configured (BROWSCAP_SOURCE),
    otherwise an empty StaticSource. Created once and then reused.
    """
    global _default_source

    with _default_lock:
        if _default_source is None:
            settings = settings or Settings.from_env()
            if settings.source_path:
                _default_source = JsonLinesSource(settings.source_path)
            else:
                _default_source = StaticSource()
        return _default_source


def reset_default_source() -> None:
    """Forget the cached default source."""
    global _default_source

    with _default_lock:
        _default_source = None
