"""Capability data sources consumed by the writer."""

from .sources import (
    CapabilityRecord,
    JsonLinesSource,
    SourceLike,
    StaticSource,
    default_source,
    ensure_source,
    reset_default_source,
)

__all__ = [
    "CapabilityRecord",
    "JsonLinesSource",
    "SourceLike",
    "StaticSource",
    "default_source",
    "ensure_source",
    "reset_default_source",
]
