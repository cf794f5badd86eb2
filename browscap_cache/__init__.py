"""
Browscap capability cache.

Keeps a locally generated capability dataset in sync with the property
filter and storage format it was built for.
"""

from .errors import BrowscapCacheError, ConfigurationError, InvalidInputError, PreconditionError
from .filters import DisallowedPropertyFilter, NoneFilter, PropertyFilter
from .parser import Coordinator
from .source import CapabilityRecord, JsonLinesSource, StaticSource, default_source

__all__ = [
    "BrowscapCacheError",
    "ConfigurationError",
    "InvalidInputError",
    "PreconditionError",
    "DisallowedPropertyFilter",
    "NoneFilter",
    "PropertyFilter",
    "Coordinator",
    "CapabilityRecord",
    "JsonLinesSource",
    "StaticSource",
    "default_source",
]
