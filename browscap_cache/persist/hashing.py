"""
Data version hashing.

The data version hash is the cache-validity token shared by the reader and
writer. It covers everything that changes the meaning of cached data: the
owning coordinator type, the storage format version and the property
filter (type and property set).
"""

import hashlib
from typing import Any

from ..filters.property_filter import PropertyFilterLike

# Version saved in generated data. Bump it whenever the on-disk layout or
# its semantics change; every previously generated dataset becomes stale.
FORMAT_VERSION = "1.0.0"


def _type_name(obj: Any) -> str:
    return obj.__name__ if isinstance(obj, type) else type(obj).__name__


def compute_fingerprint(
    owner: Any,
    property_filter: PropertyFilterLike,
    version: str = FORMAT_VERSION,
) -> str:
    """
    Compute the data version hash for a filter.

    Args:
        owner: Coordinator instance or class the data belongs to
        property_filter: Active property filter
        version: Storage format version

    Returns:
        40-character hex string (sha1)

    Examples:
        >>> compute_fingerprint(Coordinator, PropertyFilter(["Browser", "Version"]))
        >>> compute_fingerprint(Coordinator, PropertyFilter(["Version", "Browser"]))  # Same hash
    """
    # Property order must not influence the hash
    properties = sorted(property_filter.get_properties())

    payload = "|".join([
        _type_name(owner),
        version,
        _type_name(property_filter),
        ",".join(properties),
    ])
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()
