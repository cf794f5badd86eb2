"""
Property filters and the active-filter value object.

A filter enumerates capability property names. Two filters are
interchangeable for caching only when their type and property set match,
which is what the data version hash encodes.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Protocol, runtime_checkable

from ..errors import InvalidInputError


@runtime_checkable
class PropertyFilterLike(Protocol):
    """Anything that reports the property names it filters on."""

    def get_properties(self) -> Iterable[str]:
        ...


class PropertyFilter:
    """
    Keep only the listed properties.

    Names are de-duplicated; insertion order is kept, but the order has no
    influence on the data version hash.

    Usage:
        >>> f = PropertyFilter(["Browser", "Version"])
        >>> f.filter({"Browser": "Firefox", "Platform": "Linux"})
        {'Browser': 'Firefox'}
    """

    def __init__(self, properties: Iterable[str] = ()):
        self._properties: list[str] = []
        for name in properties:
            self.add_property(name)

    def add_property(self, name: str) -> None:
        """Add a property name (no-op if already present)."""
        if not isinstance(name, str) or not name:
            raise InvalidInputError(f"Invalid property name: {name!r}")
        if name not in self._properties:
            self._properties.append(name)

    def remove_property(self, name: str) -> None:
        """Remove a property name if present."""
        if name in self._properties:
            self._properties.remove(name)

    def has_property(self, name: str) -> bool:
        return name in self._properties

    def get_properties(self) -> list[str]:
        return list(self._properties)

    def is_property_allowed(self, name: str) -> bool:
        return self.has_property(name)

    def filter(self, record: dict[str, Any]) -> dict[str, Any]:
        """Return a copy of record restricted to allowed properties."""
        return {k: v for k, v in record.items() if self.is_property_allowed(k)}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._properties!r})"


class DisallowedPropertyFilter(PropertyFilter):
    """Drop the listed properties and keep everything else."""

    def is_property_allowed(self, name: str) -> bool:
        return not self.has_property(name)


class NoneFilter(PropertyFilter):
    """Filter with no properties; every property is kept."""

    def __init__(self):
        super().__init__()

    def add_property(self, name: str) -> None:
        raise InvalidInputError("NoneFilter does not accept properties")

    def is_property_allowed(self, name: str) -> bool:
        return True


def ensure_property_filter(obj: Any) -> PropertyFilterLike:
    """Raise InvalidInputError unless obj satisfies the filter contract."""
    if not isinstance(obj, PropertyFilterLike):
        raise InvalidInputError(
            f"{type(obj).__name__} is not a property filter (missing get_properties)"
        )
    return obj


@dataclass(frozen=True)
class ActiveFilter:
    """
    A property filter paired with the data version hash computed for it.

    The pair is replaced as a whole whenever the filter changes, so a
    sink never sees a new filter with an old hash or the reverse.
    """

    property_filter: PropertyFilterLike
    data_version_hash: str

    def apply_to(self, sink: Any) -> None:
        """Push the filter and its hash into a reader or writer."""
        sink.set_property_filter(self.property_filter)
        sink.set_data_version_hash(self.data_version_hash)
