"""Property filters that select which capability fields are cached."""

from .property_filter import (
    ActiveFilter,
    DisallowedPropertyFilter,
    NoneFilter,
    PropertyFilter,
    PropertyFilterLike,
    ensure_property_filter,
)

__all__ = [
    "ActiveFilter",
    "DisallowedPropertyFilter",
    "NoneFilter",
    "PropertyFilter",
    "PropertyFilterLike",
    "ensure_property_filter",
]
