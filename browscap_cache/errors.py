"""
Exception hierarchy for the browscap cache.

All errors are raised to the immediate caller; nothing in this package
catches and retries them.
"""

from typing import Optional


class BrowscapCacheError(Exception):
    """Base class for all browscap cache errors."""

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.code = code


class ConfigurationError(BrowscapCacheError):
    """
    The data directory (or another configured resource) cannot be used.

    Attributes:
        directory: Directory the failing check ran against
        requirement: Which check failed ("exists", "create", "readable",
            "writable", or "source")
    """

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        directory: Optional[str] = None,
        requirement: Optional[str] = None,
    ):
        super().__init__(message, code)
        self.directory = directory
        self.requirement = requirement


class PreconditionError(BrowscapCacheError):
    """An operation was invoked before its prerequisite was satisfied."""


class InvalidInputError(BrowscapCacheError):
    """A source or filter object without the required capabilities."""
