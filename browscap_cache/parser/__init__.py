"""Cache coordinator wiring directory, filter, source, reader and writer."""

from .coordinator import Coordinator

__all__ = ["Coordinator"]
