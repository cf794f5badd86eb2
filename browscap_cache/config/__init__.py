"""Configuration for the browscap cache."""

from .settings import Settings

__all__ = ["Settings"]
