"""Resolver adapters - Domain-liveness lookups."""

from .dnspython import DnsPythonResolver

__all__ = ["DnsPythonResolver"]
