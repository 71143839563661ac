"""Adapters — tool bindings for external side effects.

Public re-exports for convenient access.
"""

from lazyomz.adapters.base import Adapter, ExecutionContext
from lazyomz.adapters.mock import MockAdapter
from lazyomz.adapters.registry import AdapterRegistry

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "ExecutionContext",
    "MockAdapter",
]
