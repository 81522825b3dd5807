"""
Backend module for incbundler.

This module provides the two halves of incremental bundling:
- Module resolution (specifier to file, suffix fallback)
- Store handling (lazy loading, idle eviction)
"""

from .resolver import resolve
from .cache import IdleEviction, NoEviction, StoreHandle, StoreState

__all__ = ["resolve", "IdleEviction", "NoEviction", "StoreHandle", "StoreState"]
