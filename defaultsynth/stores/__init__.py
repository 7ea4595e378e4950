"""Persistent stores used by incremental passes."""

from .unit_cache import UnitCache

__all__ = ["UnitCache"]
