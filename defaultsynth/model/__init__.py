"""Declaration model adapters."""

from .adapter import DeclarationModel
from .memory import InMemoryDeclarationModel
from .snapshot import SnapshotError, build_model, load_snapshot

__all__ = [
    "DeclarationModel",
    "InMemoryDeclarationModel",
    "SnapshotError",
    "build_model",
    "load_snapshot",
]
