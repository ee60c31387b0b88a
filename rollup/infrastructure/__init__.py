"""Infrastructure layer exports."""

from .snapshots import InMemorySnapshotRepository, SnapshotRepository

__all__ = [
    "InMemorySnapshotRepository",
    "SnapshotRepository",
]
