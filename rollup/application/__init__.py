"""Application services."""

from .snapshots import SnapshotService, get_snapshot_service, reset_snapshot_state

__all__ = [
    "SnapshotService",
    "get_snapshot_service",
    "reset_snapshot_state",
]
