"""Snapshot persistence."""

from .json_store import JsonSnapshotStore

__all__ = ["JsonSnapshotStore"]
