"""Snapshot domain - locating the frozen, read-only pipeline inputs."""

from .locator import (
    CATALOG_NAME,
    CUE_DATABASE_NAME,
    SnapshotPaths,
    ensure_snapshots_link,
    resolve_snapshot,
)

__all__ = [
    "CATALOG_NAME",
    "CUE_DATABASE_NAME",
    "SnapshotPaths",
    "ensure_snapshots_link",
    "resolve_snapshot",
]
