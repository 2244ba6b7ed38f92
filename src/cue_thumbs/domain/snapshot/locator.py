"""
Snapshot location and verification.

The pipeline reads only from ``<snapshots>/latest/``, a frozen copy of the
VirtualDJ data owned by the data repository. Live library files are never
read, and VirtualDJ is assumed closed while the snapshot is frozen.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from cue_thumbs.core.config import PathsConfig
from cue_thumbs.core.errors import SnapshotLinkError, SnapshotMissingError

LATEST_DIR = "latest"
CUE_DATABASE_NAME = "database.xml"
CATALOG_NAME = "VideoFiles.json"

FREEZE_HINT = (
    "Required snapshot files missing. Please run Phase 1 (Freeze) first:\n"
    "  cd {data_repo}\n"
    "  node scripts/snapshot-freeze.js"
)


@dataclass(frozen=True)
class SnapshotPaths:
    """Verified locations of the two snapshot inputs."""

    root: Path
    cue_database: Path
    catalog: Path


def resolve_snapshot(paths: PathsConfig) -> SnapshotPaths:
    """Verify that both snapshot documents exist before any processing.

    Raises:
        SnapshotMissingError: Naming the first missing file and the freeze step
    """
    latest = paths.snapshots_path / LATEST_DIR
    cue_database = latest / CUE_DATABASE_NAME
    catalog = latest / CATALOG_NAME
    hint = FREEZE_HINT.format(data_repo=paths.data_repo)

    for name, path in ((CUE_DATABASE_NAME, cue_database), (CATALOG_NAME, catalog)):
        if not path.is_file():
            raise SnapshotMissingError(name, path, hint)

    logger.debug(f"Snapshot verified at {latest}")
    return SnapshotPaths(root=latest, cue_database=cue_database, catalog=catalog)


def ensure_snapshots_link(paths: PathsConfig) -> Path:
    """Make sure the design root's snapshots directory points at the data repo.

    Creates ``<design_root>/snapshots -> <data_repo>/snapshots`` when the
    former is absent. An existing symlink or real directory is left alone.

    Returns:
        The snapshots directory path

    Raises:
        SnapshotLinkError: If the data repository has no snapshots directory
            or the link cannot be created
    """
    snapshots_dir = paths.snapshots_path
    target = Path(paths.data_repo).expanduser() / "snapshots"

    if snapshots_dir.is_symlink():
        logger.info(f"Symlink exists: {snapshots_dir} -> {os.readlink(snapshots_dir)}")
        return snapshots_dir

    if snapshots_dir.exists():
        logger.warning(
            f"{snapshots_dir} is a regular directory, not a symlink to {target}; using it as-is"
        )
        return snapshots_dir

    if not target.is_dir():
        raise SnapshotLinkError(
            f"Data repository snapshots directory not found: {target}\n"
            "Please ensure the data repository exists and "
            "RETROVERSE_DATA_REPO is set correctly "
            f"(current: {paths.data_repo})"
        )

    try:
        snapshots_dir.parent.mkdir(parents=True, exist_ok=True)
        snapshots_dir.symlink_to(target, target_is_directory=True)
    except OSError as e:
        raise SnapshotLinkError(f"Error creating symlink {snapshots_dir}: {e}") from e

    logger.info(f"Created symlink: {snapshots_dir} -> {target}")
    return snapshots_dir
