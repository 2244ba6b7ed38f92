"""
Publishing generated thumbnails into the public mirror tree.
"""

import os
import shutil
from pathlib import Path

from loguru import logger

from cue_thumbs.core.errors import OutputRootError, PublishError


def ensure_output_roots(*roots: Path) -> None:
    """Create output roots and confirm they are writable.

    Raises:
        OutputRootError: If any root cannot be created or written to
    """
    for root in roots:
        try:
            root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputRootError(f"Cannot create output directory {root}: {e}") from e
        if not os.access(root, os.W_OK | os.X_OK):
            raise OutputRootError(f"Output directory is not writable: {root}")


class Publisher:
    """Copy thumbnails from the internal store to the public tree.

    Relative paths under ``source_root`` are preserved under ``public_root``.
    """

    def __init__(self, source_root: Path, public_root: Path):
        self.source_root = source_root
        self.public_root = public_root

    def public_path_for(self, thumbnail_path: Path) -> Path:
        try:
            relative = thumbnail_path.relative_to(self.source_root)
        except ValueError as e:
            raise PublishError(
                f"{thumbnail_path} is outside the thumbnail root {self.source_root}"
            ) from e
        return self.public_root / relative

    def publish(self, thumbnail_path: Path) -> Path:
        """Copy one thumbnail and return its public path.

        Raises:
            PublishError: If the copy fails
        """
        public_path = self.public_path_for(thumbnail_path)
        try:
            public_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(thumbnail_path, public_path)
        except OSError as e:
            raise PublishError(f"Cannot copy {thumbnail_path} to {public_path}: {e}") from e

        logger.debug(f"Published {public_path}")
        return public_path
