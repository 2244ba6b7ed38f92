"""
Thumbnail decision engine.

Rules (locked):
- A priority cue always wins: extract from the cue and overwrite any
  existing thumbnail.
- Without a cue an existing thumbnail is never overwritten or deleted.
- Every track yields exactly one action record.
"""

from pathlib import Path
from typing import Mapping, Optional

from loguru import logger

from cue_thumbs.core.errors import PublishError
from cue_thumbs.core.path_security import is_path_within_root, relative_mirror_path
from cue_thumbs.domain.library.cues import lookup_cue
from cue_thumbs.domain.library.models import CuePoint, Track

from .extractor import FrameExtractor
from .models import ActionKind, Decision, ThumbnailAction
from .publisher import Publisher

DEFAULT_EXTENSION = ".jpg"


def thumbnail_path_for(
    track: Track, output_dir: Path, extension: str = DEFAULT_EXTENSION
) -> Path:
    """Mirror the track's relative directory under ``output_dir``.

    "1960's/Artist - Title.mp4" -> <output_dir>/1960's/Artist - Title.jpg
    """
    relative = relative_mirror_path(track.file_path)
    return output_dir / relative.parent / f"{relative.stem}{extension}"


def decide(has_cue: bool, has_existing: bool) -> Decision:
    """Pure decision table; cue presence is checked first."""
    if has_cue:
        return Decision.EXTRACT
    if has_existing:
        return Decision.SKIP_EXISTING
    return Decision.MISSING_CUE


def _extract_from_cue(
    track: Track,
    cue: CuePoint,
    thumbnail_path: Path,
    has_existing: bool,
    extractor: FrameExtractor,
    publisher: Optional[Publisher],
) -> ThumbnailAction:
    result = extractor.extract_frame(Path(track.source_path), thumbnail_path, cue.start)
    if not result.success:
        logger.warning(f"Extraction failed for {track.file_path}: {result.error}")
        return ThumbnailAction(
            file_path=track.file_path,
            action=ActionKind.FAILED,
            thumbnail_path=thumbnail_path,
            cue_time=cue.start,
            error=result.error or "frame extraction failed",
        )

    if publisher is not None:
        try:
            publisher.publish(thumbnail_path)
        except PublishError as e:
            logger.warning(f"Publish failed for {track.file_path}: {e}")
            return ThumbnailAction(
                file_path=track.file_path,
                action=ActionKind.FAILED,
                thumbnail_path=thumbnail_path,
                cue_time=cue.start,
                error=f"publish failed: {e}",
            )

    kind = ActionKind.OVERWRITTEN_FROM_CUE if has_existing else ActionKind.GENERATED_FROM_CUE
    return ThumbnailAction(
        file_path=track.file_path,
        action=kind,
        thumbnail_path=thumbnail_path,
        cue_time=cue.start,
    )


def process_track(
    track: Track,
    cue_index: Mapping[str, CuePoint],
    thumbnail_root: Path,
    extractor: FrameExtractor,
    publisher: Optional[Publisher] = None,
    extension: str = DEFAULT_EXTENSION,
) -> ThumbnailAction:
    """Classify one track and carry out the resulting action.

    Args:
        track: Catalog entry
        cue_index: Read-only file path -> priority cue mapping
        thumbnail_root: Internal thumbnail store
        extractor: Frame extraction capability
        publisher: Copies successful thumbnails to the public tree
        extension: Thumbnail file extension

    Returns:
        The single action record for this track
    """
    thumbnail_path = thumbnail_path_for(track, thumbnail_root, extension)
    cue = lookup_cue(cue_index, track)

    if not is_path_within_root(thumbnail_path, thumbnail_root):
        return ThumbnailAction(
            file_path=track.file_path,
            action=ActionKind.FAILED,
            thumbnail_path=thumbnail_path,
            cue_time=cue.start if cue else None,
            error="FilePath escapes the thumbnail directory",
        )

    try:
        has_existing = thumbnail_path.exists()
    except OSError as e:
        logger.warning(f"Cannot check {thumbnail_path}: {e}")
        return ThumbnailAction(
            file_path=track.file_path,
            action=ActionKind.FAILED,
            thumbnail_path=thumbnail_path,
            cue_time=cue.start if cue else None,
            error=f"Cannot check existing thumbnail: {e}",
        )

    decision = decide(cue is not None, has_existing)

    if decision is Decision.EXTRACT:
        return _extract_from_cue(
            track, cue, thumbnail_path, has_existing, extractor, publisher
        )

    if decision is Decision.SKIP_EXISTING:
        return ThumbnailAction(
            file_path=track.file_path,
            action=ActionKind.SKIPPED_EXISTING,
            thumbnail_path=thumbnail_path,
        )

    return ThumbnailAction(
        file_path=track.file_path,
        action=ActionKind.MISSING_CUE,
        thumbnail_path=thumbnail_path,
    )
