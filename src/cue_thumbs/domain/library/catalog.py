"""
Track catalog loading from the VideoFiles.json snapshot.

The catalog is read once per run; its order drives report order.
"""

import json
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from cue_thumbs.core.errors import CatalogError

from .models import Track


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def track_from_entry(entry: dict, position: int) -> Track:
    """Convert one catalog entry into a Track.

    Args:
        entry: Raw JSON object with VirtualDJ export keys (FilePath, SourcePath, ...)
        position: Index in the catalog, used for error messages

    Raises:
        CatalogError: If the entry is not an object or has no FilePath
    """
    if not isinstance(entry, dict):
        raise CatalogError(f"Catalog entry #{position} is not an object")

    file_path = entry.get("FilePath")
    if not file_path or not isinstance(file_path, str):
        raise CatalogError(f"Catalog entry #{position} has no FilePath")

    source_path = entry.get("SourcePath") or ""

    return Track(
        file_path=file_path,
        source_path=str(source_path),
        title=str(entry.get("Title") or ""),
        artist=str(entry.get("Artist") or ""),
        genre=_optional_str(entry.get("Genre")),
        year=_optional_int(entry.get("Year")),
        decade=_optional_str(entry.get("Decade")),
        grouping=_optional_str(entry.get("Grouping")),
        length=_optional_str(entry.get("Length")),
        play_count=_optional_int(entry.get("PlayCount")),
    )


def dedupe_tracks(tracks: list[Track]) -> list[Track]:
    """Drop earlier entries that share a file_path with a later one.

    Last occurrence wins and keeps its own position in the catalog.
    """
    last_index = {track.file_path: i for i, track in enumerate(tracks)}
    result = []
    for i, track in enumerate(tracks):
        if last_index[track.file_path] != i:
            logger.warning(
                f"Duplicate FilePath in catalog, keeping later entry: {track.file_path}"
            )
            continue
        result.append(track)
    return result


def load_catalog(path: Path) -> list[Track]:
    """Load the ordered track catalog.

    Accepts either a JSON array of entries or an object with a "videos" array.

    Raises:
        CatalogError: If the document is unreadable or malformed
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise CatalogError(f"Malformed catalog {path}: {e}") from e
    except OSError as e:
        raise CatalogError(f"Cannot read catalog {path}: {e}") from e

    if isinstance(data, dict) and "videos" in data:
        data = data["videos"]
    if not isinstance(data, list):
        raise CatalogError(f"Catalog {path} must be a list of videos")

    tracks = [track_from_entry(entry, i) for i, entry in enumerate(data)]
    unique = dedupe_tracks(tracks)

    logger.info(f"Loaded {len(unique)} tracks from {path}")
    return unique
