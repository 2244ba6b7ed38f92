"""
Video library domain models.

Contains data structures for representing catalog tracks and their cue points.
"""

from typing import NamedTuple, Optional


class Track(NamedTuple):
    """Represents one video in the frozen catalog snapshot.

    file_path is the relative path used as the identity key and as the mirror
    path under the output trees. source_path points at the media asset that
    frames are extracted from; the two are independent.
    """

    file_path: str  # Relative, e.g. "1960's/Artist - Title.mp4"
    source_path: str  # Absolute path to the media asset
    title: str = ""
    artist: str = ""

    # Passthrough descriptive fields, unused by the pipeline
    genre: Optional[str] = None
    year: Optional[int] = None
    decade: Optional[str] = None
    grouping: Optional[str] = None
    length: Optional[str] = None  # "MM:SS"
    play_count: Optional[int] = None


class CuePoint(NamedTuple):
    """A cue marker inside a media file."""

    start: float  # seconds, always > 0 once indexed
    name: Optional[str] = None
