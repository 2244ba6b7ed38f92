"""Library domain - the frozen catalog and its cue annotations.

This domain handles:
- Track and cue point data models
- Loading the ordered track catalog (VideoFiles.json)
- Building the priority cue index (database.xml)
"""

from .models import CuePoint, Track

from .catalog import dedupe_tracks, load_catalog, track_from_entry

from .cues import (
    DEFAULT_PRIORITY_CUE_INDEX,
    build_cue_index,
    find_priority_cue,
    lookup_cue,
    parse_cue_database,
    parse_cue_start,
)

__all__ = [
    # Models
    "CuePoint",
    "Track",
    # Catalog
    "dedupe_tracks",
    "load_catalog",
    "track_from_entry",
    # Cues
    "DEFAULT_PRIORITY_CUE_INDEX",
    "build_cue_index",
    "find_priority_cue",
    "lookup_cue",
    "parse_cue_database",
    "parse_cue_start",
]
