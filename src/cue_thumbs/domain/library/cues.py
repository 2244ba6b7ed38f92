"""
Cue index building from the VirtualDJ database.xml snapshot.

Two document shapes are understood:

    <Collection><Songs><Song><FileName>a.mp4</FileName>
        <CuePoints><CuePoint index="8" Start="12.5" Name="Hook"/></CuePoints>
    </Song></Songs></Collection>

    <VirtualDJ_Database><Song FilePath="a.mp4">
        <Poi Type="cue" Num="8" Pos="12.5" Name="Hook"/>
    </Song></VirtualDJ_Database>

Only the priority cue slot is consulted; every other cue is ignored.
"""

import math
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Mapping, Optional

from loguru import logger

from cue_thumbs.core.errors import CueDatabaseError

from .models import CuePoint, Track

DEFAULT_PRIORITY_CUE_INDEX = 8

_INDEX_ATTRS = ("index", "Index", "Num")
_START_ATTRS = ("Start", "start", "Pos")
_NAME_ATTRS = ("Name", "name")


def _first_attr(element: ET.Element, names: tuple[str, ...]) -> Optional[str]:
    for name in names:
        value = element.get(name)
        if value is not None:
            return value
    return None


def _song_key(song: ET.Element) -> Optional[str]:
    key = song.get("FilePath") or song.get("FileName") or song.findtext("FileName")
    if key is None:
        return None
    key = key.strip()
    return key or None


def parse_cue_start(raw: Optional[str]) -> Optional[float]:
    """Parse a cue start offset; non-positive or unparsable values are absent."""
    if raw is None:
        return None
    try:
        start = float(raw.strip())
    except ValueError:
        return None
    if not math.isfinite(start) or start <= 0:
        return None
    return start


def find_priority_cue(song: ET.Element, priority_index: int) -> Optional[CuePoint]:
    """Return the song's priority cue, or None if absent or invalid."""
    wanted = str(priority_index)
    for cue in list(song.iter("CuePoint")) + list(song.iter("Poi")):
        if cue.tag == "Poi" and cue.get("Type", "cue") != "cue":
            continue
        index = _first_attr(cue, _INDEX_ATTRS)
        if index is None or index.strip() != wanted:
            continue
        start = parse_cue_start(_first_attr(cue, _START_ATTRS))
        if start is None:
            return None
        return CuePoint(start=start, name=_first_attr(cue, _NAME_ATTRS))
    return None


def build_cue_index(
    root: ET.Element, priority_index: int = DEFAULT_PRIORITY_CUE_INDEX
) -> dict[str, CuePoint]:
    """Build the file path -> priority cue mapping from a parsed document."""
    index: dict[str, CuePoint] = {}
    for song in root.iter("Song"):
        key = _song_key(song)
        if not key:
            continue
        cue = find_priority_cue(song, priority_index)
        if cue is not None:
            index[key] = cue
    return index


def parse_cue_database(
    path: Path, priority_index: int = DEFAULT_PRIORITY_CUE_INDEX
) -> dict[str, CuePoint]:
    """Parse database.xml into a cue index.

    Raises:
        CueDatabaseError: If the document cannot be read or parsed. A partial
            index is never returned.
    """
    try:
        tree = ET.parse(path)
    except ET.ParseError as e:
        raise CueDatabaseError(f"Malformed cue database {path}: {e}") from e
    except OSError as e:
        raise CueDatabaseError(f"Cannot read cue database {path}: {e}") from e

    index = build_cue_index(tree.getroot(), priority_index)
    logger.info(f"Parsed {len(index)} Cue {priority_index} entries from {path}")
    return index


def lookup_cue(cue_index: Mapping[str, CuePoint], track: Track) -> Optional[CuePoint]:
    """Find a track's cue by file path, falling back to source path.

    The file-path entry always takes precedence; entries are never merged.
    """
    cue = cue_index.get(track.file_path)
    if cue is not None:
        return cue
    if track.source_path:
        return cue_index.get(track.source_path)
    return None
