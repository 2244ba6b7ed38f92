"""Test helpers: snapshot builders and a fake frame extractor.

ffmpeg is never invoked: FakeExtractor implements the FrameExtractor
protocol and writes a small distinct payload per call.
"""

import json
import threading
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

from cue_thumbs.domain.thumbnails.models import ExtractionResult


class FakeExtractor:
    """Records calls and writes ``frame:<offset>:<call#>`` to the destination."""

    def __init__(self):
        self.calls: list[tuple[Path, Path, float]] = []
        self.fail_for: set[str] = set()
        self._lock = threading.Lock()

    def extract_frame(self, source: Path, dest: Path, offset: float) -> ExtractionResult:
        with self._lock:
            self.calls.append((source, dest, offset))
            count = len(self.calls)
        if str(source) in self.fail_for:
            return ExtractionResult(False, f"simulated failure for {source}")
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(f"frame:{offset}:{count}".encode())
        return ExtractionResult(True)


def build_cue_xml(cues: dict) -> str:
    """Render a Collection/Songs/Song cue document.

    ``cues`` maps a file name to either a start offset (stored in slot 8) or
    a list of ``(index, start)`` pairs.
    """
    root = ET.Element("Collection")
    songs = ET.SubElement(root, "Songs")
    for file_name, value in cues.items():
        song = ET.SubElement(songs, "Song")
        ET.SubElement(song, "FileName").text = file_name
        points = ET.SubElement(song, "CuePoints")
        pairs = value if isinstance(value, list) else [(8, value)]
        for index, start in pairs:
            ET.SubElement(points, "CuePoint", index=str(index), Start=str(start))
    return ET.tostring(root, encoding="unicode")


def write_snapshot(
    design_root: Path,
    videos: list[dict],
    cues: Optional[dict] = None,
    cue_xml: Optional[str] = None,
) -> Path:
    """Write snapshots/latest/{VideoFiles.json,database.xml} under design_root."""
    latest = design_root / "snapshots" / "latest"
    latest.mkdir(parents=True, exist_ok=True)
    (latest / "VideoFiles.json").write_text(json.dumps(videos), encoding="utf-8")
    xml = cue_xml if cue_xml is not None else build_cue_xml(cues or {})
    (latest / "database.xml").write_text(xml, encoding="utf-8")
    return latest


def video(file_path: str, source_path: Optional[str] = None, **extra) -> dict:
    entry = {
        "Title": extra.pop("Title", Path(file_path).stem),
        "Artist": extra.pop("Artist", ""),
        "FilePath": file_path,
        "SourcePath": source_path or f"/src/{file_path}",
    }
    entry.update(extra)
    return entry
