"""Thumbnails domain - deciding, extracting, publishing and reporting.

This domain handles:
- The locked cue-priority decision rules
- ffmpeg frame extraction behind a FrameExtractor protocol
- Mirroring generated thumbnails into the public tree
- The JSON run report
"""

from .models import ActionKind, Decision, ExtractionResult, ThumbnailAction

from .extractor import (
    DEFAULT_TIMEOUT_SECONDS,
    FFmpegExtractor,
    FrameExtractor,
    check_ffmpeg_available,
)

from .publisher import Publisher, ensure_output_roots

from .engine import decide, process_track, thumbnail_path_for

from .report import (
    ReportWriter,
    ThumbnailReport,
    format_timestamp,
    load_report,
    summarize,
)

from .pipeline import build_extractor, run_pipeline

__all__ = [
    # Models
    "ActionKind",
    "Decision",
    "ExtractionResult",
    "ThumbnailAction",
    # Extraction
    "DEFAULT_TIMEOUT_SECONDS",
    "FFmpegExtractor",
    "FrameExtractor",
    "check_ffmpeg_available",
    # Publishing
    "Publisher",
    "ensure_output_roots",
    # Engine
    "decide",
    "process_track",
    "thumbnail_path_for",
    # Report
    "ReportWriter",
    "ThumbnailReport",
    "format_timestamp",
    "load_report",
    "summarize",
    # Pipeline
    "build_extractor",
    "run_pipeline",
]
