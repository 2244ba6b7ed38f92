"""
Thumbnail generation pipeline orchestration.

Locate snapshot -> load cue index and catalog -> process every track ->
write the report. The cue index and catalog are built once and only read
afterwards, so per-track work can fan out over a thread pool; results are
consumed in submission order, keeping the report in catalog order.
"""

import concurrent.futures as cf
from datetime import datetime, timezone
from typing import Callable, Optional

from loguru import logger

from cue_thumbs.core.config import Config
from cue_thumbs.core.output import log
from cue_thumbs.domain.library.catalog import load_catalog
from cue_thumbs.domain.library.cues import parse_cue_database
from cue_thumbs.domain.snapshot.locator import ensure_snapshots_link, resolve_snapshot

from .engine import process_track
from .extractor import FFmpegExtractor, FrameExtractor
from .models import ThumbnailAction
from .publisher import Publisher, ensure_output_roots
from .report import ReportWriter, ThumbnailReport


def build_extractor(config: Config) -> FFmpegExtractor:
    """Create the ffmpeg extractor described by the pipeline config."""
    return FFmpegExtractor(
        binary=config.pipeline.ffmpeg_binary,
        timeout=config.pipeline.timeout_seconds,
        quality=config.pipeline.jpeg_quality,
    )


def run_pipeline(
    config: Config,
    extractor: Optional[FrameExtractor] = None,
    link_snapshots: bool = True,
    progress_callback: Optional[Callable[[int, int, ThumbnailAction], None]] = None,
) -> ThumbnailReport:
    """Run one full pass over the catalog and write the report.

    Args:
        config: Loaded configuration
        extractor: Frame extraction capability (default: ffmpeg)
        link_snapshots: Create the snapshots symlink when it is missing
        progress_callback: Optional callback(done, total, action) per track

    Returns:
        The written report

    Raises:
        PipelineError: On missing/malformed snapshot inputs or unwritable
            output roots. No report is written in that case.
    """
    started_at = datetime.now(timezone.utc)
    paths = config.paths
    settings = config.pipeline

    if link_snapshots:
        ensure_snapshots_link(paths)
    snapshot = resolve_snapshot(paths)

    log(f"Loading data from snapshot {snapshot.root}")
    with cf.ThreadPoolExecutor(max_workers=2) as loader:
        cues_future = loader.submit(
            parse_cue_database, snapshot.cue_database, settings.priority_cue_index
        )
        catalog_future = loader.submit(load_catalog, snapshot.catalog)
        cue_index = cues_future.result()
        tracks = catalog_future.result()
    log(f"  Loaded {len(tracks)} videos")
    log(f"  Loaded {len(cue_index)} Cue {settings.priority_cue_index} entries")

    thumbnails_root = paths.thumbnails_path
    ensure_output_roots(thumbnails_root, paths.public_path, paths.reports_path)

    if extractor is None:
        extractor = build_extractor(config)
    publisher = Publisher(thumbnails_root, paths.public_path)

    def handle(track) -> ThumbnailAction:
        return process_track(
            track,
            cue_index,
            thumbnails_root,
            extractor,
            publisher,
            settings.thumbnail_extension,
        )

    total = len(tracks)
    writer = ReportWriter(started_at)
    log(
        f"Processing thumbnails with {settings.workers} worker(s) "
        f"(Cue {settings.priority_cue_index} overwrites | no cue preserves existing)"
    )

    with cf.ThreadPoolExecutor(max_workers=settings.workers) as pool:
        for done, action in enumerate(pool.map(handle, tracks), start=1):
            writer.add(action)
            logger.debug(f"{action.file_path}: {action.action.value}")
            if progress_callback:
                progress_callback(done, total, action)
            if done % settings.progress_interval == 0:
                log(f"  Progress: {done}/{total} videos...")

    return writer.write(paths.report_file)
