"""
cue-thumbs CLI - entry point for the thumbnail generation pipeline.

Subcommands:
    run             Reconcile the snapshot against existing thumbnails
    link-snapshots  Create/verify the snapshots symlink only
    report          Show the summary of the last run
    init-config     Write the default configuration file
"""

import argparse
import json
import sys
import tomllib
from pathlib import Path
from typing import Optional

from loguru import logger
from rich.table import Table

from cue_thumbs.core.config import Config, load_config, write_default_config
from cue_thumbs.core.errors import PipelineError
from cue_thumbs.core.output import get_console, log, setup_loguru
from cue_thumbs.domain.snapshot.locator import ensure_snapshots_link
from cue_thumbs.domain.thumbnails.extractor import check_ffmpeg_available
from cue_thumbs.domain.thumbnails.models import ActionKind
from cue_thumbs.domain.thumbnails.pipeline import run_pipeline
from cue_thumbs.domain.thumbnails.report import ThumbnailReport, load_report

SUMMARY_LABELS = {
    ActionKind.GENERATED_FROM_CUE: "Generated from cue",
    ActionKind.OVERWRITTEN_FROM_CUE: "Overwritten from cue",
    ActionKind.SKIPPED_EXISTING: "Skipped (existing, no cue)",
    ActionKind.MISSING_CUE: "Missing cue (no existing)",
    ActionKind.FAILED: "Failed",
}


def _load_config(args: argparse.Namespace) -> Config:
    config_path = Path(args.config).expanduser() if args.config else None
    config = load_config(config_path)

    if getattr(args, "design_root", None):
        config.paths.design_root = str(Path(args.design_root).expanduser())
    if getattr(args, "workers", None) is not None:
        config.pipeline.workers = args.workers
        config.pipeline.validate()

    log_file = Path(config.logging.log_file) if config.logging.log_file else None
    setup_loguru(log_file, config.logging.level, config.logging.console_output)
    return config


def print_summary(report: ThumbnailReport, report_path: Optional[Path] = None) -> None:
    """Print the run summary table and the final status line."""
    console = get_console()

    table = Table(title="Summary", show_header=False)
    table.add_column("Outcome")
    table.add_column("Count", justify="right")
    table.add_row("Total videos processed", str(report.summary.get("total", 0)))
    for kind, label in SUMMARY_LABELS.items():
        table.add_row(label, str(report.summary.get(kind.value, 0)))
    console.print(table)

    if report_path is not None:
        console.print(f"Report: {report_path}", markup=False)

    if report.failed == 0:
        console.print("SUCCESS - Pipeline complete", style="bold green")
    else:
        console.print(
            f"COMPLETE - {report.failed} failure(s), see report", style="bold yellow"
        )


def run_thumbnails(args: argparse.Namespace) -> int:
    """Run the pipeline.

    Returns:
        Exit code (0 when the run completed, 1 on fatal errors)
    """
    try:
        config = _load_config(args)
    except (ValueError, tomllib.TOMLDecodeError, OSError) as e:
        log(f"Error loading configuration: {e}", "error")
        return 1

    paths = config.paths
    log("=== Thumbnail Generation Pipeline ===")
    log(f"  Data repository: {paths.data_repo}")
    log(f"  Thumbnails: {paths.thumbnails_path}")
    log(f"  Public: {paths.public_path}")
    log(f"  Report: {paths.report_file}")

    if not check_ffmpeg_available(config.pipeline.ffmpeg_binary):
        log(
            f"{config.pipeline.ffmpeg_binary} is not available; cue extractions will fail",
            "warning",
        )

    try:
        report = run_pipeline(config, link_snapshots=not args.no_link)
    except PipelineError as e:
        logger.exception("Pipeline aborted")
        log(f"ERROR: {e}", "error")
        return 1

    print_summary(report, paths.report_file)
    return 0


def run_link_snapshots(args: argparse.Namespace) -> int:
    try:
        config = _load_config(args)
        snapshots_dir = ensure_snapshots_link(config.paths)
    except (ValueError, tomllib.TOMLDecodeError, OSError) as e:
        log(f"Error loading configuration: {e}", "error")
        return 1
    except PipelineError as e:
        log(f"ERROR: {e}", "error")
        return 1

    log(f"Snapshots ready: {snapshots_dir}", "success")
    return 0


def run_show_report(args: argparse.Namespace) -> int:
    try:
        config = _load_config(args)
    except (ValueError, tomllib.TOMLDecodeError, OSError) as e:
        log(f"Error loading configuration: {e}", "error")
        return 1

    report_path = config.paths.report_file
    try:
        report = load_report(report_path)
    except FileNotFoundError:
        log(f"No report found at {report_path}. Run 'cue-thumbs run' first.", "error")
        return 1
    except ValueError as e:
        log(str(e), "error")
        return 1

    if args.json:
        print(json.dumps({"timestamp": report.timestamp, "summary": report.summary}, indent=2))
        return 0

    get_console().print(f"Last run: {report.timestamp}")
    print_summary(report, report_path)
    if args.failures:
        for action in report.actions:
            if action.action is ActionKind.FAILED:
                get_console().print(
                    f"  {action.file_path}: {action.error}", markup=False, highlight=False
                )
    return 0


def run_init_config(args: argparse.Namespace) -> int:
    config_path = Path(args.config).expanduser() if args.config else None
    try:
        written = write_default_config(config_path)
    except FileExistsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(f"Created default configuration at: {written}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cue-thumbs",
        description="cue-thumbs - Cue-driven video thumbnail pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        help="Path to config.toml (default: project root, cwd, then ~/.config/cue-thumbs)",
    )

    subparsers = parser.add_subparsers(dest="subcommand", required=True)

    run_parser = subparsers.add_parser(
        "run", help="Generate thumbnails from the frozen snapshot"
    )
    run_parser.add_argument(
        "--design-root", help="Repository the outputs are written into"
    )
    run_parser.add_argument(
        "--workers", type=int, help="Parallel ffmpeg invocations"
    )
    run_parser.add_argument(
        "--no-link",
        action="store_true",
        help="Do not create the snapshots symlink when it is missing",
    )
    run_parser.set_defaults(handler=run_thumbnails)

    link_parser = subparsers.add_parser(
        "link-snapshots", help="Create or verify the snapshots symlink"
    )
    link_parser.add_argument("--design-root", help="Repository to link into")
    link_parser.set_defaults(handler=run_link_snapshots)

    report_parser = subparsers.add_parser("report", help="Show the last run's summary")
    report_parser.add_argument("--design-root", help="Repository holding the report")
    report_parser.add_argument(
        "--json", action="store_true", help="Print timestamp and summary as JSON"
    )
    report_parser.add_argument(
        "--failures", action="store_true", help="Also list failed tracks"
    )
    report_parser.set_defaults(handler=run_show_report)

    init_parser = subparsers.add_parser(
        "init-config", help="Write the default configuration file"
    )
    init_parser.set_defaults(handler=run_init_config)

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point for the cue-thumbs command."""
    parser = build_parser()
    args = parser.parse_args(argv)
    sys.exit(args.handler(args))


if __name__ == "__main__":
    main()
