"""
Unified output system using Loguru and Rich.
User-facing messages go to the terminal and the log file; internal
diagnostics use ``loguru.logger`` directly.
"""

import sys
import threading
from pathlib import Path
from typing import Optional

from loguru import logger
from rich.console import Console

from .config import get_data_dir

_console: Optional[Console] = None
_console_lock = threading.Lock()

_LEVEL_STYLES = {
    "debug": "cyan",
    "info": None,
    "success": "green",
    "warning": "yellow",
    "error": "bold red",
}


def get_log_file_path() -> Path:
    """Get the default path to the log file."""
    return get_data_dir() / "cue-thumbs.log"


def get_console() -> Console:
    """Get or create the global Rich Console instance."""
    global _console
    with _console_lock:
        if _console is None:
            _console = Console()
        return _console


def set_console(console: Optional[Console]) -> None:
    """Replace the global console (tests capture output this way)."""
    global _console
    with _console_lock:
        _console = console


def setup_loguru(
    log_file: Optional[Path] = None,
    level: str = "INFO",
    console_output: bool = False,
) -> Path:
    """
    Configure loguru with a rotating file sink.

    Args:
        log_file: Path to log file (default: ~/.local/share/cue-thumbs/cue-thumbs.log)
        level: Minimum level for file logging (DEBUG, INFO, WARNING, ERROR)
        console_output: Also write log records to stderr

    Returns:
        The log file path in use
    """
    log_file = log_file if log_file else get_log_file_path()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger.remove()

    logger.add(
        log_file,
        rotation="10 MB",
        retention=5,
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}",
        enqueue=False,
    )

    if console_output:
        logger.add(sys.stderr, level=level, format="{level}: {message}")

    logger.info(f"Loguru initialized: {log_file} (level={level})")
    return log_file


def log(message: str, level: str = "info") -> None:
    """
    Unified logging: writes to the log file AND prints to the terminal.

    Use this instead of print() for user-facing messages.

    Args:
        message: User-facing message
        level: Log level (debug, info, success, warning, error)
    """
    getattr(logger, level)(message)

    if level == "debug":
        return

    style = _LEVEL_STYLES.get(level)
    console = get_console()
    if style:
        console.print(message, style=style, markup=False, highlight=False)
    else:
        console.print(message, markup=False, highlight=False)
