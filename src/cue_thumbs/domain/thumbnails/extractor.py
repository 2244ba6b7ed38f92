"""
Frame extraction with ffmpeg.

The engine depends only on the FrameExtractor protocol so decisions and
reports can be exercised without a real binary.
"""

import os
import subprocess
import tempfile
from pathlib import Path
from typing import Protocol

from loguru import logger

from .models import ExtractionResult

DEFAULT_TIMEOUT_SECONDS = 30.0
# Temp names stay short and literal whatever the destination is called
TEMP_PREFIX = ".cue-thumbs-"


class FrameExtractor(Protocol):
    """Capability that writes one still frame of a video to an image file."""

    def extract_frame(
        self, source: Path, dest: Path, offset: float
    ) -> ExtractionResult: ...


def check_ffmpeg_available(binary: str = "ffmpeg") -> bool:
    """Check if ffmpeg is available on the system."""
    try:
        result = subprocess.run(
            [binary, "-version"], capture_output=True, text=True, timeout=5
        )
        return result.returncode == 0
    except (subprocess.SubprocessError, FileNotFoundError, OSError):
        return False


def _stderr_tail(stderr: str, lines: int = 3) -> str:
    tail = [line for line in stderr.strip().splitlines() if line.strip()][-lines:]
    return " | ".join(tail)


class FFmpegExtractor:
    """Extract frames by shelling out to ffmpeg.

    The frame is written to a temporary file beside the destination and moved
    into place only after ffmpeg succeeds, so a failed or timed-out run never
    replaces an existing thumbnail.
    """

    def __init__(
        self,
        binary: str = "ffmpeg",
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        quality: int = 2,
    ):
        self.binary = binary
        self.timeout = timeout
        self.quality = quality

    def build_command(self, source: Path, output: Path, offset: float) -> list[str]:
        """Build the ffmpeg argv for one frame at ``offset`` seconds."""
        return [
            self.binary,
            "-hide_banner",
            "-loglevel",
            "error",
            "-ss",
            f"{offset:.3f}",
            "-i",
            str(source),
            "-frames:v",
            "1",
            "-q:v",
            str(self.quality),
            "-update",
            "1",
            "-y",
            str(output),
        ]

    def extract_frame(self, source: Path, dest: Path, offset: float) -> ExtractionResult:
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=TEMP_PREFIX, suffix=dest.suffix, dir=dest.parent
            )
            os.close(fd)
        except OSError as e:
            return ExtractionResult(False, f"Cannot prepare {dest}: {e}")

        tmp_path = Path(tmp_name)
        cmd = self.build_command(source, tmp_path, offset)
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
            if result.returncode != 0:
                detail = _stderr_tail(result.stderr or "")
                message = f"ffmpeg exited with status {result.returncode}"
                return ExtractionResult(False, f"{message}: {detail}" if detail else message)

            if tmp_path.stat().st_size == 0:
                return ExtractionResult(False, "ffmpeg produced an empty image")

            os.replace(tmp_path, dest)
            return ExtractionResult(True)

        except subprocess.TimeoutExpired:
            return ExtractionResult(
                False, f"ffmpeg timed out after {self.timeout:g}s"
            )
        except FileNotFoundError:
            return ExtractionResult(False, f"{self.binary} not found on PATH")
        except OSError as e:
            return ExtractionResult(False, str(e))
        finally:
            tmp_path.unlink(missing_ok=True)
