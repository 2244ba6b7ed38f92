"""
Thumbnail domain models: decisions, action records and extraction results.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, NamedTuple, Optional


class ActionKind(str, Enum):
    """Closed set of per-track outcomes recorded in the report."""

    GENERATED_FROM_CUE = "generated_from_cue"
    OVERWRITTEN_FROM_CUE = "overwritten_from_cue"
    SKIPPED_EXISTING = "skipped_existing"
    MISSING_CUE = "missing_cue"
    FAILED = "failed"


class Decision(str, Enum):
    """What the engine must do for a track before any side effect runs."""

    EXTRACT = "extract"
    SKIP_EXISTING = "skip_existing"
    MISSING_CUE = "missing_cue"


class ExtractionResult(NamedTuple):
    """Outcome of a single frame extraction."""

    success: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class ThumbnailAction:
    """Audit record for one processed track."""

    file_path: str
    action: ActionKind
    thumbnail_path: Path
    cue_time: Optional[float] = None
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize with report keys; absent optional fields are omitted."""
        data: dict[str, Any] = {
            "filePath": self.file_path,
            "action": self.action.value,
        }
        if self.cue_time is not None:
            data["cueTime"] = self.cue_time
        if self.error is not None:
            data["error"] = self.error
        data["thumbnailPath"] = str(self.thumbnail_path)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ThumbnailAction":
        return cls(
            file_path=data["filePath"],
            action=ActionKind(data["action"]),
            thumbnail_path=Path(data["thumbnailPath"]),
            cue_time=data.get("cueTime"),
            error=data.get("error"),
        )
