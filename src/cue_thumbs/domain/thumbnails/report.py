"""
Run report accumulation and serialization.

Counts are never tracked incrementally; the summary is a fold over the
immutable action sequence at build time.
"""

import json
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

from loguru import logger

from .models import ActionKind, ThumbnailAction


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision, e.g. 2026-01-02T03:04:05.678Z."""
    return (
        moment.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def summarize(actions: Iterable[ThumbnailAction]) -> dict[str, int]:
    """Count actions per kind; the kind counts always sum to ``total``."""
    counts = Counter(action.action for action in actions)
    summary = {"total": sum(counts.values())}
    for kind in ActionKind:
        summary[kind.value] = counts.get(kind, 0)
    return summary


@dataclass(frozen=True)
class ThumbnailReport:
    """Serialized result of one pipeline run."""

    timestamp: str
    summary: dict[str, int]
    actions: tuple[ThumbnailAction, ...]

    @property
    def failed(self) -> int:
        return self.summary.get(ActionKind.FAILED.value, 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "summary": dict(self.summary),
            "actions": [action.to_dict() for action in self.actions],
        }


class ReportWriter:
    """Collect action records in catalog order and write the run report."""

    def __init__(self, started_at: Optional[datetime] = None):
        self.started_at = started_at or datetime.now(timezone.utc)
        self._actions: list[ThumbnailAction] = []

    def add(self, action: ThumbnailAction) -> None:
        self._actions.append(action)

    def __len__(self) -> int:
        return len(self._actions)

    @property
    def actions(self) -> tuple[ThumbnailAction, ...]:
        return tuple(self._actions)

    def build(self) -> ThumbnailReport:
        actions = self.actions
        return ThumbnailReport(
            timestamp=format_timestamp(self.started_at),
            summary=summarize(actions),
            actions=actions,
        )

    def write(self, path: Path) -> ThumbnailReport:
        """Serialize the report to ``path``, replacing any previous report."""
        report = self.build()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(report.to_dict(), f, indent=2, ensure_ascii=False)
            f.write("\n")
        logger.info(f"Wrote report with {report.summary['total']} actions to {path}")
        return report


def load_report(path: Path) -> ThumbnailReport:
    """Read a previously written report.

    Raises:
        FileNotFoundError: If no report exists at ``path``
        ValueError: If the file is not a valid report
    """
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid report {path}: {e}") from e

    try:
        actions = tuple(ThumbnailAction.from_dict(item) for item in data["actions"])
        return ThumbnailReport(
            timestamp=data["timestamp"],
            summary=dict(data["summary"]),
            actions=actions,
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Invalid report {path}: {e}") from e
