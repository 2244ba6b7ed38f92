"""Tests for report accumulation and serialization."""

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from cue_thumbs.domain.thumbnails.models import ActionKind, ThumbnailAction
from cue_thumbs.domain.thumbnails.report import (
    ReportWriter,
    format_timestamp,
    load_report,
    summarize,
)


def _action(name: str, kind: ActionKind, **kwargs) -> ThumbnailAction:
    return ThumbnailAction(
        file_path=name, action=kind, thumbnail_path=Path(f"/t/{name}.jpg"), **kwargs
    )


class TestSummarize:
    """The summary partitions the action sequence exactly."""

    def test_counts_sum_to_total(self):
        actions = [
            _action("a", ActionKind.GENERATED_FROM_CUE, cue_time=1.0),
            _action("b", ActionKind.OVERWRITTEN_FROM_CUE, cue_time=2.0),
            _action("c", ActionKind.SKIPPED_EXISTING),
            _action("d", ActionKind.MISSING_CUE),
            _action("e", ActionKind.MISSING_CUE),
            _action("f", ActionKind.FAILED, cue_time=3.0, error="boom"),
        ]
        summary = summarize(actions)

        assert summary == {
            "total": 6,
            "generated_from_cue": 1,
            "overwritten_from_cue": 1,
            "skipped_existing": 1,
            "missing_cue": 2,
            "failed": 1,
        }
        assert sum(v for k, v in summary.items() if k != "total") == summary["total"]

    def test_empty(self):
        summary = summarize([])
        assert summary["total"] == 0
        assert all(count == 0 for count in summary.values())


class TestActionSerialization:
    """Optional fields are present only when they apply."""

    def test_cue_action_keys(self):
        data = _action("A.mp4", ActionKind.GENERATED_FROM_CUE, cue_time=12.5).to_dict()
        assert data == {
            "filePath": "A.mp4",
            "action": "generated_from_cue",
            "cueTime": 12.5,
            "thumbnailPath": "/t/A.mp4.jpg",
        }

    def test_failed_action_has_error(self):
        data = _action("A", ActionKind.FAILED, cue_time=1.0, error="boom").to_dict()
        assert data["error"] == "boom"

    def test_no_cue_action_omits_cue_time(self):
        data = _action("A", ActionKind.SKIPPED_EXISTING).to_dict()
        assert "cueTime" not in data
        assert "error" not in data


class TestReportWriter:
    """Tests for ReportWriter."""

    def test_format_timestamp(self):
        moment = datetime(2026, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)
        assert format_timestamp(moment) == "2026-01-02T03:04:05.678Z"

    def test_keeps_insertion_order(self):
        writer = ReportWriter()
        for name in ["c", "a", "b"]:
            writer.add(_action(name, ActionKind.MISSING_CUE))
        assert [a.file_path for a in writer.build().actions] == ["c", "a", "b"]

    def test_write_and_overwrite(self, tmp_path):
        path = tmp_path / "reports" / "thumbnails.report.json"
        started = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

        first = ReportWriter(started)
        first.add(_action("a", ActionKind.MISSING_CUE))
        first.add(_action("b", ActionKind.MISSING_CUE))
        first.write(path)

        second = ReportWriter(started)
        second.add(_action("a", ActionKind.GENERATED_FROM_CUE, cue_time=4.0))
        report = second.write(path)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["timestamp"] == "2026-10-19T12:00:00.000Z"
        assert data["summary"]["total"] == 1
        assert data["actions"] == [report.actions[0].to_dict()]

    def test_load_report_round_trip(self, tmp_path):
        path = tmp_path / "thumbnails.report.json"
        writer = ReportWriter()
        writer.add(_action("a", ActionKind.FAILED, cue_time=2.0, error="x"))
        written = writer.write(path)

        loaded = load_report(path)

        assert loaded == written
        assert loaded.failed == 1

    def test_load_invalid_report(self, tmp_path):
        path = tmp_path / "thumbnails.report.json"
        path.write_text(json.dumps({"timestamp": "t"}))
        with pytest.raises(ValueError, match="Invalid report"):
            load_report(path)
