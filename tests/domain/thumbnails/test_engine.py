"""Unit tests for the thumbnail decision engine."""

from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from cue_thumbs.core.errors import PublishError
from cue_thumbs.domain.library.models import CuePoint, Track
from cue_thumbs.domain.thumbnails.engine import decide, process_track, thumbnail_path_for
from cue_thumbs.domain.thumbnails.models import ActionKind, Decision


@pytest.fixture
def thumbs(tmp_path) -> Path:
    root = tmp_path / "thumbnails"
    root.mkdir()
    return root


@pytest.fixture
def track() -> Track:
    return Track(file_path="1960's/Artist - Title.mp4", source_path="/src/Artist - Title.mp4")


class TestThumbnailPathFor:
    """Tests for thumbnail_path_for function."""

    def test_mirrors_relative_directory(self, thumbs, track):
        assert thumbnail_path_for(track, thumbs) == thumbs / "1960's" / "Artist - Title.jpg"

    def test_top_level_file(self, thumbs):
        track = Track(file_path="A.mp4", source_path="/src/A.mp4")
        assert thumbnail_path_for(track, thumbs) == thumbs / "A.jpg"

    def test_custom_extension(self, thumbs):
        track = Track(file_path="x/A.mkv", source_path="")
        assert thumbnail_path_for(track, thumbs, ".png") == thumbs / "x" / "A.png"

    def test_absolute_file_path_kept_inside_root(self, thumbs):
        track = Track(file_path="/videos/80s/A.mp4", source_path="")
        assert thumbnail_path_for(track, thumbs) == thumbs / "videos" / "80s" / "A.jpg"

    def test_windows_separators(self, thumbs):
        track = Track(file_path="1970's\\B.mp4", source_path="")
        assert thumbnail_path_for(track, thumbs) == thumbs / "1970's" / "B.jpg"


class TestDecide:
    """The decision table is checked in order: cue first."""

    @pytest.mark.parametrize(
        "has_cue,has_existing,expected",
        [
            (True, False, Decision.EXTRACT),
            (True, True, Decision.EXTRACT),
            (False, True, Decision.SKIP_EXISTING),
            (False, False, Decision.MISSING_CUE),
        ],
    )
    def test_table(self, has_cue, has_existing, expected):
        assert decide(has_cue, has_existing) is expected


class TestProcessTrack:
    """Tests for process_track function."""

    def test_generated_from_cue(self, thumbs, track, fake_extractor):
        action = process_track(track, {track.file_path: CuePoint(12.5)}, thumbs, fake_extractor)

        assert action.action is ActionKind.GENERATED_FROM_CUE
        assert action.cue_time == 12.5
        assert action.error is None
        assert action.thumbnail_path.read_bytes() == b"frame:12.5:1"
        assert fake_extractor.calls == [
            (Path("/src/Artist - Title.mp4"), thumbs / "1960's" / "Artist - Title.jpg", 12.5)
        ]

    def test_overwritten_from_cue(self, thumbs, track, fake_extractor):
        dest = thumbnail_path_for(track, thumbs)
        dest.parent.mkdir(parents=True)
        dest.write_bytes(b"old")

        action = process_track(track, {track.file_path: CuePoint(3.0)}, thumbs, fake_extractor)

        assert action.action is ActionKind.OVERWRITTEN_FROM_CUE
        assert dest.read_bytes() != b"old"

    def test_failed_extraction_keeps_existing(self, thumbs, track, fake_extractor):
        dest = thumbnail_path_for(track, thumbs)
        dest.parent.mkdir(parents=True)
        dest.write_bytes(b"old")
        fake_extractor.fail_for.add(track.source_path)

        action = process_track(track, {track.file_path: CuePoint(3.0)}, thumbs, fake_extractor)

        assert action.action is ActionKind.FAILED
        assert action.cue_time == 3.0
        assert "simulated failure" in action.error
        assert dest.read_bytes() == b"old"

    def test_skipped_existing_never_extracts(self, thumbs, track, fake_extractor):
        dest = thumbnail_path_for(track, thumbs)
        dest.parent.mkdir(parents=True)
        dest.write_bytes(b"keep me")

        action = process_track(track, {}, thumbs, fake_extractor)

        assert action.action is ActionKind.SKIPPED_EXISTING
        assert action.cue_time is None
        assert dest.read_bytes() == b"keep me"
        assert fake_extractor.calls == []

    def test_missing_cue_creates_nothing(self, thumbs, track, fake_extractor):
        action = process_track(track, {}, thumbs, fake_extractor)

        assert action.action is ActionKind.MISSING_CUE
        assert not action.thumbnail_path.exists()
        assert list(thumbs.iterdir()) == []
        assert fake_extractor.calls == []

    def test_cue_under_source_path(self, thumbs, track, fake_extractor):
        action = process_track(
            track, {track.source_path: CuePoint(8.0)}, thumbs, fake_extractor
        )
        assert action.action is ActionKind.GENERATED_FROM_CUE
        assert action.cue_time == 8.0

    def test_publishes_successful_extraction(self, thumbs, track, fake_extractor):
        publisher = Mock()
        action = process_track(
            track, {track.file_path: CuePoint(1.0)}, thumbs, fake_extractor, publisher
        )
        publisher.publish.assert_called_once_with(action.thumbnail_path)

    def test_no_publish_without_extraction(self, thumbs, track, fake_extractor):
        publisher = Mock()
        process_track(track, {}, thumbs, fake_extractor, publisher)
        publisher.publish.assert_not_called()

    def test_no_publish_on_failure(self, thumbs, track, fake_extractor):
        publisher = Mock()
        fake_extractor.fail_for.add(track.source_path)
        process_track(track, {track.file_path: CuePoint(1.0)}, thumbs, fake_extractor, publisher)
        publisher.publish.assert_not_called()

    def test_publish_error_recorded_as_failure(self, thumbs, track, fake_extractor):
        publisher = Mock()
        publisher.publish.side_effect = PublishError("disk full")

        action = process_track(
            track, {track.file_path: CuePoint(1.0)}, thumbs, fake_extractor, publisher
        )

        assert action.action is ActionKind.FAILED
        assert action.error == "publish failed: disk full"
        assert action.cue_time == 1.0

    def test_unreadable_thumbnail_directory_is_failure(self, thumbs, track, fake_extractor):
        denied = PermissionError(13, "Permission denied")
        with patch.object(Path, "exists", side_effect=denied):
            action = process_track(
                track, {track.file_path: CuePoint(2.0)}, thumbs, fake_extractor
            )

        assert action.action is ActionKind.FAILED
        assert "Permission denied" in action.error
        assert action.cue_time == 2.0
        assert fake_extractor.calls == []

    def test_traversal_file_path_rejected(self, thumbs, fake_extractor):
        track = Track(file_path="../../etc/A.mp4", source_path="/src/A.mp4")

        action = process_track(track, {track.file_path: CuePoint(1.0)}, thumbs, fake_extractor)

        assert action.action is ActionKind.FAILED
        assert "escapes" in action.error
        assert fake_extractor.calls == []
