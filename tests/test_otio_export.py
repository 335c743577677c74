"""Tests for OpenTimelineIO interchange export."""

import opentimelineio as otio
import pytest

from clipgenius.common.errors import TimelineValidationError
from clipgenius.edit_executor.otio_export import timeline_to_otio, write_otio
from clipgenius.timeline.schemas import ProjectTimeline


def test_linked_timeline_has_matching_tracks(resolver, simple_timeline, media_files):
    result = timeline_to_otio(simple_timeline, resolver)

    assert len(result.tracks) == 2
    video, audio = result.tracks
    assert video.kind == otio.schema.TrackKind.Video
    assert audio.kind == otio.schema.TrackKind.Audio
    assert len(video) == 3
    assert len(audio) == 3

    first = video[0]
    assert first.source_range.start_time.to_seconds() == pytest.approx(0.0)
    assert first.source_range.duration.to_seconds() == pytest.approx(4.0)
    assert first.media_reference.target_url == str(media_files["a1"].absolute())
    assert first.metadata["clipgenius"]["clip_id"] == "c1"
    assert result.duration().to_seconds() == pytest.approx(10.0)


def test_unlinked_audio_gets_gaps(resolver, simple_timeline, make_audio_clip):
    timeline = simple_timeline.model_copy(
        update={
            "audio_linked": False,
            "audio_clips": [
                make_audio_clip("m2", 0.0, 2.0, start=6.0),
                make_audio_clip("m1", 0.0, 1.0, start=1.0),
            ],
        }
    )

    audio = timeline_to_otio(timeline, resolver).tracks[1]

    kinds = [type(item).__name__ for item in audio]
    assert kinds == ["Gap", "Clip", "Gap", "Clip"]
    assert audio[0].source_range.duration.to_seconds() == pytest.approx(1.0)
    assert audio[2].source_range.duration.to_seconds() == pytest.approx(4.0)
    assert audio[3].metadata["clipgenius"]["start"] == 6.0


def test_muted_track_has_no_audio_track(resolver, simple_timeline):
    timeline = simple_timeline.model_copy(update={"track_audio_muted": True})

    result = timeline_to_otio(timeline, resolver)

    assert len(result.tracks) == 1


def test_unknown_asset_is_rejected(resolver, make_clip):
    timeline = ProjectTimeline(project_id="p", clips=[make_clip("c1", 0, 4, asset_id="ghost")])

    with pytest.raises(TimelineValidationError):
        timeline_to_otio(timeline, resolver)


def test_write_otio_round_trips(resolver, simple_timeline, tmp_path):
    output_path = write_otio(simple_timeline, resolver, tmp_path / "out" / "p1.otio", frame_rate=24.0)

    loaded = otio.adapters.read_from_file(str(output_path))

    assert loaded.name == "ClipGenius p1"
    assert len(loaded.tracks[0]) == 3
    assert loaded.duration().to_seconds() == pytest.approx(10.0)
