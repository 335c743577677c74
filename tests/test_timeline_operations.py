"""Tests for pure timeline operations."""

import pytest

from clipgenius.common.errors import ClipNotFoundError
from clipgenius.edit_planner.schemas import AnalysisClip, AnalysisTimeline, ClipKind
from clipgenius.timeline import operations as ops
from clipgenius.timeline.schemas import ProjectTimeline


def _ids(timeline: ProjectTimeline) -> list[str]:
    return [c.id for c in timeline.clips]


def test_duration_and_offsets(simple_timeline):
    assert ops.project_duration_seconds(simple_timeline) == pytest.approx(10.0)
    assert ops.project_clip_offsets(simple_timeline) == {"c1": 0.0, "c2": 4.0, "c3": 6.0}


def test_split_inside_clip(simple_timeline):
    result = ops.split_clip_at(simple_timeline, "c1", 1.5)

    assert result is not None
    left, right = result.timeline.clips[0], result.timeline.clips[1]
    assert (left.source_in, left.source_out) == (0.0, 1.5)
    assert (right.source_in, right.source_out) == (1.5, 4.0)
    assert result.selected_clip_id == right.id
    assert left.id != right.id != "c1"
    assert ops.project_duration_seconds(result.timeline) == pytest.approx(10.0)
    # Input untouched
    assert _ids(simple_timeline) == ["c1", "c2", "c3"]


@pytest.mark.parametrize("seconds", [0.0, 0.1, 3.9, 4.0, 10.0])
def test_split_too_close_to_edge_is_rejected(simple_timeline, seconds):
    assert ops.split_clip_at(simple_timeline, "c1", seconds) is None


def test_split_unknown_clip_returns_none(simple_timeline):
    assert ops.split_clip_at(simple_timeline, "missing", 1.0) is None


def test_trim_truncates_overflowing_clip(simple_timeline):
    trimmed = ops.trim_to_target_seconds(simple_timeline, 7.0)

    assert _ids(trimmed) == ["c1", "c2", "c3"]
    assert trimmed.clips[2].source_out == pytest.approx(21.0)
    assert ops.project_duration_seconds(trimmed) == pytest.approx(7.0)


def test_trim_target_has_five_second_floor(simple_timeline):
    trimmed = ops.trim_to_target_seconds(simple_timeline, 1.0)

    assert ops.project_duration_seconds(trimmed) == pytest.approx(5.0)
    assert _ids(trimmed) == ["c1", "c2"]


def test_trim_drops_tiny_remainder(make_clip):
    timeline = ProjectTimeline(
        project_id="p",
        clips=[make_clip("c1", 0.0, 4.9), make_clip("c2", 0.0, 3.0)],
    )

    trimmed = ops.trim_to_target_seconds(timeline, 5.0)

    assert _ids(trimmed) == ["c1"]


def test_trim_longer_than_project_is_identity(simple_timeline):
    assert ops.trim_to_target_seconds(simple_timeline, 60.0).clips == simple_timeline.clips


@pytest.mark.parametrize(
    ("project_time", "expected"),
    [
        (0.0, ["c2", "c1", "c3"]),
        (5.0, ["c1", "c2", "c3"]),
        (6.0, ["c1", "c3", "c2"]),
        (99.0, ["c1", "c3", "c2"]),
    ],
)
def test_reorder_uses_midpoint_rule(simple_timeline, project_time, expected):
    # Without c2 the spans are c1: 0..4 and c3: 4..8
    reordered = ops.reorder_clip_to_time(simple_timeline, "c2", project_time)
    assert _ids(reordered) == expected


def test_reorder_unknown_clip_raises(simple_timeline):
    with pytest.raises(ClipNotFoundError):
        ops.reorder_clip_to_time(simple_timeline, "missing", 0.0)


def test_set_clip_bounds_keeps_minimum_length(simple_timeline):
    updated = ops.set_clip_bounds(simple_timeline, "c1", source_in=3.95)

    clip = updated.clips[0]
    assert clip.source_out - clip.source_in == pytest.approx(0.2)
    assert clip.source_in >= 0.0


def test_set_clip_bounds_clamps_to_asset_duration(simple_timeline):
    updated = ops.set_clip_bounds(simple_timeline, "c3", source_out=40.0, asset_duration=30.0)
    assert updated.clips[2].source_out == pytest.approx(30.0)


def test_set_clip_audio_clamps_volume_and_fades(simple_timeline):
    updated = ops.set_clip_audio(simple_timeline, "c2", volume=5.0, fade_in=3.0, fade_out=-1.0)

    clip = updated.clips[1]
    assert clip.audio_volume == 2.0
    assert clip.audio_fade_in == pytest.approx(1.0)
    assert clip.audio_fade_out == 0.0


def test_remove_clip_refits_audio_lane(simple_timeline, make_audio_clip):
    unlinked = simple_timeline.model_copy(
        update={
            "audio_linked": False,
            "audio_clips": [make_audio_clip("m1", 0.0, 9.0, start=1.0)],
        }
    )

    updated = ops.remove_clip(unlinked, "c3")

    assert ops.project_duration_seconds(updated) == pytest.approx(6.0)
    audio = updated.audio_clips[0]
    assert audio.length == pytest.approx(6.0)
    assert audio.start == 0.0


def test_insert_audio_clip_unlinks_and_clamps_start(simple_timeline, make_audio_clip):
    updated = ops.insert_audio_clip_at_time(
        simple_timeline, make_audio_clip("m1", 0.0, 3.0), project_time=9.0
    )

    assert updated.audio_linked is False
    assert len(updated.audio_clips) == 4
    assert updated.audio_clips[-1].id == "m1"
    assert updated.audio_clips[-1].start == pytest.approx(7.0)
    assert updated.audio_clips[-1].end <= ops.project_duration_seconds(updated)


def test_insert_audio_clip_keeps_linked_clip_audio(simple_timeline, make_audio_clip):
    updated = ops.insert_audio_clip_at_time(
        simple_timeline, make_audio_clip("m1", 0.0, 2.0), project_time=0.0
    )

    assert [c.id for c in updated.audio_clips] == ["m1", "c1-audio", "c2-audio", "c3-audio"]
    assert [c.start for c in updated.audio_clips[1:]] == pytest.approx([0.0, 4.0, 6.0])


def test_move_audio_clip_unknown_raises(simple_timeline):
    with pytest.raises(ClipNotFoundError):
        ops.move_audio_clip_to_time(simple_timeline, "missing", 1.0)


def test_unlinking_seeds_audio_from_video(simple_timeline):
    unlinked = ops.set_audio_linked(simple_timeline, False)

    assert unlinked.audio_linked is False
    assert [(c.id, c.start) for c in unlinked.audio_clips] == [
        ("c1-audio", 0.0),
        ("c2-audio", 4.0),
        ("c3-audio", 6.0),
    ]

    relinked = ops.set_audio_linked(unlinked, True)
    assert relinked.audio_linked is True
    assert relinked.audio_clips == []


def test_set_track_audio_clamps_volume(simple_timeline):
    updated = ops.set_track_audio(simple_timeline, muted=True, volume=3.0)

    assert updated.track_audio_muted is True
    assert updated.track_audio_volume == 2.0


def test_append_asset_clip(simple_timeline):
    updated = ops.append_asset_clip(simple_timeline, "a2", 20.0, label="City")

    assert updated.clips[-1].asset_id == "a2"
    assert updated.clips[-1].source_out == 20.0
    assert ops.project_duration_seconds(updated) == pytest.approx(30.0)


def _analysis(asset_id: str) -> AnalysisTimeline:
    return AnalysisTimeline(
        asset_id=asset_id,
        duration_seconds=12.0,
        clips=[
            AnalysisClip(id="x1", label="Intro", kind=ClipKind.SOURCE, start=0.0, end=4.0),
            AnalysisClip(id="x2", label="Scene 2", kind=ClipKind.HIGHLIGHT, start=4.0, end=8.0),
            AnalysisClip(id="x3", label="Outro", kind=ClipKind.SOURCE, start=8.0, end=12.0),
        ],
    )


def test_seed_project_timeline_follows_analysis_order():
    timeline = ops.seed_project_timeline("p", [_analysis("a1"), _analysis("a2")], labels={"a2": "City"})

    assert len(timeline.clips) == 6
    assert [c.asset_id for c in timeline.clips] == ["a1"] * 3 + ["a2"] * 3
    assert timeline.clips[3].label == "City - Intro"
    assert ops.project_duration_seconds(timeline) == pytest.approx(24.0)


def test_seed_highlights_only():
    timeline = ops.seed_project_timeline("p", [_analysis("a1")], highlights_only=True)

    assert [(c.source_in, c.source_out) for c in timeline.clips] == [(4.0, 8.0)]
