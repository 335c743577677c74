"""Tests for auto-timeline synthesis."""

import pytest

from clipgenius.asset_annotator.schemas import Interval
from clipgenius.edit_planner.schemas import ClipKind
from clipgenius.edit_planner.synthesizer import (
    build_analysis_timeline,
    build_clips_from_cuts,
    classify_clips,
)


def _assert_contiguous(clips, duration):
    assert clips[0].start == pytest.approx(0.0)
    assert clips[-1].end == pytest.approx(duration)
    for prev, nxt in zip(clips, clips[1:]):
        assert prev.end == pytest.approx(nxt.start)


def test_no_cuts_on_long_asset_uses_template():
    clips = build_clips_from_cuts(12.0, [])

    assert [c.label for c in clips] == ["Intro", "Action Peak", "Highlight", "Climax", "Outro"]
    assert [c.kind for c in clips] == [
        ClipKind.SOURCE,
        ClipKind.HIGHLIGHT,
        ClipKind.HIGHLIGHT,
        ClipKind.HIGHLIGHT,
        ClipKind.SOURCE,
    ]
    for clip in clips:
        assert clip.length == pytest.approx(2.4)
    _assert_contiguous(clips, 12.0)


def test_short_asset_without_cuts_is_one_clip():
    clips = build_clips_from_cuts(4.0, [])

    assert len(clips) == 1
    assert clips[0].start == 0.0
    assert clips[0].end == 4.0


def test_close_cuts_collapse_into_three_scenes():
    clips = build_clips_from_cuts(30.0, [5.0, 5.2, 15.0])

    assert [(c.start, c.end) for c in clips] == [(0.0, 5.0), (5.0, 15.0), (15.0, 30.0)]
    assert clips[0].label == "Intro"
    assert clips[-1].label == "Outro"
    assert clips[0].kind == ClipKind.SOURCE
    assert clips[-1].kind == ClipKind.SOURCE


def test_cuts_near_edges_are_ignored():
    clips = build_clips_from_cuts(20.0, [0.1, 10.0, 19.8])

    assert [(c.start, c.end) for c in clips] == [(0.0, 10.0), (10.0, 20.0)]


def test_short_clips_merge_into_predecessor():
    clips = build_clips_from_cuts(20.0, [5.0, 6.0, 12.0])

    # 5..6 is under the 2s minimum and joins 0..5
    assert [(c.start, c.end) for c in clips] == [(0.0, 6.0), (6.0, 12.0), (12.0, 20.0)]


def test_clip_count_is_capped():
    cuts = [float(t) for t in range(3, 60, 3)]
    clips = build_clips_from_cuts(60.0, cuts, max_clips=5)

    assert len(clips) == 5
    _assert_contiguous(clips, 60.0)
    assert all(c.length >= 2.0 for c in clips)


def test_cap_below_template_size_is_respected():
    clips = build_clips_from_cuts(12.0, [], max_clips=3)

    assert len(clips) <= 3
    _assert_contiguous(clips, 12.0)


def test_every_clip_meets_minimum_length_except_single_short_asset():
    clips = build_clips_from_cuts(45.0, [1.0, 2.5, 3.0, 20.0, 20.9, 44.0])

    _assert_contiguous(clips, 45.0)
    assert all(c.length >= 2.0 for c in clips[1:])


def test_classify_marks_mostly_voiced_inner_clips_as_highlights():
    clips = build_clips_from_cuts(30.0, [5.0, 10.0, 20.0])
    non_silent = [Interval(start=5.0, end=9.0), Interval(start=10.0, end=11.0)]

    classified = classify_clips(clips, non_silent)

    assert [c.kind for c in classified] == [
        ClipKind.SOURCE,
        ClipKind.HIGHLIGHT,
        ClipKind.SOURCE,
        ClipKind.SOURCE,
    ]


def test_build_analysis_timeline_classifies_only_with_silences():
    unclassified = build_analysis_timeline("a1", 30.0, [5.0, 10.0, 20.0])
    assert [c.kind for c in unclassified.clips][1:3] == [ClipKind.HIGHLIGHT, ClipKind.HIGHLIGHT]

    silences = [Interval(start=0.0, end=30.0)]
    classified = build_analysis_timeline("a1", 30.0, [5.0, 10.0, 20.0], silences)

    assert classified.asset_id == "a1"
    assert classified.duration_seconds == 30.0
    assert classified.highlight_clips == []
