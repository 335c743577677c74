"""Pure timeline algebra over ProjectTimeline values.

Every function returns a new timeline and leaves its input untouched. Clip
positions in project time are always recomputed from clip lengths.
"""

import uuid
from collections.abc import Sequence

from clipgenius.asset_annotator.intervals import clamp
from clipgenius.common.errors import ClipNotFoundError
from clipgenius.edit_planner.schemas import AnalysisTimeline, ClipKind
from clipgenius.timeline.schemas import (
    AudioClip,
    ProjectClip,
    ProjectTimeline,
    SplitResult,
)

MIN_CLIP_SECONDS = 0.2
MIN_TRIM_TARGET_SECONDS = 5.0
MAX_VOLUME = 2.0


def _new_id() -> str:
    return str(uuid.uuid4())


def project_duration_seconds(timeline: ProjectTimeline) -> float:
    """Total project length: the sum of all video clip lengths."""
    return sum(max(0.0, c.source_out - c.source_in) for c in timeline.clips)


def project_clip_offsets(timeline: ProjectTimeline) -> dict[str, float]:
    """Map each clip id to the project time where it starts."""
    offsets: dict[str, float] = {}
    acc = 0.0
    for clip in timeline.clips:
        offsets[clip.id] = acc
        acc += clip.length
    return offsets


def _clip_spans(clips: Sequence[ProjectClip]) -> list[tuple[float, float]]:
    spans: list[tuple[float, float]] = []
    acc = 0.0
    for clip in clips:
        spans.append((acc, acc + clip.length))
        acc += clip.length
    return spans


def _index_of(items: Sequence[ProjectClip | AudioClip], clip_id: str) -> int:
    for idx, item in enumerate(items):
        if item.id == clip_id:
            return idx
    raise ClipNotFoundError(clip_id)


def insertion_index(spans: Sequence[tuple[float, float]], project_time: float) -> int:
    """Find where a clip dropped at ``project_time`` lands.

    Each existing span is split at its midpoint: a time nearer the span's
    start inserts before it, a time nearer its end inserts after it.
    """
    for idx, (start, end) in enumerate(spans):
        if abs(project_time - start) < abs(project_time - end):
            return idx
    return len(spans)


def _clamp_fades(length: float, fade_in: float, fade_out: float) -> tuple[float, float]:
    half = max(0.0, length / 2)
    return clamp(fade_in, 0.0, half), clamp(fade_out, 0.0, half)


def _sanitize_clip(clip: ProjectClip, asset_duration: float | None = None) -> ProjectClip:
    """Enforce bounds, volume and fade invariants on a video clip."""
    source_out = clip.source_out
    if asset_duration is not None:
        source_out = min(source_out, asset_duration)
    source_in = clamp(clip.source_in, 0.0, source_out - MIN_CLIP_SECONDS)
    source_out = max(source_in + MIN_CLIP_SECONDS, source_out)

    fade_in, fade_out = _clamp_fades(
        source_out - source_in, clip.audio_fade_in, clip.audio_fade_out
    )
    return clip.model_copy(
        update={
            "source_in": source_in,
            "source_out": source_out,
            "audio_volume": clamp(clip.audio_volume, 0.0, MAX_VOLUME),
            "audio_fade_in": fade_in,
            "audio_fade_out": fade_out,
        }
    )


def _fit_audio_clip(clip: AudioClip, project_duration: float) -> AudioClip | None:
    """Keep an audio clip inside the project, or drop it if it cannot fit."""
    source_out = clip.source_out
    if clip.length > project_duration:
        source_out = clip.source_in + project_duration
    length = source_out - clip.source_in
    if length < MIN_CLIP_SECONDS:
        return None

    fade_in, fade_out = _clamp_fades(length, clip.fade_in, clip.fade_out)
    return clip.model_copy(
        update={
            "source_out": source_out,
            "start": clamp(clip.start, 0.0, max(0.0, project_duration - length)),
            "volume": clamp(clip.volume, 0.0, MAX_VOLUME),
            "fade_in": fade_in,
            "fade_out": fade_out,
        }
    )


def _fit_audio_clips(clips: Sequence[AudioClip], project_duration: float) -> list[AudioClip]:
    fitted = (_fit_audio_clip(c, project_duration) for c in clips)
    return [c for c in fitted if c is not None]


def _with_clips(timeline: ProjectTimeline, clips: list[ProjectClip]) -> ProjectTimeline:
    """Replace the video lane and refit the audio lane to the new length."""
    updated = timeline.model_copy(update={"clips": clips})
    if timeline.audio_clips:
        duration = project_duration_seconds(updated)
        updated = updated.model_copy(
            update={"audio_clips": _fit_audio_clips(timeline.audio_clips, duration)}
        )
    return updated


def split_clip_at(
    timeline: ProjectTimeline,
    clip_id: str,
    seconds: float,
) -> SplitResult | None:
    """Split a clip at a source time.

    Args:
        timeline: The project.
        clip_id: Clip to split.
        seconds: Source time of the split point.

    Returns:
        SplitResult selecting the right half, or None when the point is not
        strictly inside ``(source_in + 0.2, source_out - 0.2)`` or the clip
        does not exist.
    """
    try:
        idx = _index_of(timeline.clips, clip_id)
    except ClipNotFoundError:
        return None

    clip = timeline.clips[idx]
    low = clip.source_in + MIN_CLIP_SECONDS
    high = clip.source_out - MIN_CLIP_SECONDS
    t = clamp(seconds, low, high)
    if not (low < t < high):
        return None

    left = clip.model_copy(update={"id": _new_id(), "source_out": t})
    right = clip.model_copy(update={"id": _new_id(), "source_in": t})
    clips = [
        *timeline.clips[:idx],
        _sanitize_clip(left),
        _sanitize_clip(right),
        *timeline.clips[idx + 1 :],
    ]
    return SplitResult(
        timeline=timeline.model_copy(update={"clips": clips}),
        selected_clip_id=right.id,
    )


def trim_to_target_seconds(timeline: ProjectTimeline, target_seconds: float) -> ProjectTimeline:
    """Shorten the project to at most ``max(5, target_seconds)``.

    Clips are kept whole while they fit; the first clip that overflows is
    truncated to fill the remaining budget and everything after it is
    dropped. Clips are never reordered or extended. A truncated remainder
    shorter than the minimum clip length is dropped.
    """
    remaining = max(MIN_TRIM_TARGET_SECONDS, target_seconds)
    kept: list[ProjectClip] = []

    for clip in timeline.clips:
        if remaining <= 0:
            break
        if clip.length <= remaining:
            kept.append(clip)
            remaining -= clip.length
            continue
        if remaining >= MIN_CLIP_SECONDS:
            truncated = clip.model_copy(update={"source_out": clip.source_in + remaining})
            kept.append(_sanitize_clip(truncated))
        break

    return _with_clips(timeline, kept)


def insert_clip_at_time(
    timeline: ProjectTimeline,
    clip: ProjectClip,
    project_time: float,
) -> ProjectTimeline:
    """Insert a video clip at the slot nearest ``project_time``."""
    idx = insertion_index(_clip_spans(timeline.clips), project_time)
    clips = [*timeline.clips[:idx], _sanitize_clip(clip), *timeline.clips[idx:]]
    return _with_clips(timeline, clips)


def reorder_clip_to_time(
    timeline: ProjectTimeline,
    clip_id: str,
    project_time: float,
) -> ProjectTimeline:
    """Move a video clip to the slot nearest ``project_time``.

    Raises:
        ClipNotFoundError: No clip has this id.
    """
    idx = _index_of(timeline.clips, clip_id)
    clip = timeline.clips[idx]
    rest = [*timeline.clips[:idx], *timeline.clips[idx + 1 :]]

    new_idx = insertion_index(_clip_spans(rest), project_time)
    clips = [*rest[:new_idx], clip, *rest[new_idx:]]
    return timeline.model_copy(update={"clips": clips})


def insert_audio_clip_at_time(
    timeline: ProjectTimeline,
    clip: AudioClip,
    project_time: float,
) -> ProjectTimeline:
    """Place an audio clip at ``project_time`` on the unlinked audio lane.

    A linked timeline is unlinked first, so the video clips keep their own
    audio alongside the new clip.
    """
    if timeline.audio_linked:
        timeline = set_audio_linked(timeline, False)

    duration = project_duration_seconds(timeline)
    placed = _fit_audio_clip(clip.model_copy(update={"start": project_time}), duration)
    if placed is None:
        return timeline

    spans = [(c.start, c.end) for c in timeline.audio_clips]
    idx = insertion_index(spans, project_time)
    audio_clips = [*timeline.audio_clips[:idx], placed, *timeline.audio_clips[idx:]]
    return timeline.model_copy(update={"audio_clips": audio_clips, "audio_linked": False})


def move_audio_clip_to_time(
    timeline: ProjectTimeline,
    clip_id: str,
    project_time: float,
) -> ProjectTimeline:
    """Move an audio clip so it starts at ``project_time`` (clamped).

    Raises:
        ClipNotFoundError: No audio clip has this id.
    """
    idx = _index_of(timeline.audio_clips, clip_id)
    rest = [*timeline.audio_clips[:idx], *timeline.audio_clips[idx + 1 :]]
    moved = timeline.model_copy(update={"audio_clips": rest})
    return insert_audio_clip_at_time(moved, timeline.audio_clips[idx], project_time)


def set_clip_bounds(
    timeline: ProjectTimeline,
    clip_id: str,
    source_in: float | None = None,
    source_out: float | None = None,
    asset_duration: float | None = None,
) -> ProjectTimeline:
    """Trim a clip's source range, keeping at least 0.2s.

    Raises:
        ClipNotFoundError: No clip has this id.
    """
    idx = _index_of(timeline.clips, clip_id)
    clip = timeline.clips[idx]
    patched = clip.model_copy(
        update={
            "source_in": clip.source_in if source_in is None else source_in,
            "source_out": clip.source_out if source_out is None else source_out,
        }
    )
    clips = list(timeline.clips)
    clips[idx] = _sanitize_clip(patched, asset_duration)
    return _with_clips(timeline, clips)


def remove_clip(timeline: ProjectTimeline, clip_id: str) -> ProjectTimeline:
    """Delete a video clip.

    Raises:
        ClipNotFoundError: No clip has this id.
    """
    idx = _index_of(timeline.clips, clip_id)
    return _with_clips(timeline, [*timeline.clips[:idx], *timeline.clips[idx + 1 :]])


def append_asset_clip(
    timeline: ProjectTimeline,
    asset_id: str,
    duration_seconds: float,
    label: str = "",
) -> ProjectTimeline:
    """Append a whole asset to the end of the video lane."""
    clip = ProjectClip(
        id=_new_id(),
        asset_id=asset_id,
        label=label,
        source_in=0.0,
        source_out=duration_seconds,
    )
    return _with_clips(timeline, [*timeline.clips, _sanitize_clip(clip, duration_seconds)])


def set_clip_audio(
    timeline: ProjectTimeline,
    clip_id: str,
    volume: float | None = None,
    muted: bool | None = None,
    fade_in: float | None = None,
    fade_out: float | None = None,
) -> ProjectTimeline:
    """Change a video clip's linked-audio settings.

    Raises:
        ClipNotFoundError: No clip has this id.
    """
    idx = _index_of(timeline.clips, clip_id)
    clip = timeline.clips[idx]
    patched = clip.model_copy(
        update={
            "audio_volume": clip.audio_volume if volume is None else volume,
            "audio_muted": clip.audio_muted if muted is None else muted,
            "audio_fade_in": clip.audio_fade_in if fade_in is None else fade_in,
            "audio_fade_out": clip.audio_fade_out if fade_out is None else fade_out,
        }
    )
    clips = list(timeline.clips)
    clips[idx] = _sanitize_clip(patched)
    return timeline.model_copy(update={"clips": clips})


def set_audio_fades(
    timeline: ProjectTimeline,
    fade_in: float,
    fade_out: float,
) -> ProjectTimeline:
    """Apply the same fade-in/out to every clip on both lanes."""
    clips = [
        _sanitize_clip(c.model_copy(update={"audio_fade_in": fade_in, "audio_fade_out": fade_out}))
        for c in timeline.clips
    ]
    duration = project_duration_seconds(timeline)
    audio_clips = _fit_audio_clips(
        [c.model_copy(update={"fade_in": fade_in, "fade_out": fade_out}) for c in timeline.audio_clips],
        duration,
    )
    return timeline.model_copy(update={"clips": clips, "audio_clips": audio_clips})


def set_track_audio(
    timeline: ProjectTimeline,
    muted: bool | None = None,
    volume: float | None = None,
) -> ProjectTimeline:
    """Mute or scale the whole audio track."""
    return timeline.model_copy(
        update={
            "track_audio_muted": timeline.track_audio_muted if muted is None else muted,
            "track_audio_volume": (
                timeline.track_audio_volume
                if volume is None
                else clamp(volume, 0.0, MAX_VOLUME)
            ),
        }
    )


def derive_linked_audio_clips(timeline: ProjectTimeline) -> list[AudioClip]:
    """Build one audio clip per video clip at that clip's project offset."""
    offsets = project_clip_offsets(timeline)
    return [
        AudioClip(
            id=f"{clip.id}-audio",
            asset_id=clip.asset_id,
            label=clip.label,
            source_in=clip.source_in,
            source_out=clip.source_out,
            start=offsets[clip.id],
            volume=clip.audio_volume,
            muted=clip.audio_muted,
            fade_in=clip.audio_fade_in,
            fade_out=clip.audio_fade_out,
        )
        for clip in timeline.clips
    ]


def set_audio_linked(timeline: ProjectTimeline, linked: bool) -> ProjectTimeline:
    """Link or unlink audio from the video lane.

    Unlinking seeds the audio lane from the current video clips so the mix
    sounds the same until the user moves something. Re-linking drops the
    independent audio lane.
    """
    if linked:
        return timeline.model_copy(update={"audio_linked": True, "audio_clips": []})

    audio_clips = timeline.audio_clips or derive_linked_audio_clips(timeline)
    return timeline.model_copy(update={"audio_linked": False, "audio_clips": audio_clips})


def seed_project_timeline(
    project_id: str,
    analyses: Sequence[AnalysisTimeline],
    labels: dict[str, str] | None = None,
    highlights_only: bool = False,
) -> ProjectTimeline:
    """Turn analysis timelines into the initial editable project.

    Args:
        project_id: Id of the new project.
        analyses: One analysis per asset, in the order they were imported.
        labels: Optional asset-name prefixes keyed by asset id.
        highlights_only: Keep only highlight clips (falls back to all clips
            of an asset that has none).

    Returns:
        ProjectTimeline whose video lane follows the analysis clips.
    """
    labels = labels or {}
    clips: list[ProjectClip] = []

    for analysis in analyses:
        chosen = analysis.clips
        if highlights_only:
            chosen = [c for c in analysis.clips if c.kind == ClipKind.HIGHLIGHT] or analysis.clips

        prefix = labels.get(analysis.asset_id)
        for analysis_clip in chosen:
            clip = ProjectClip(
                id=_new_id(),
                asset_id=analysis.asset_id,
                label=f"{prefix} - {analysis_clip.label}" if prefix else analysis_clip.label,
                source_in=analysis_clip.start,
                source_out=analysis_clip.end,
            )
            clips.append(_sanitize_clip(clip, analysis.duration_seconds))

    return ProjectTimeline(project_id=project_id, clips=clips)
