"""Auto-timeline synthesis from scene cuts and audio silence."""

import logging
import uuid
from collections.abc import Sequence

from clipgenius.asset_annotator.intervals import invert_intervals, overlap_seconds
from clipgenius.asset_annotator.scenes import collapse_close_times
from clipgenius.asset_annotator.schemas import Interval
from clipgenius.edit_planner.schemas import AnalysisClip, AnalysisTimeline, ClipKind

logger = logging.getLogger(__name__)

DEFAULT_MIN_CLIP_SECONDS = 2.0
DEFAULT_MAX_CLIPS = 12

# Cuts this close to either end of the asset are ignored
EDGE_MARGIN_SECONDS = 0.3
MIN_RAW_CLIP_SECONDS = 0.25
MIN_MERGED_CLIP_SECONDS = 0.5

# Assets longer than this always get at least the template timeline
TEMPLATE_MIN_DURATION_SECONDS = 6.0
TEMPLATE_PARTS: list[tuple[str, ClipKind]] = [
    ("Intro", ClipKind.SOURCE),
    ("Action Peak", ClipKind.HIGHLIGHT),
    ("Highlight", ClipKind.HIGHLIGHT),
    ("Climax", ClipKind.HIGHLIGHT),
    ("Outro", ClipKind.SOURCE),
]

HIGHLIGHT_COVERAGE_THRESHOLD = 0.6
MIN_NON_SILENT_SECONDS = 0.6

# The cap pass is quadratic in clip count
CAP_PASS_WARN_CLIPS = 500


def _new_id() -> str:
    return str(uuid.uuid4())


def _raw_clips(duration: float, cuts: Sequence[float]) -> list[AnalysisClip]:
    """Turn cut boundaries into adjacent clips."""
    inner = [
        c
        for c in collapse_close_times(cuts)
        if EDGE_MARGIN_SECONDS < c < duration - EDGE_MARGIN_SECONDS
    ]
    boundaries = sorted([0.0, *inner, duration])

    clips: list[AnalysisClip] = []
    for i, (start, end) in enumerate(zip(boundaries, boundaries[1:], strict=False)):
        if end - start < MIN_RAW_CLIP_SECONDS:
            continue
        clips.append(
            AnalysisClip(
                id=_new_id(),
                label=f"Scene {i + 1}",
                # Mid scenes default to highlights until audio says otherwise
                kind=ClipKind.HIGHLIGHT,
                start=start,
                end=end,
            )
        )
    return clips


def _absorb_short_clips(
    clips: list[AnalysisClip],
    min_clip_seconds: float,
) -> list[AnalysisClip]:
    """Merge clips shorter than the minimum into the preceding one."""
    min_len = max(MIN_MERGED_CLIP_SECONDS, min_clip_seconds)
    merged: list[AnalysisClip] = []

    for clip in clips:
        if clip.length >= min_len or not merged:
            merged.append(clip)
            continue
        merged[-1] = merged[-1].model_copy(update={"end": clip.end})

    return merged


def _cap_clip_count(clips: list[AnalysisClip], max_clips: int) -> list[AnalysisClip]:
    """Merge the globally shortest clip into a neighbor until under the cap."""
    if len(clips) > CAP_PASS_WARN_CLIPS:
        logger.warning(
            "Capping %d clips to %d; the cap pass is quadratic",
            len(clips),
            max_clips,
        )

    clips = list(clips)
    while len(clips) > max(1, max_clips):
        shortest_idx = min(range(len(clips)), key=lambda i: clips[i].length)

        if shortest_idx == 0:
            first, second = clips[0], clips[1]
            clips[0:2] = [second.model_copy(update={"start": first.start})]
        else:
            prev, current = clips[shortest_idx - 1], clips[shortest_idx]
            clips[shortest_idx - 1 : shortest_idx + 1] = [
                prev.model_copy(update={"end": current.end})
            ]

    return clips


def _template_clips(duration: float) -> list[AnalysisClip]:
    """Equal-width five-part timeline used when cuts are unusable."""
    segment = duration / len(TEMPLATE_PARTS)
    clips: list[AnalysisClip] = []
    for i, (label, kind) in enumerate(TEMPLATE_PARTS):
        end = duration if i == len(TEMPLATE_PARTS) - 1 else (i + 1) * segment
        clips.append(
            AnalysisClip(
                id=_new_id(),
                label=label,
                kind=kind,
                start=i * segment,
                end=end,
            )
        )
    return clips


def build_clips_from_cuts(
    duration: float,
    cuts: Sequence[float],
    min_clip_seconds: float = DEFAULT_MIN_CLIP_SECONDS,
    max_clips: int = DEFAULT_MAX_CLIPS,
) -> list[AnalysisClip]:
    """Build a bounded set of labeled clips covering an asset's duration.

    Args:
        duration: Asset duration in seconds.
        cuts: Scene-cut timestamps (any order).
        min_clip_seconds: Clips shorter than this (at least 0.5s) are merged
            into their predecessor.
        max_clips: Upper bound on the number of clips.

    Returns:
        Ordered, contiguous clips from 0 to ``duration``.
    """
    clips = _raw_clips(duration, cuts)
    clips = _absorb_short_clips(clips, min_clip_seconds)
    clips = _cap_clip_count(clips, max_clips)

    if len(clips) >= 2:
        clips[0] = clips[0].model_copy(update={"label": "Intro", "kind": ClipKind.SOURCE})
        clips[-1] = clips[-1].model_copy(update={"label": "Outro", "kind": ClipKind.SOURCE})

    # The template never overrides an explicit cap below its own size
    if (
        len(clips) <= 1
        and duration > TEMPLATE_MIN_DURATION_SECONDS
        and max_clips >= len(TEMPLATE_PARTS)
    ):
        logger.info(
            "Scene cuts produced %d clip(s) for %.2fs asset; using template timeline",
            len(clips),
            duration,
        )
        clips = _template_clips(duration)

    return clips


def classify_clips(
    clips: Sequence[AnalysisClip],
    non_silent: Sequence[Interval],
) -> list[AnalysisClip]:
    """Mark inner clips as highlights when they are mostly non-silent.

    The first and last clip keep the story structure and become ``source``.

    Args:
        clips: Clips from ``build_clips_from_cuts``.
        non_silent: Non-silent intervals of the same asset.

    Returns:
        Clips with refined kinds.
    """
    spans = [s for s in non_silent if s.length >= MIN_NON_SILENT_SECONDS]
    last_idx = len(clips) - 1

    classified: list[AnalysisClip] = []
    for idx, clip in enumerate(clips):
        if idx == 0 or idx == last_idx:
            classified.append(clip.model_copy(update={"kind": ClipKind.SOURCE}))
            continue

        length = max(0.001, clip.length)
        covered = overlap_seconds(Interval(start=clip.start, end=clip.end), spans)
        kind = (
            ClipKind.HIGHLIGHT
            if covered / length >= HIGHLIGHT_COVERAGE_THRESHOLD
            else ClipKind.SOURCE
        )
        classified.append(clip.model_copy(update={"kind": kind}))

    return classified


def build_analysis_timeline(
    asset_id: str,
    duration: float,
    cuts: Sequence[float],
    silences: Sequence[Interval] | None = None,
    min_clip_seconds: float = DEFAULT_MIN_CLIP_SECONDS,
    max_clips: int = DEFAULT_MAX_CLIPS,
) -> AnalysisTimeline:
    """Synthesize the initial analysis timeline for one asset.

    Args:
        asset_id: The analyzed asset.
        duration: Asset duration in seconds.
        cuts: Scene cuts (empty when detection failed).
        silences: Merged silences, or None when silence analysis was skipped
            or failed. Classification only runs when present.
        min_clip_seconds: See ``build_clips_from_cuts``.
        max_clips: See ``build_clips_from_cuts``.

    Returns:
        AnalysisTimeline for the asset.
    """
    clips = build_clips_from_cuts(duration, cuts, min_clip_seconds, max_clips)

    if silences is not None:
        non_silent = invert_intervals(Interval(start=0.0, end=duration), silences)
        clips = classify_clips(clips, non_silent)

    return AnalysisTimeline(
        asset_id=asset_id,
        duration_seconds=duration,
        clips=clips,
    )
