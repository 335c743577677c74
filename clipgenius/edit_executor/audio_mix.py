"""Audio mix graph synthesis for exports."""

import logging
from collections.abc import Sequence
from pathlib import Path

from clipgenius.asset_annotator.intervals import clamp
from clipgenius.edit_executor.resolver import AssetResolver
from clipgenius.edit_executor.schemas import AudioMixGraph, AudioMixSegment
from clipgenius.timeline.operations import MAX_VOLUME, derive_linked_audio_clips
from clipgenius.timeline.schemas import AudioClip, ProjectTimeline

logger = logging.getLogger(__name__)

MIX_SAMPLE_RATE = 48000
MIN_AUDIO_SEGMENT_SECONDS = 0.05
# Input 0 is the concat demuxer list
FIRST_AUDIO_INPUT_INDEX = 1


def needs_audio_mix(timeline: ProjectTimeline) -> bool:
    """Decide whether the export needs its own audio graph.

    A fully muted track never gets one. Otherwise a graph is needed when
    audio is unlinked or when any clip or the track deviates from the
    default volume, mute and fade settings.
    """
    if timeline.track_audio_muted:
        return False
    if not timeline.audio_linked:
        return True
    if timeline.track_audio_volume != 1.0:
        return True
    return any(not clip.has_default_audio for clip in timeline.clips)


def audio_lane(timeline: ProjectTimeline) -> list[AudioClip]:
    """Return the audio clips to mix, deriving them in linked mode."""
    if timeline.audio_linked:
        return derive_linked_audio_clips(timeline)
    return list(timeline.audio_clips)


def _fmt(seconds: float) -> str:
    return f"{seconds:.3f}"


def _segment_chain(segment: AudioMixSegment, label: str) -> str:
    """Trim, re-zero, gain, fade and delay one source into ``label``."""
    filters = [
        f"atrim=start={_fmt(segment.source_in)}:end={_fmt(segment.source_out)}",
        "asetpts=PTS-STARTPTS",
        f"volume={segment.volume:.3f}",
    ]
    if segment.fade_in > 0:
        filters.append(f"afade=t=in:st=0:d={_fmt(segment.fade_in)}")
    if segment.fade_out > 0:
        fade_start = max(0.0, segment.length - segment.fade_out)
        filters.append(f"afade=t=out:st={_fmt(fade_start)}:d={_fmt(segment.fade_out)}")

    # all=1 applies the delay to every channel, not just the listed ones
    delay_ms = round(segment.start * 1000)
    filters.append(f"adelay=delays={delay_ms}:all=1")

    return f"[{segment.input_index}:a]{','.join(filters)}[{label}]"


def _mix_chain(labels: Sequence[str], duration: float, output_label: str) -> str:
    inputs = "".join(f"[{label}]" for label in labels)
    tail = f"aresample={MIX_SAMPLE_RATE},atrim=end={_fmt(duration)}"
    if len(labels) == 1:
        return f"{inputs}{tail}[{output_label}]"
    # No loudness normalization: overlapping loud segments may clip
    return (
        f"{inputs}amix=inputs={len(labels)}:duration=longest:"
        f"dropout_transition=0:normalize=0,{tail}[{output_label}]"
    )


def build_audio_mix(
    audio_clips: Sequence[AudioClip],
    resolver: AssetResolver,
    project_duration: float,
    track_volume: float = 1.0,
) -> AudioMixGraph | None:
    """Resolve audio clips into a mix graph.

    Args:
        audio_clips: The audio lane (explicit or derived from linked clips).
        resolver: Asset lookup for paths and audio presence.
        project_duration: Exact output length in seconds.
        track_volume: Track-level gain applied on top of each clip's volume.

    Returns:
        AudioMixGraph, or None when no clip contributes audible audio.
    """
    track_gain = clamp(track_volume, 0.0, MAX_VOLUME)
    inputs: list[Path] = []
    segments: list[AudioMixSegment] = []

    for clip in audio_clips:
        if clip.muted:
            continue

        source_path = resolver.source_path(clip.asset_id)
        info = resolver.asset_info(clip.asset_id)
        if source_path is None or info is None or not info.has_audio:
            logger.debug("Skipping audio for clip %s: source has no audio", clip.id)
            continue

        length = clip.length
        if length < MIN_AUDIO_SEGMENT_SECONDS:
            continue

        if source_path not in inputs:
            inputs.append(source_path)

        half = length / 2
        segments.append(
            AudioMixSegment(
                input_index=inputs.index(source_path) + FIRST_AUDIO_INPUT_INDEX,
                source_in=clip.source_in,
                source_out=clip.source_out,
                start=clamp(clip.start, 0.0, max(0.0, project_duration - length)),
                volume=clamp(clamp(clip.volume, 0.0, MAX_VOLUME) * track_gain, 0.0, MAX_VOLUME),
                fade_in=clamp(clip.fade_in, 0.0, half),
                fade_out=clamp(clip.fade_out, 0.0, half),
            )
        )

    if not segments:
        return None

    labels = [f"a{i}" for i in range(len(segments))]
    parts = [_segment_chain(seg, label) for seg, label in zip(segments, labels, strict=True)]
    parts.append(_mix_chain(labels, project_duration, "aout"))

    return AudioMixGraph(
        inputs=inputs,
        segments=segments,
        filter_graph=";".join(parts),
        output_label="aout",
    )
