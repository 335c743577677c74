"""Convert a ProjectTimeline to OpenTimelineIO for NLE interchange."""

from pathlib import Path

import opentimelineio as otio

from clipgenius.common.errors import TimelineValidationError
from clipgenius.edit_executor.audio_mix import audio_lane
from clipgenius.edit_executor.resolver import AssetResolver
from clipgenius.timeline.schemas import AudioClip, ProjectClip, ProjectTimeline

DEFAULT_FRAME_RATE = 30.0


def timeline_to_otio(
    timeline: ProjectTimeline,
    resolver: AssetResolver,
    frame_rate: float = DEFAULT_FRAME_RATE,
) -> otio.schema.Timeline:
    """Build an OTIO timeline with one video and one audio track.

    Args:
        timeline: The project to convert.
        resolver: Asset lookup for media references.
        frame_rate: Rate used for all RationalTimes.

    Returns:
        The OTIO timeline.

    Raises:
        TimelineValidationError: A clip references an unknown asset.
    """
    otio_timeline = otio.schema.Timeline(name=f"ClipGenius {timeline.project_id}")
    otio_timeline.global_start_time = otio.opentime.RationalTime(0, frame_rate)

    otio_timeline.tracks.append(_create_video_track(timeline, resolver, frame_rate))

    if not timeline.track_audio_muted:
        otio_timeline.tracks.append(_create_audio_track(timeline, resolver, frame_rate))

    return otio_timeline


def write_otio(
    timeline: ProjectTimeline,
    resolver: AssetResolver,
    output_path: Path,
    frame_rate: float = DEFAULT_FRAME_RATE,
) -> Path:
    """Convert a timeline and save it as an .otio file."""
    otio_timeline = timeline_to_otio(timeline, resolver, frame_rate)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    otio.adapters.write_to_file(otio_timeline, str(output_path))
    return output_path


def _media_reference(asset_id: str, resolver: AssetResolver) -> otio.schema.ExternalReference:
    source_path = resolver.source_path(asset_id)
    if source_path is None:
        msg = f"Unknown asset {asset_id}"
        raise TimelineValidationError(msg)
    return otio.schema.ExternalReference(target_url=str(source_path.absolute()))


def _source_range(
    source_in: float,
    source_out: float,
    frame_rate: float,
) -> otio.opentime.TimeRange:
    return otio.opentime.TimeRange(
        start_time=otio.opentime.RationalTime(source_in * frame_rate, frame_rate),
        duration=otio.opentime.RationalTime(
            max(0.0, source_out - source_in) * frame_rate,
            frame_rate,
        ),
    )


def _create_video_track(
    timeline: ProjectTimeline,
    resolver: AssetResolver,
    frame_rate: float,
) -> otio.schema.Track:
    """Create the video track; clips are contiguous by construction."""
    video_track = otio.schema.Track(
        name="Video",
        kind=otio.schema.TrackKind.Video,
    )
    for clip in timeline.clips:
        video_track.append(_create_video_clip(clip, resolver, frame_rate))
    return video_track


def _create_video_clip(
    clip: ProjectClip,
    resolver: AssetResolver,
    frame_rate: float,
) -> otio.schema.Clip:
    otio_clip = otio.schema.Clip(
        name=clip.label or clip.id,
        media_reference=_media_reference(clip.asset_id, resolver),
        source_range=_source_range(clip.source_in, clip.source_out, frame_rate),
    )
    otio_clip.metadata["clipgenius"] = {
        "clip_id": clip.id,
        "asset_id": clip.asset_id,
        "audio_volume": clip.audio_volume,
        "audio_muted": clip.audio_muted,
        "audio_fade_in": clip.audio_fade_in,
        "audio_fade_out": clip.audio_fade_out,
    }
    return otio_clip


def _create_audio_track(
    timeline: ProjectTimeline,
    resolver: AssetResolver,
    frame_rate: float,
) -> otio.schema.Track:
    """Create the audio track, with gaps where nothing plays."""
    audio_track = otio.schema.Track(
        name="Audio",
        kind=otio.schema.TrackKind.Audio,
    )

    current_time = 0.0
    for clip in sorted(audio_lane(timeline), key=lambda c: c.start):
        # Overlapping unlinked clips are laid end to end
        start = max(clip.start, current_time)
        if start > current_time:
            audio_track.append(_create_gap(start - current_time, frame_rate))

        audio_track.append(_create_audio_clip(clip, resolver, frame_rate))
        current_time = start + clip.length

    return audio_track


def _create_audio_clip(
    clip: AudioClip,
    resolver: AssetResolver,
    frame_rate: float,
) -> otio.schema.Clip:
    otio_clip = otio.schema.Clip(
        name=clip.label or clip.id,
        media_reference=_media_reference(clip.asset_id, resolver),
        source_range=_source_range(clip.source_in, clip.source_out, frame_rate),
    )
    otio_clip.metadata["clipgenius"] = {
        "clip_id": clip.id,
        "asset_id": clip.asset_id,
        "start": clip.start,
        "volume": clip.volume,
        "muted": clip.muted,
        "fade_in": clip.fade_in,
        "fade_out": clip.fade_out,
    }
    return otio_clip


def _create_gap(duration_seconds: float, frame_rate: float) -> otio.schema.Gap:
    """Create a gap of specified duration."""
    return otio.schema.Gap(
        source_range=otio.opentime.TimeRange(
            start_time=otio.opentime.RationalTime(0, frame_rate),
            duration=otio.opentime.RationalTime(
                duration_seconds * frame_rate,
                frame_rate,
            ),
        ),
    )
