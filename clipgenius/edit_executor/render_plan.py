"""Render compiler: turns a finished ProjectTimeline into a RenderPlan."""

import logging
from pathlib import Path

from clipgenius.common.errors import TimelineValidationError
from clipgenius.edit_executor.audio_mix import audio_lane, build_audio_mix, needs_audio_mix
from clipgenius.edit_executor.resolver import AssetResolver
from clipgenius.edit_executor.schemas import (
    AudioMode,
    ExportResolution,
    OutputFormat,
    RenderPlan,
    VideoSegment,
)
from clipgenius.timeline.operations import project_duration_seconds
from clipgenius.timeline.schemas import ProjectTimeline

logger = logging.getLogger(__name__)

# Clips must play at least this long to be rendered
MIN_RENDER_CLIP_SECONDS = 0.05

RESOLUTION_HEIGHTS: dict[ExportResolution, int] = {
    ExportResolution.HD_720: 720,
    ExportResolution.FULL_HD_1080: 1080,
    ExportResolution.UHD_4K: 2160,
}


def _parse_resolution(resolution: str) -> ExportResolution:
    try:
        return ExportResolution(resolution)
    except ValueError as e:
        msg = f"Unsupported resolution: {resolution}"
        raise TimelineValidationError(msg) from e


def _parse_format(output_format: str) -> OutputFormat:
    try:
        return OutputFormat(output_format)
    except ValueError as e:
        msg = f"Unsupported format: {output_format}"
        raise TimelineValidationError(msg) from e


def validate_timeline(
    timeline: ProjectTimeline,
    resolver: AssetResolver,
    resolution: str = ExportResolution.HD_720,
    output_format: str = OutputFormat.MP4,
) -> tuple[list[Path], ExportResolution, OutputFormat]:
    """Reject timelines that cannot be rendered.

    Checks run in order: clips present, format, resolution, each clip's
    asset and length, then unlinked audio assets.

    Returns:
        The resolved source path of each video clip in clip order, with the
        parsed resolution and format.

    Raises:
        TimelineValidationError: With the first failing reason.
    """
    if not timeline.clips:
        msg = "Timeline has no clips"
        raise TimelineValidationError(msg)
    parsed_format = _parse_format(output_format)
    parsed_resolution = _parse_resolution(resolution)

    source_paths: list[Path] = []
    for clip in timeline.clips:
        source_path = resolver.source_path(clip.asset_id)
        if source_path is None:
            msg = f"Clip {clip.id} references unknown asset {clip.asset_id}"
            raise TimelineValidationError(msg)
        if not source_path.is_file():
            msg = f"Source for asset {clip.asset_id} does not exist"
            raise TimelineValidationError(msg)
        if not clip.source_out > clip.source_in + MIN_RENDER_CLIP_SECONDS:
            msg = f"Clip {clip.id} is too short to render"
            raise TimelineValidationError(msg)
        source_paths.append(source_path)

    if not timeline.audio_linked:
        for audio_clip in timeline.audio_clips:
            if resolver.source_path(audio_clip.asset_id) is None:
                msg = f"Audio clip {audio_clip.id} references unknown asset {audio_clip.asset_id}"
                raise TimelineValidationError(msg)

    return source_paths, parsed_resolution, parsed_format


def compile_render_plan(
    timeline: ProjectTimeline,
    resolver: AssetResolver,
    resolution: str = ExportResolution.HD_720,
    output_format: str = OutputFormat.MP4,
) -> RenderPlan:
    """Compile a timeline into a single-encode render plan.

    Args:
        timeline: The finished project.
        resolver: Asset lookup.
        resolution: One of the ``ExportResolution`` presets.
        output_format: One of the ``OutputFormat`` values.

    Returns:
        RenderPlan with concat segments and the audio decision.

    Raises:
        TimelineValidationError: Nothing was attempted.
    """
    source_paths, parsed_resolution, parsed_format = validate_timeline(
        timeline, resolver, resolution, output_format
    )

    video_segments = [
        VideoSegment(
            source_path=source_path,
            inpoint=clip.source_in,
            outpoint=clip.source_out,
        )
        for clip, source_path in zip(timeline.clips, source_paths, strict=True)
    ]

    duration = project_duration_seconds(timeline)
    audio_mix = None

    if timeline.track_audio_muted:
        audio_mode = AudioMode.NONE
    elif needs_audio_mix(timeline):
        audio_mix = build_audio_mix(
            audio_lane(timeline),
            resolver,
            project_duration=duration,
            track_volume=timeline.track_audio_volume,
        )
        audio_mode = AudioMode.MIX if audio_mix is not None else AudioMode.NONE
    else:
        audio_mode = AudioMode.PASSTHROUGH

    logger.info(
        "[project=%s] Compiled plan: %d segments, %.2fs, audio=%s",
        timeline.project_id,
        len(video_segments),
        duration,
        audio_mode,
    )

    return RenderPlan(
        project_id=timeline.project_id,
        video_segments=video_segments,
        audio_mode=audio_mode,
        audio_mix=audio_mix,
        resolution=parsed_resolution,
        output_format=parsed_format,
        duration_seconds=duration,
    )


def escape_concat_path(path: Path) -> str:
    """Escape a path for a single-quoted concat demuxer entry."""
    return str(path).replace("'", "'\\''")


def concat_list_text(segments: list[VideoSegment]) -> str:
    """Render the concat demuxer script for the video segments."""
    return "".join(
        f"file '{escape_concat_path(seg.source_path)}'\n"
        f"inpoint {seg.inpoint:.3f}\n"
        f"outpoint {seg.outpoint:.3f}\n"
        for seg in segments
    )


def build_ffmpeg_args(
    plan: RenderPlan,
    concat_list_path: Path,
    output_path: Path,
) -> list[str]:
    """Assemble the single encode invocation for a plan.

    Video is concatenated at the container level, scaled to the preset
    height and re-encoded once. Audio comes from the mix graph, from the
    concatenation itself, or is omitted.
    """
    args = [
        "-hide_banner",
        "-y",
        "-f", "concat",
        "-safe", "0",
        "-i", str(concat_list_path),
    ]

    if plan.audio_mix is not None:
        for source_path in plan.audio_mix.inputs:
            args.extend(["-i", str(source_path)])

    height = RESOLUTION_HEIGHTS[plan.resolution]
    graph = [f"[0:v:0]scale=-2:{height}[vout]"]
    if plan.audio_mode == AudioMode.MIX and plan.audio_mix is not None:
        graph.append(plan.audio_mix.filter_graph)

    args.extend(["-filter_complex", ";".join(graph), "-map", "[vout]"])

    if plan.audio_mode == AudioMode.MIX and plan.audio_mix is not None:
        args.extend(["-map", f"[{plan.audio_mix.output_label}]"])
    elif plan.audio_mode == AudioMode.PASSTHROUGH:
        args.extend(["-map", "0:a:0?"])

    args.extend([
        "-c:v", "libx264",
        "-preset", "veryfast",
        "-crf", "20",
        "-pix_fmt", "yuv420p",
    ])

    if plan.audio_mode == AudioMode.NONE:
        args.append("-an")
    else:
        args.extend(["-c:a", "aac", "-b:a", "160k"])

    args.extend([
        "-movflags", "+faststart",
        "-f", "mp4",
        str(output_path),
    ])
    return args
