"""Media probing and rotation normalization using ffprobe/ffmpeg."""

import json
import logging
import math
from pathlib import Path
from typing import Any

from clipgenius.asset_annotator.schemas import MediaProbe
from clipgenius.common.config import get_config
from clipgenius.common.errors import MediaProbeError
from clipgenius.common.media_tool import run_media_tool

logger = logging.getLogger(__name__)

# Filters that undo each rotation tag when baked into the pixels
ROTATION_FILTERS: dict[int, str] = {
    90: "transpose=1",
    180: "transpose=2,transpose=2",
    270: "transpose=2",
}


def normalize_rotation_degrees(value: float) -> int:
    """Bucket an arbitrary rotation angle to 0, 90, 180 or 270.

    Args:
        value: Rotation in degrees, possibly negative or above 360.

    Returns:
        The nearest quarter turn.
    """
    rot = ((value % 360) + 360) % 360
    if rot < 45 or rot >= 315:
        return 0
    if rot < 135:
        return 90
    if rot < 225:
        return 180
    return 270


def _to_number(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _raw_rotation(stream: dict[str, Any]) -> float:
    """Read rotation from the stream, tag first then side data."""
    tags = stream.get("tags") or {}
    rotation = _to_number(tags.get("rotate"))
    if rotation:
        return rotation

    # Newer ffprobe builds report a display matrix instead of the tag
    for side_data in stream.get("side_data_list") or []:
        if isinstance(side_data, dict) and side_data.get("rotation") is not None:
            return _to_number(side_data["rotation"])

    return 0.0


def parse_probe_output(stdout: str) -> MediaProbe:
    """Interpret ``ffprobe -show_streams -of json`` output.

    Args:
        stdout: Raw JSON text printed by ffprobe.

    Returns:
        MediaProbe with geometry of the first video stream, bucketed rotation
        and audio presence.

    Raises:
        MediaProbeError: The text is not a JSON object.
    """
    try:
        data = json.loads(stdout or "{}")
    except json.JSONDecodeError as e:
        msg = f"ffprobe returned invalid JSON: {e}"
        raise MediaProbeError(msg) from e

    if not isinstance(data, dict):
        msg = "ffprobe returned an unexpected document"
        raise MediaProbeError(msg)

    streams = [s for s in data.get("streams") or [] if isinstance(s, dict)]
    video = next((s for s in streams if s.get("codec_type") == "video"), None)
    has_audio = any(s.get("codec_type") == "audio" for s in streams)

    if video is None:
        return MediaProbe(has_audio=has_audio)

    return MediaProbe(
        width=int(_to_number(video.get("width"))),
        height=int(_to_number(video.get("height"))),
        rotation_degrees=normalize_rotation_degrees(_raw_rotation(video)),
        has_audio=has_audio,
    )


def probe_media(file_path: Path) -> MediaProbe:
    """Inspect a media file's streams.

    Args:
        file_path: Path to the media file.

    Returns:
        MediaProbe for the file.
    """
    output = run_media_tool(
        "ffprobe",
        ["-v", "error", "-show_streams", "-of", "json", str(file_path)],
        timeout_seconds=get_config().probe_timeout_seconds,
    )
    return parse_probe_output(output.stdout)


def get_media_duration(file_path: Path) -> float:
    """Get the container duration of a media file.

    Args:
        file_path: Path to the media file.

    Returns:
        Duration in seconds.

    Raises:
        MediaProbeError: ffprobe did not report a positive duration.
    """
    output = run_media_tool(
        "ffprobe",
        [
            "-v", "error",
            "-show_entries", "format=duration",
            "-of", "default=nw=1:nk=1",
            str(file_path),
        ],
        timeout_seconds=get_config().probe_timeout_seconds,
    )

    try:
        duration = float(output.stdout.strip())
    except ValueError as e:
        msg = f"Could not determine duration of {file_path.name}"
        raise MediaProbeError(msg) from e

    if not math.isfinite(duration) or duration <= 0:
        msg = f"Could not determine duration of {file_path.name}"
        raise MediaProbeError(msg)

    return duration


def rotation_filter(rotation_degrees: int) -> str | None:
    """Return the video filter that un-rotates frames, or None for 0."""
    return ROTATION_FILTERS.get(rotation_degrees)


def normalize_rotation(
    source_path: Path,
    output_path: Path,
    rotation_degrees: int,
) -> Path | None:
    """Bake a rotation tag into the pixels of a new file.

    The output carries a rotation tag of 0, so re-probing it reports no
    rotation and downstream stages never correct twice.

    Args:
        source_path: Original file with a rotation tag.
        output_path: Where to write the normalized file.
        rotation_degrees: Bucketed rotation of the source.

    Returns:
        ``output_path``, or None when no rotation is needed.

    Raises:
        MediaToolError: The re-encode failed. Callers fall back to the
            original file.
    """
    video_filter = rotation_filter(rotation_degrees)
    if video_filter is None:
        return None

    logger.info(
        "Normalizing %s rotation=%d -> %s",
        source_path.name,
        rotation_degrees,
        output_path.name,
    )
    output_path.parent.mkdir(parents=True, exist_ok=True)

    run_media_tool(
        "ffmpeg",
        [
            "-hide_banner",
            "-y",
            "-i", str(source_path),
            "-vf", video_filter,
            "-c:v", "libx264",
            "-preset", "veryfast",
            "-crf", "20",
            "-c:a", "aac",
            "-b:a", "128k",
            "-metadata:s:v:0", "rotate=0",
            "-movflags", "+faststart",
            str(output_path),
        ],
        timeout_seconds=get_config().normalize_timeout_seconds,
    )
    return output_path
