"""Scene-change detection from ffmpeg's scene score."""

import logging
import math
import re
from collections.abc import Iterable
from pathlib import Path

from clipgenius.common.config import get_config
from clipgenius.common.media_tool import run_media_tool

logger = logging.getLogger(__name__)

DEFAULT_SCENE_THRESHOLD = 0.25
DEFAULT_MAX_CUTS = 24
# Cuts closer than this collapse into the earlier one
MIN_CUT_GAP_SECONDS = 0.6

# showinfo prints one line per selected frame, e.g. "... pts_time:12.345 ..."
PTS_TIME_PATTERN = re.compile(r"pts_time:([0-9.]+)")


def collapse_close_times(
    times: Iterable[float],
    min_gap: float = MIN_CUT_GAP_SECONDS,
) -> list[float]:
    """Sort timestamps and drop any within ``min_gap`` of the last kept one."""
    collapsed: list[float] = []
    for t in sorted(times):
        if not collapsed or t - collapsed[-1] > min_gap:
            collapsed.append(t)
    return collapsed


def parse_scene_cut_times(stderr: str, max_cuts: int) -> list[float]:
    """Extract scene-cut timestamps from showinfo diagnostics.

    Args:
        stderr: Text ffmpeg wrote to stderr.
        max_cuts: Stop after this many timestamps.

    Returns:
        Sorted, collapsed timestamps. Empty when nothing matched.
    """
    times: list[float] = []
    for match in PTS_TIME_PATTERN.finditer(stderr):
        try:
            t = float(match.group(1))
        except ValueError:
            continue
        if math.isfinite(t):
            times.append(t)
        if len(times) >= max_cuts:
            break

    return collapse_close_times(times)


def detect_scene_cuts(
    file_path: Path,
    threshold: float = DEFAULT_SCENE_THRESHOLD,
    max_cuts: int = DEFAULT_MAX_CUTS,
) -> list[float]:
    """Detect visual scene changes in a video.

    Args:
        file_path: Path to the video file.
        threshold: Scene score (0..1) above which a frame counts as a cut.
        max_cuts: Maximum number of raw cuts to collect.

    Returns:
        Sorted scene-cut timestamps in seconds.

    Raises:
        MediaToolError: ffmpeg could not run; distinct from an empty result.
    """
    video_filter = f"select='gt(scene,{threshold})',showinfo"
    output = run_media_tool(
        "ffmpeg",
        ["-hide_banner", "-i", str(file_path), "-vf", video_filter, "-f", "null", "-"],
        timeout_seconds=get_config().scene_timeout_seconds,
    )

    cuts = parse_scene_cut_times(output.stderr, max_cuts)
    logger.info("Detected %d scene cuts in %s", len(cuts), file_path.name)
    return cuts
