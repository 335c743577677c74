"""Audio silence detection from ffmpeg's silencedetect filter."""

import logging
import math
import re
from pathlib import Path

from clipgenius.asset_annotator.intervals import SILENCE_PAD_SECONDS, merge_intervals
from clipgenius.asset_annotator.schemas import Interval
from clipgenius.common.config import get_config
from clipgenius.common.media_tool import run_media_tool

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD_DB = -35.0
DEFAULT_MIN_SILENCE_SECONDS = 0.35

SILENCE_START_PATTERN = re.compile(r"silence_start:\s*([0-9.]+)")
SILENCE_END_PATTERN = re.compile(r"silence_end:\s*([0-9.]+)")


def _collect(pattern: re.Pattern[str], text: str) -> list[float]:
    values: list[float] = []
    for match in pattern.finditer(text):
        try:
            value = float(match.group(1))
        except ValueError:
            continue
        if math.isfinite(value):
            values.append(value)
    return values


def parse_silence_intervals(stderr: str) -> list[Interval]:
    """Pair silence markers from silencedetect diagnostics.

    Starts and ends are collected independently and paired by position.
    A silence that runs to end-of-file never prints an end marker and is
    dropped rather than closed at the file duration.

    Args:
        stderr: Text ffmpeg wrote to stderr.

    Returns:
        Padded, merged silence intervals sorted by start.
    """
    starts = _collect(SILENCE_START_PATTERN, stderr)
    ends = _collect(SILENCE_END_PATTERN, stderr)

    pairs = [
        Interval(start=start, end=end)
        for start, end in zip(starts, ends, strict=False)
        if end > start
    ]
    if len(starts) > len(ends):
        logger.debug("Dropping %d unterminated silence(s)", len(starts) - len(ends))

    return merge_intervals(pairs, pad=SILENCE_PAD_SECONDS)


def detect_silences(
    file_path: Path,
    threshold_db: float = DEFAULT_THRESHOLD_DB,
    min_silence_seconds: float = DEFAULT_MIN_SILENCE_SECONDS,
) -> list[Interval]:
    """Detect silent spans in a file's audio.

    Args:
        file_path: Path to the media file.
        threshold_db: Level below which audio counts as silence.
        min_silence_seconds: Minimum silence duration to report.

    Returns:
        Merged silence intervals.

    Raises:
        MediaToolError: ffmpeg could not run; distinct from an empty result.
    """
    audio_filter = f"silencedetect=n={threshold_db:g}dB:d={min_silence_seconds:g}"
    output = run_media_tool(
        "ffmpeg",
        ["-hide_banner", "-i", str(file_path), "-af", audio_filter, "-f", "null", "-"],
        timeout_seconds=get_config().silence_timeout_seconds,
    )

    silences = parse_silence_intervals(output.stderr)
    logger.info("Detected %d silent spans in %s", len(silences), file_path.name)
    return silences
