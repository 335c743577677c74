"""Bounded-time invocation of ffmpeg/ffprobe."""

import logging
import subprocess
from collections.abc import Sequence

from clipgenius.common.base_model import BaseClipGeniusModel
from clipgenius.common.config import get_config
from clipgenius.common.errors import (
    MediaToolExitError,
    MediaToolTimeoutError,
    MediaToolUnavailableError,
)

logger = logging.getLogger(__name__)


class MediaToolOutput(BaseClipGeniusModel):
    """Captured text output of a finished tool run."""

    stdout: str
    stderr: str


def _resolve_binary(command: str) -> str:
    config = get_config()
    if command == "ffmpeg":
        return config.ffmpeg_binary
    if command == "ffprobe":
        return config.ffprobe_binary
    return command


def run_media_tool(
    command: str,
    args: Sequence[str],
    timeout_seconds: float,
) -> MediaToolOutput:
    """Run a media tool with an explicit argument vector.

    Arguments are never joined into a shell string; filter graphs contain
    quotes, commas and brackets that must reach the tool untouched.

    Args:
        command: Logical tool name ("ffmpeg" or "ffprobe").
        args: Arguments after the executable.
        timeout_seconds: Wall-clock limit. The process is killed on expiry.

    Returns:
        MediaToolOutput with decoded stdout and stderr.

    Raises:
        MediaToolUnavailableError: The binary could not be started.
        MediaToolTimeoutError: The limit expired.
        MediaToolExitError: The tool exited with a non-zero status.
    """
    argv = [_resolve_binary(command), *args]
    logger.debug("Running %s with %d args (timeout=%.0fs)", command, len(args), timeout_seconds)

    try:
        result = subprocess.run(
            argv,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout_seconds,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        raise MediaToolTimeoutError(command, timeout_seconds) from e
    except OSError as e:
        raise MediaToolUnavailableError(command, str(e)) from e

    if result.returncode != 0:
        raise MediaToolExitError(command, result.returncode, result.stderr or "")

    return MediaToolOutput(stdout=result.stdout or "", stderr=result.stderr or "")
