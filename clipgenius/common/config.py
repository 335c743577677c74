"""Media tool configuration and runtime directories."""

import os
from functools import cache
from pathlib import Path

from dotenv import load_dotenv

from clipgenius.common.base_model import BaseClipGeniusModel

# Load .env file from the project root
_project_dir = Path(__file__).parent.parent.parent
load_dotenv(_project_dir / ".env")


class ClipGeniusConfig(BaseClipGeniusModel):
    """Configuration for external media tools and output locations."""

    ffmpeg_binary: str = "ffmpeg"
    ffprobe_binary: str = "ffprobe"

    work_dir: Path = Path("~/.clipgenius/work")
    export_dir: Path = Path("~/.clipgenius/exports")

    # Wall-clock limits per tool invocation (seconds)
    probe_timeout_seconds: float = 30.0
    scene_timeout_seconds: float = 120.0
    silence_timeout_seconds: float = 120.0
    waveform_timeout_seconds: float = 300.0
    normalize_timeout_seconds: float = 600.0
    export_timeout_seconds: float = 600.0


def _env_seconds(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    return float(raw)


@cache
def get_config() -> ClipGeniusConfig:
    """Get configuration from environment variables.

    Environment variables:
        CLIPGENIUS_FFMPEG_BINARY: ffmpeg executable (default: ffmpeg)
        CLIPGENIUS_FFPROBE_BINARY: ffprobe executable (default: ffprobe)
        CLIPGENIUS_WORK_DIR: Directory for normalized files and waveforms
        CLIPGENIUS_EXPORT_DIR: Directory for rendered exports
        CLIPGENIUS_<STAGE>_TIMEOUT_SECONDS: Per-stage timeout overrides
            (PROBE, SCENE, SILENCE, WAVEFORM, NORMALIZE, EXPORT)
    """
    defaults = ClipGeniusConfig()

    return ClipGeniusConfig(
        ffmpeg_binary=os.environ.get("CLIPGENIUS_FFMPEG_BINARY", defaults.ffmpeg_binary),
        ffprobe_binary=os.environ.get("CLIPGENIUS_FFPROBE_BINARY", defaults.ffprobe_binary),
        work_dir=Path(
            os.environ.get("CLIPGENIUS_WORK_DIR", str(defaults.work_dir))
        ).expanduser(),
        export_dir=Path(
            os.environ.get("CLIPGENIUS_EXPORT_DIR", str(defaults.export_dir))
        ).expanduser(),
        probe_timeout_seconds=_env_seconds(
            "CLIPGENIUS_PROBE_TIMEOUT_SECONDS", defaults.probe_timeout_seconds
        ),
        scene_timeout_seconds=_env_seconds(
            "CLIPGENIUS_SCENE_TIMEOUT_SECONDS", defaults.scene_timeout_seconds
        ),
        silence_timeout_seconds=_env_seconds(
            "CLIPGENIUS_SILENCE_TIMEOUT_SECONDS", defaults.silence_timeout_seconds
        ),
        waveform_timeout_seconds=_env_seconds(
            "CLIPGENIUS_WAVEFORM_TIMEOUT_SECONDS", defaults.waveform_timeout_seconds
        ),
        normalize_timeout_seconds=_env_seconds(
            "CLIPGENIUS_NORMALIZE_TIMEOUT_SECONDS", defaults.normalize_timeout_seconds
        ),
        export_timeout_seconds=_env_seconds(
            "CLIPGENIUS_EXPORT_TIMEOUT_SECONDS", defaults.export_timeout_seconds
        ),
    )
