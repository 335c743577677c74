"""Waveform thumbnail rendering for the editor's audio lane."""

from pathlib import Path

from clipgenius.common.config import get_config
from clipgenius.common.media_tool import run_media_tool

WAVEFORM_SIZE = "1400x180"
WAVEFORM_COLOR = "#5dd6ff"


def generate_waveform(source_path: Path, output_path: Path) -> Path:
    """Render a mono waveform image of the whole asset audio track.

    Raises:
        MediaToolError: ffmpeg failed; the waveform is optional.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    run_media_tool(
        "ffmpeg",
        [
            "-hide_banner",
            "-y",
            "-i", str(source_path),
            "-filter_complex",
            f"aformat=channel_layouts=mono,showwavespic=s={WAVEFORM_SIZE}:colors={WAVEFORM_COLOR}",
            "-frames:v", "1",
            str(output_path),
        ],
        timeout_seconds=get_config().waveform_timeout_seconds,
    )
    return output_path
