"""Render plan schemas - the output of the render compiler."""

from enum import StrEnum, auto
from pathlib import Path

from clipgenius.common.base_model import BaseClipGeniusModel


class ExportResolution(StrEnum):
    """Fixed output height presets; width follows the aspect ratio."""

    HD_720 = "720p"
    FULL_HD_1080 = "1080p"
    UHD_4K = "4K"


class OutputFormat(StrEnum):
    """Supported export containers."""

    MP4 = "MP4"


class AudioMode(StrEnum):
    """Where the exported audio track comes from."""

    MIX = auto()  # Built mix graph
    PASSTHROUGH = auto()  # The concatenation's own audio
    NONE = auto()  # No audio stream


class AssetInfo(BaseClipGeniusModel):
    """What the compiler needs to know about a source asset."""

    duration_seconds: float
    has_audio: bool


class VideoSegment(BaseClipGeniusModel):
    """One entry of the concat demuxer list."""

    source_path: Path
    inpoint: float
    outpoint: float


class AudioMixSegment(BaseClipGeniusModel):
    """One resolved audio segment after clamping."""

    # ffmpeg input index of the source file
    input_index: int
    source_in: float
    source_out: float
    # Project time where the segment starts
    start: float
    volume: float
    fade_in: float = 0.0
    fade_out: float = 0.0

    @property
    def length(self) -> float:
        """Return the segment length in seconds."""
        return self.source_out - self.source_in


class AudioMixGraph(BaseClipGeniusModel):
    """A filter_complex description producing the exported audio."""

    # Deduplicated audio sources in ffmpeg input order
    inputs: list[Path]
    segments: list[AudioMixSegment]
    filter_graph: str
    output_label: str = "aout"


class RenderPlan(BaseClipGeniusModel):
    """Everything a single encode invocation needs. Discarded after use."""

    project_id: str
    video_segments: list[VideoSegment]
    audio_mode: AudioMode
    audio_mix: AudioMixGraph | None = None
    resolution: ExportResolution
    output_format: OutputFormat
    duration_seconds: float


class ExportArtifact(BaseClipGeniusModel):
    """A finished export."""

    project_id: str
    path: Path
    file_name: str
    duration_seconds: float
