"""Schemas for probed media assets and upload annotations."""

from pathlib import Path

from pydantic import Field

from clipgenius.common.base_model import BaseClipGeniusModel
from clipgenius.edit_planner.schemas import AnalysisTimeline


class MediaProbe(BaseClipGeniusModel):
    """Container/stream facts reported by ffprobe."""

    width: int = 0
    height: int = 0
    # Bucketed to 0, 90, 180 or 270
    rotation_degrees: int = 0
    has_audio: bool = False


class MediaAsset(BaseClipGeniusModel):
    """A raw uploaded media file. Immutable after upload."""

    asset_id: str
    source_path: Path
    duration_seconds: float | None = None
    has_audio: bool = False
    rotation_degrees: int = 0
    width: int = 0
    height: int = 0


class AssetAnnotation(BaseClipGeniusModel):
    """Everything the upload pipeline learned about one asset.

    Each optional field is ``None`` when its stage was skipped or failed.
    """

    asset: MediaAsset
    # Rotation-corrected derivative, present only when the source was rotated
    normalized_asset: MediaAsset | None = None
    waveform_path: Path | None = None
    analysis: AnalysisTimeline | None = None
    # Names of stages that failed and were downgraded
    degraded_stages: list[str] = Field(default_factory=list)

    @property
    def playback_path(self) -> Path:
        """Return the file the editor and exporter should read."""
        if self.normalized_asset is not None:
            return self.normalized_asset.source_path
        return self.asset.source_path
