"""API request schemas."""

from pathlib import Path

from pydantic import Field

from clipgenius.common.base_model import BaseClipGeniusModel
from clipgenius.edit_executor.resolver import StaticAssetResolver
from clipgenius.edit_executor.schemas import ExportResolution, OutputFormat
from clipgenius.timeline.schemas import ProjectTimeline


class AnalyzeAssetRequest(BaseClipGeniusModel):
    """Request to run the upload pipeline on a file already on disk."""

    source_path: Path
    asset_id: str | None = None


class AssetReference(BaseClipGeniusModel):
    """An asset the timeline refers to, as known to the caller."""

    asset_id: str = Field(min_length=1)
    source_path: Path
    duration_seconds: float = Field(gt=0)
    has_audio: bool = True


class TimelineRequest(BaseClipGeniusModel):
    """Request carrying a project timeline."""

    timeline: ProjectTimeline


class SplitClipRequest(TimelineRequest):
    """Request to split a clip at a source time."""

    clip_id: str
    seconds: float


class TrimTimelineRequest(TimelineRequest):
    """Request to trim the project to a target length."""

    target_seconds: float


class ReorderClipRequest(TimelineRequest):
    """Request to move a clip to the slot nearest a project time."""

    clip_id: str
    project_time: float = Field(ge=0)


class ExportRequest(TimelineRequest):
    """Request to render a timeline to a single file."""

    assets: list[AssetReference] = Field(default_factory=list)
    resolution: str = ExportResolution.HD_720
    output_format: str = Field(default=OutputFormat.MP4, alias="format")

    def build_resolver(self) -> StaticAssetResolver:
        """Build a resolver over the referenced assets."""
        resolver = StaticAssetResolver()
        for asset in self.assets:
            resolver.add(
                asset.asset_id,
                asset.source_path,
                duration_seconds=asset.duration_seconds,
                has_audio=asset.has_audio,
            )
        return resolver


class OtioExportRequest(ExportRequest):
    """Request to write the timeline as an OpenTimelineIO file."""

    frame_rate: float = Field(default=30.0, gt=0)
