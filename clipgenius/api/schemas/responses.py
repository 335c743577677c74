"""API response schemas."""

from pathlib import Path

from clipgenius.common.base_model import BaseClipGeniusModel
from clipgenius.timeline.schemas import ProjectTimeline


class TimelineSummaryResponse(BaseClipGeniusModel):
    """Derived layout of a project timeline."""

    project_id: str
    duration_seconds: float
    clip_offsets: dict[str, float]


class TimelineResponse(BaseClipGeniusModel):
    """A timeline returned by an edit operation."""

    timeline: ProjectTimeline


class SplitClipResponse(TimelineResponse):
    """Result of a split; ``selected_clip_id`` is the right half.

    When the split was not applicable the timeline is returned unchanged
    with no selection.
    """

    selected_clip_id: str | None = None
    applied: bool = True


class ExportResponse(BaseClipGeniusModel):
    """Response after a successful render."""

    artifact_path: Path
    file_name: str
    duration_seconds: float


class OtioExportResponse(BaseClipGeniusModel):
    """Response after writing an interchange file."""

    otio_path: Path
