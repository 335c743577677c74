"""API schemas for requests and responses."""

from clipgenius.api.schemas.requests import (
    AnalyzeAssetRequest,
    AssetReference,
    ExportRequest,
    OtioExportRequest,
    ReorderClipRequest,
    SplitClipRequest,
    TimelineRequest,
    TrimTimelineRequest,
)
from clipgenius.api.schemas.responses import (
    ExportResponse,
    OtioExportResponse,
    SplitClipResponse,
    TimelineResponse,
    TimelineSummaryResponse,
)

__all__ = [
    "AnalyzeAssetRequest",
    "AssetReference",
    "ExportRequest",
    "OtioExportRequest",
    "ReorderClipRequest",
    "SplitClipRequest",
    "TimelineRequest",
    "TrimTimelineRequest",
    "ExportResponse",
    "OtioExportResponse",
    "SplitClipResponse",
    "TimelineResponse",
    "TimelineSummaryResponse",
]
