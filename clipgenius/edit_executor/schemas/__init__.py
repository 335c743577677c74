"""EditExecutor schemas."""

from clipgenius.edit_executor.schemas.render_plan import (
    AssetInfo,
    AudioMixGraph,
    AudioMixSegment,
    AudioMode,
    ExportArtifact,
    ExportResolution,
    OutputFormat,
    RenderPlan,
    VideoSegment,
)

__all__ = [
    "AssetInfo",
    "AudioMixGraph",
    "AudioMixSegment",
    "AudioMode",
    "ExportArtifact",
    "ExportResolution",
    "OutputFormat",
    "RenderPlan",
    "VideoSegment",
]
