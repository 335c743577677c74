"""EditPlanner schemas."""

from clipgenius.edit_planner.schemas.analysis import (
    AnalysisClip,
    AnalysisTimeline,
    ClipKind,
)

__all__ = [
    "AnalysisClip",
    "AnalysisTimeline",
    "ClipKind",
]
