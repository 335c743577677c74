"""Timeline schemas."""

from clipgenius.timeline.schemas.project import (
    AudioClip,
    ProjectClip,
    ProjectTimeline,
    SplitResult,
)

__all__ = [
    "AudioClip",
    "ProjectClip",
    "ProjectTimeline",
    "SplitResult",
]
