"""Analysis clip schemas - the output of the auto-timeline synthesizer."""

from enum import StrEnum, auto

from clipgenius.common.base_model import BaseClipGeniusModel


class ClipKind(StrEnum):
    """Structural role of an analysis clip."""

    SOURCE = auto()
    HIGHLIGHT = auto()
    BROLL = auto()


class AnalysisClip(BaseClipGeniusModel):
    """A labeled span within one asset's own timeline (0..duration)."""

    id: str
    label: str
    kind: ClipKind
    start: float
    end: float

    @property
    def length(self) -> float:
        """Return the clip length in seconds."""
        return self.end - self.start


class AnalysisTimeline(BaseClipGeniusModel):
    """Initial cut-based timeline for a single uploaded asset."""

    asset_id: str
    duration_seconds: float
    clips: list[AnalysisClip]

    @property
    def highlight_clips(self) -> list[AnalysisClip]:
        """Get only clips classified as highlights."""
        return [c for c in self.clips if c.kind == ClipKind.HIGHLIGHT]
