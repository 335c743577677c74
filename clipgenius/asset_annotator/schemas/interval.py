"""Time interval schema used by silence and non-silence analysis."""

from clipgenius.common.base_model import BaseClipGeniusModel


class Interval(BaseClipGeniusModel):
    """A span of time in seconds."""

    start: float
    end: float

    @property
    def length(self) -> float:
        """Return the span length (negative for inverted spans)."""
        return self.end - self.start
