"""Project timeline schemas - the editable value exchanged with the editor."""

from pydantic import Field

from clipgenius.common.base_model import BaseClipGeniusModel


class ProjectClip(BaseClipGeniusModel):
    """A clip on the main video lane.

    Its project-time position is the sum of the lengths of all preceding
    clips and is never stored.
    """

    id: str
    asset_id: str
    label: str = ""

    # Source cut points (in/out within the source file)
    source_in: float
    source_out: float

    # Linked-audio settings
    audio_volume: float = 1.0
    audio_muted: bool = False
    audio_fade_in: float = 0.0
    audio_fade_out: float = 0.0

    @property
    def length(self) -> float:
        """Return the played length, never negative."""
        return max(0.0, self.source_out - self.source_in)

    @property
    def has_default_audio(self) -> bool:
        """Return True when linked audio plays untouched."""
        return (
            self.audio_volume == 1.0
            and not self.audio_muted
            and self.audio_fade_in <= 0
            and self.audio_fade_out <= 0
        )


class AudioClip(BaseClipGeniusModel):
    """An independently placed clip on the unlinked audio lane."""

    id: str
    asset_id: str
    label: str = ""
    source_in: float
    source_out: float
    # Absolute project time
    start: float = 0.0
    volume: float = 1.0
    muted: bool = False
    fade_in: float = 0.0
    fade_out: float = 0.0

    @property
    def length(self) -> float:
        """Return the played length, never negative."""
        return max(0.0, self.source_out - self.source_in)

    @property
    def end(self) -> float:
        """Return the project time where this clip stops."""
        return self.start + self.length


class ProjectTimeline(BaseClipGeniusModel):
    """The complete editable project as held by the editor."""

    project_id: str
    clips: list[ProjectClip] = Field(default_factory=list)
    audio_linked: bool = True
    audio_clips: list[AudioClip] = Field(default_factory=list)
    track_audio_muted: bool = False
    track_audio_volume: float = 1.0


class SplitResult(BaseClipGeniusModel):
    """Outcome of a successful split."""

    timeline: ProjectTimeline
    selected_clip_id: str
