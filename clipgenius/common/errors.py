"""Exception hierarchy shared by the analysis, timeline and export layers."""


class ClipGeniusError(Exception):
    """Base class for all ClipGenius errors."""


class MediaToolError(ClipGeniusError):
    """An external media tool could not produce a result."""

    def __init__(self, command: str, message: str) -> None:
        super().__init__(f"{command}: {message}")
        self.command = command


class MediaToolUnavailableError(MediaToolError):
    """The tool binary could not be launched."""


class MediaToolTimeoutError(MediaToolError):
    """The tool exceeded its wall-clock limit and was killed."""

    def __init__(self, command: str, timeout_seconds: float) -> None:
        super().__init__(command, f"timed out after {timeout_seconds:.0f}s")
        self.timeout_seconds = timeout_seconds


class MediaToolExitError(MediaToolError):
    """The tool exited with a non-zero status."""

    def __init__(self, command: str, returncode: int, stderr: str) -> None:
        # ffmpeg prints the actual error last
        tail = stderr.strip().splitlines()[-1] if stderr.strip() else ""
        super().__init__(command, f"exit status {returncode}: {tail}")
        self.returncode = returncode
        self.stderr = stderr


class MediaProbeError(ClipGeniusError):
    """Probe output could not be interpreted."""


class ClipNotFoundError(ClipGeniusError, KeyError):
    """A timeline operation referenced an unknown clip id."""

    def __init__(self, clip_id: str) -> None:
        super().__init__(f"Clip {clip_id} not found")
        self.clip_id = clip_id

    def __str__(self) -> str:
        return f"Clip {self.clip_id} not found"


class TimelineValidationError(ClipGeniusError):
    """A timeline was rejected before any render work started."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class ExportFailedError(ClipGeniusError):
    """The final encode failed or timed out. No artifact was produced."""
