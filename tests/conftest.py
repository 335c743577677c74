"""Shared fixtures: isolated config, media tool fakes and timeline builders."""

from collections.abc import Callable
from pathlib import Path

import pytest

from clipgenius.common.config import get_config
from clipgenius.common.media_tool import MediaToolOutput
from clipgenius.edit_executor.resolver import StaticAssetResolver
from clipgenius.timeline.schemas import AudioClip, ProjectClip, ProjectTimeline


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point work and export directories at a temp dir for every test."""
    monkeypatch.setenv("CLIPGENIUS_WORK_DIR", str(tmp_path / "work"))
    monkeypatch.setenv("CLIPGENIUS_EXPORT_DIR", str(tmp_path / "exports"))
    get_config.cache_clear()
    yield
    get_config.cache_clear()


class FakeMediaTool:
    """Stands in for ``run_media_tool``, recording every call.

    ``handler`` receives (command, args) and returns a MediaToolOutput or
    raises; by default every call succeeds with empty output.
    """

    def __init__(self, handler: Callable[[str, list[str]], MediaToolOutput] | None = None) -> None:
        self.handler = handler
        self.calls: list[tuple[str, list[str], float]] = []

    def __call__(self, command: str, args, timeout_seconds: float) -> MediaToolOutput:
        self.calls.append((command, list(args), timeout_seconds))
        if self.handler is None:
            return MediaToolOutput(stdout="", stderr="")
        return self.handler(command, list(args))


@pytest.fixture
def fake_tool() -> Callable[..., FakeMediaTool]:
    """Build a FakeMediaTool from an optional handler."""
    return FakeMediaTool


@pytest.fixture
def make_clip() -> Callable[..., ProjectClip]:
    """Build a video clip with short positional arguments."""

    def _make(
        clip_id: str,
        source_in: float,
        source_out: float,
        asset_id: str = "a1",
        **kwargs,
    ) -> ProjectClip:
        return ProjectClip(
            id=clip_id,
            asset_id=asset_id,
            source_in=source_in,
            source_out=source_out,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_audio_clip() -> Callable[..., AudioClip]:
    """Build an audio-lane clip with short positional arguments."""

    def _make(
        clip_id: str,
        source_in: float,
        source_out: float,
        start: float = 0.0,
        asset_id: str = "a1",
        **kwargs,
    ) -> AudioClip:
        return AudioClip(
            id=clip_id,
            asset_id=asset_id,
            source_in=source_in,
            source_out=source_out,
            start=start,
            **kwargs,
        )

    return _make


@pytest.fixture
def media_files(tmp_path: Path) -> dict[str, Path]:
    """Create placeholder source files for two assets."""
    media_dir = tmp_path / "media"
    media_dir.mkdir()
    files = {
        "a1": media_dir / "beach.mp4",
        "a2": media_dir / "city's night.mp4",
    }
    for path in files.values():
        path.write_bytes(b"\x00")
    return files


@pytest.fixture
def resolver(media_files: dict[str, Path]) -> StaticAssetResolver:
    """Resolver with a 30s asset with audio and a 20s silent asset."""
    return (
        StaticAssetResolver()
        .add("a1", media_files["a1"], duration_seconds=30.0, has_audio=True)
        .add("a2", media_files["a2"], duration_seconds=20.0, has_audio=False)
    )


@pytest.fixture
def simple_timeline(make_clip) -> ProjectTimeline:
    """Three clips totalling 10s: 4s, 2s and 4s."""
    return ProjectTimeline(
        project_id="p1",
        clips=[
            make_clip("c1", 0.0, 4.0),
            make_clip("c2", 10.0, 12.0),
            make_clip("c3", 20.0, 24.0),
        ],
    )
