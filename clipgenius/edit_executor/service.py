"""ExportService for rendering a ProjectTimeline to a single file."""

import logging
import re
import tempfile
import uuid
from pathlib import Path

from clipgenius.common.config import get_config
from clipgenius.common.errors import ExportFailedError, MediaToolError
from clipgenius.common.media_tool import run_media_tool
from clipgenius.edit_executor.render_plan import (
    build_ffmpeg_args,
    compile_render_plan,
    concat_list_text,
)
from clipgenius.edit_executor.resolver import AssetResolver
from clipgenius.edit_executor.schemas import (
    ExportArtifact,
    ExportResolution,
    OutputFormat,
)
from clipgenius.timeline.schemas import ProjectTimeline

logger = logging.getLogger(__name__)

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9_-]+")


class ExportService:
    """Service for exporting timelines through one ffmpeg encode."""

    def __init__(self, export_dir: Path | None = None) -> None:
        """Initialize the export service.

        Args:
            export_dir: Where artifacts are written. Defaults to the
                configured export directory.
        """
        self.export_dir = export_dir or get_config().export_dir

    def export(
        self,
        timeline: ProjectTimeline,
        resolver: AssetResolver,
        resolution: str = ExportResolution.HD_720,
        output_format: str = OutputFormat.MP4,
    ) -> ExportArtifact:
        """Render a timeline to a uniquely named file.

        Args:
            timeline: The finished project.
            resolver: Asset lookup.
            resolution: Output height preset.
            output_format: Output container.

        Returns:
            ExportArtifact describing the rendered file.

        Raises:
            TimelineValidationError: The timeline was rejected up front.
            ExportFailedError: The encode failed or timed out; nothing was
                written to the export directory.
        """
        plan = compile_render_plan(timeline, resolver, resolution, output_format)

        safe_id = _UNSAFE_NAME_CHARS.sub("_", timeline.project_id) or "project"
        file_name = f"export_{safe_id}_{uuid.uuid4().hex[:12]}.mp4"
        output_path = self.export_dir / file_name
        partial_path = self.export_dir / f".{file_name}.part"

        try:
            self.export_dir.mkdir(parents=True, exist_ok=True)
            with tempfile.TemporaryDirectory(prefix="clipgenius_") as temp_dir:
                concat_path = Path(temp_dir) / "segments.txt"
                concat_path.write_text(concat_list_text(plan.video_segments), encoding="utf-8")

                logger.info(
                    "[project=%s] Encoding %s (%s, audio=%s)",
                    timeline.project_id,
                    file_name,
                    plan.resolution,
                    plan.audio_mode,
                )
                run_media_tool(
                    "ffmpeg",
                    build_ffmpeg_args(plan, concat_path, partial_path),
                    timeout_seconds=get_config().export_timeout_seconds,
                )

            if not partial_path.is_file():
                logger.error("[project=%s] Encoder produced no output", timeline.project_id)
                msg = "Export failed"
                raise ExportFailedError(msg)

            partial_path.replace(output_path)
        except (MediaToolError, OSError) as e:
            logger.error("[project=%s] Export failed: %s", timeline.project_id, e)
            # exists() is False when export_dir itself is unusable
            if partial_path.exists():
                partial_path.unlink()
            msg = "Export failed"
            raise ExportFailedError(msg) from e

        logger.info("[project=%s] Export ready: %s", timeline.project_id, output_path)

        return ExportArtifact(
            project_id=timeline.project_id,
            path=output_path,
            file_name=file_name,
            duration_seconds=plan.duration_seconds,
        )
