"""Export routes."""

import logging
import uuid

from fastapi import APIRouter, HTTPException

from clipgenius.api.schemas.requests import ExportRequest, OtioExportRequest
from clipgenius.api.schemas.responses import ExportResponse, OtioExportResponse
from clipgenius.common.config import get_config
from clipgenius.common.errors import ExportFailedError, TimelineValidationError
from clipgenius.edit_executor.otio_export import write_otio
from clipgenius.edit_executor.providers import export_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=ExportResponse)
def export_timeline(request: ExportRequest) -> ExportResponse:
    """Render a timeline to a single MP4 file.

    Validation failures are returned with their reason; render failures are
    reported without tool output.
    """
    try:
        artifact = export_service().export(
            request.timeline,
            request.build_resolver(),
            resolution=request.resolution,
            output_format=request.output_format,
        )
    except TimelineValidationError as e:
        raise HTTPException(status_code=400, detail=e.reason) from e
    except ExportFailedError as e:
        raise HTTPException(status_code=502, detail="Export failed") from e

    return ExportResponse(
        artifact_path=artifact.path,
        file_name=artifact.file_name,
        duration_seconds=artifact.duration_seconds,
    )


@router.post("/otio", response_model=OtioExportResponse)
def export_otio(request: OtioExportRequest) -> OtioExportResponse:
    """Write the timeline as an OpenTimelineIO file for NLE interchange."""
    output_path = get_config().export_dir / f"timeline_{uuid.uuid4().hex[:12]}.otio"
    try:
        write_otio(
            request.timeline,
            request.build_resolver(),
            output_path,
            frame_rate=request.frame_rate,
        )
    except TimelineValidationError as e:
        raise HTTPException(status_code=400, detail=e.reason) from e

    logger.info("[project=%s] Wrote OTIO: %s", request.timeline.project_id, output_path)
    return OtioExportResponse(otio_path=output_path)
