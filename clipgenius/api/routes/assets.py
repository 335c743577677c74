"""Asset analysis routes."""

import logging

from fastapi import APIRouter, HTTPException

from clipgenius.api.schemas.requests import AnalyzeAssetRequest
from clipgenius.asset_annotator.annotator import annotate_upload
from clipgenius.asset_annotator.schemas import AssetAnnotation

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/analyze", response_model=AssetAnnotation)
def analyze_asset(request: AnalyzeAssetRequest) -> AssetAnnotation:
    """Probe, normalize and analyze an uploaded file.

    Analysis stages are best-effort; failures are reported in
    ``degraded_stages`` rather than as an error response.
    """
    if not request.source_path.is_file():
        raise HTTPException(status_code=404, detail="Source file not found")

    annotation = annotate_upload(request.source_path, asset_id=request.asset_id)
    if annotation.degraded_stages:
        logger.info(
            "[asset=%s] Degraded stages: %s",
            annotation.asset.asset_id,
            ", ".join(annotation.degraded_stages),
        )
    return annotation
