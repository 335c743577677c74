"""Upload pipeline that probes, normalizes and analyzes uploaded assets."""

import logging
import threading
import uuid
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from clipgenius.asset_annotator.probe import (
    get_media_duration,
    normalize_rotation,
    probe_media,
)
from clipgenius.asset_annotator.scenes import detect_scene_cuts
from clipgenius.asset_annotator.schemas import (
    AssetAnnotation,
    Interval,
    MediaAsset,
    MediaProbe,
)
from clipgenius.asset_annotator.silence import detect_silences
from clipgenius.asset_annotator.waveform import generate_waveform
from clipgenius.common.config import get_config
from clipgenius.common.errors import ClipGeniusError
from clipgenius.edit_planner.schemas import AnalysisTimeline
from clipgenius.edit_planner.synthesizer import build_analysis_timeline

logger = logging.getLogger(__name__)

# Stage failures that downgrade a feature instead of failing the upload
SOFT_STAGE_ERRORS = (ClipGeniusError, OSError)


def _normalized_asset(
    asset: MediaAsset,
    normalized_path: Path,
) -> MediaAsset:
    """Describe the rotation-corrected derivative of an asset."""
    quarter_turn = asset.rotation_degrees in (90, 270)
    return asset.model_copy(
        update={
            "source_path": normalized_path,
            "rotation_degrees": 0,
            "width": asset.height if quarter_turn else asset.width,
            "height": asset.width if quarter_turn else asset.height,
        }
    )


def annotate_upload(
    source_path: Path,
    work_dir: Path | None = None,
    asset_id: str | None = None,
) -> AssetAnnotation:
    """Run the upload pipeline for a single file.

    Stages run in order: probe, normalize, duration, scene cuts, silence,
    waveform. Each stage is best-effort: a failure is logged, recorded in
    ``degraded_stages`` and never undoes an earlier stage.

    Args:
        source_path: The uploaded file.
        work_dir: Where derived files are written.
        asset_id: Identity to assign; generated when omitted.

    Returns:
        AssetAnnotation for the upload.
    """
    asset_id = asset_id or str(uuid.uuid4())
    work_dir = work_dir or get_config().work_dir
    degraded: list[str] = []

    # Stage 1: probe
    try:
        probe = probe_media(source_path)
    except SOFT_STAGE_ERRORS as e:
        logger.warning("[asset=%s] Probe failed, assuming rotation 0: %s", asset_id, e)
        degraded.append("probe")
        probe = MediaProbe()

    # Stage 2: normalize rotation
    normalized_path: Path | None = None
    if probe.rotation_degrees != 0:
        try:
            normalized_path = normalize_rotation(
                source_path,
                work_dir / f"{asset_id}_norm.mp4",
                probe.rotation_degrees,
            )
        except SOFT_STAGE_ERRORS as e:
            logger.warning("[asset=%s] Normalization failed, using original: %s", asset_id, e)
            degraded.append("normalize")

    # Analyze the file the editor will play so cuts match the preview
    analyze_path = normalized_path or source_path

    # Stage 3: duration
    duration: float | None = None
    try:
        duration = get_media_duration(analyze_path)
    except SOFT_STAGE_ERRORS as e:
        logger.warning("[asset=%s] Duration unavailable, skipping analysis: %s", asset_id, e)
        degraded.append("duration")

    asset = MediaAsset(
        asset_id=asset_id,
        source_path=source_path,
        duration_seconds=duration,
        has_audio=probe.has_audio,
        rotation_degrees=probe.rotation_degrees,
        width=probe.width,
        height=probe.height,
    )

    analysis: AnalysisTimeline | None = None
    if duration is not None:
        # Stage 4: scene cuts
        cuts: list[float] = []
        try:
            cuts = detect_scene_cuts(analyze_path)
        except SOFT_STAGE_ERRORS as e:
            logger.warning("[asset=%s] Scene detection failed: %s", asset_id, e)
            degraded.append("scene_cuts")

        # Stage 5: silence
        silences: list[Interval] | None = None
        if probe.has_audio:
            try:
                silences = detect_silences(analyze_path)
            except SOFT_STAGE_ERRORS as e:
                logger.warning("[asset=%s] Silence detection failed: %s", asset_id, e)
                degraded.append("silence")

        analysis = build_analysis_timeline(asset_id, duration, cuts, silences)
        logger.info(
            "[asset=%s] Analysis: %.2fs, %d clips (%d highlights)",
            asset_id,
            duration,
            len(analysis.clips),
            len(analysis.highlight_clips),
        )

    # Stage 6: waveform
    waveform_path: Path | None = None
    if probe.has_audio:
        try:
            waveform_path = generate_waveform(analyze_path, work_dir / f"{asset_id}_wave.png")
        except SOFT_STAGE_ERRORS as e:
            logger.warning("[asset=%s] Waveform generation failed: %s", asset_id, e)
            degraded.append("waveform")

    return AssetAnnotation(
        asset=asset,
        normalized_asset=(
            _normalized_asset(asset, normalized_path) if normalized_path is not None else None
        ),
        waveform_path=waveform_path,
        analysis=analysis,
        degraded_stages=degraded,
    )


ProgressCallback = Callable[[int, int, str], None]

DEFAULT_MAX_WORKERS = 4


def annotate_uploads(
    source_paths: list[Path],
    work_dir: Path | None = None,
    on_progress: ProgressCallback | None = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> list[AssetAnnotation]:
    """Annotate several uploads in parallel.

    Args:
        source_paths: Uploaded files.
        work_dir: Where derived files are written.
        on_progress: Optional callback called with (current, total, filename).
        max_workers: Maximum number of parallel workers.

    Returns:
        Annotations in the same order as ``source_paths``.
    """
    total = len(source_paths)
    completed = 0
    lock = threading.Lock()

    def update_progress(filename: str) -> None:
        nonlocal completed
        with lock:
            completed += 1
            if on_progress:
                on_progress(completed, total, filename)

    results: dict[int, AssetAnnotation] = {}

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(annotate_upload, path, work_dir): idx
            for idx, path in enumerate(source_paths)
        }

        for future in as_completed(futures):
            idx = futures[future]
            results[idx] = future.result()
            update_progress(source_paths[idx].name)

    # Keep upload order regardless of completion order
    return [results[idx] for idx in range(total)]
