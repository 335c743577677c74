"""Timeline editing routes."""

from fastapi import APIRouter, HTTPException

from clipgenius.api.schemas.requests import (
    ReorderClipRequest,
    SplitClipRequest,
    TimelineRequest,
    TrimTimelineRequest,
)
from clipgenius.api.schemas.responses import (
    SplitClipResponse,
    TimelineResponse,
    TimelineSummaryResponse,
)
from clipgenius.common.errors import ClipNotFoundError
from clipgenius.timeline.operations import (
    project_clip_offsets,
    project_duration_seconds,
    reorder_clip_to_time,
    split_clip_at,
    trim_to_target_seconds,
)

router = APIRouter()


@router.post("/summary", response_model=TimelineSummaryResponse)
def summarize_timeline(request: TimelineRequest) -> TimelineSummaryResponse:
    """Return the project duration and clip start offsets."""
    return TimelineSummaryResponse(
        project_id=request.timeline.project_id,
        duration_seconds=project_duration_seconds(request.timeline),
        clip_offsets=project_clip_offsets(request.timeline),
    )


@router.post("/split", response_model=SplitClipResponse)
def split_clip(request: SplitClipRequest) -> SplitClipResponse:
    """Split a clip at a source time.

    A point too close to either edge leaves the timeline unchanged and
    reports ``applied=False``.
    """
    if not any(clip.id == request.clip_id for clip in request.timeline.clips):
        raise HTTPException(status_code=404, detail="Clip not found")

    result = split_clip_at(request.timeline, request.clip_id, request.seconds)
    if result is None:
        return SplitClipResponse(timeline=request.timeline, selected_clip_id=None, applied=False)

    return SplitClipResponse(
        timeline=result.timeline,
        selected_clip_id=result.selected_clip_id,
        applied=True,
    )


@router.post("/trim", response_model=TimelineResponse)
def trim_timeline(request: TrimTimelineRequest) -> TimelineResponse:
    """Trim the project to a target length."""
    return TimelineResponse(
        timeline=trim_to_target_seconds(request.timeline, request.target_seconds),
    )


@router.post("/reorder", response_model=TimelineResponse)
def reorder_clip(request: ReorderClipRequest) -> TimelineResponse:
    """Move a clip to the slot nearest a project time."""
    try:
        timeline = reorder_clip_to_time(request.timeline, request.clip_id, request.project_time)
    except ClipNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return TimelineResponse(timeline=timeline)
