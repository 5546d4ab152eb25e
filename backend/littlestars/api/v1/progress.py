"""
Little Stars - Progress API Router
Endpoints for recording attempts and reading progress
"""
import uuid
from typing import List

from fastapi import APIRouter, Query, status

from littlestars.api.deps import CLIENT_ERRORS, DbSession, to_http_exception
from littlestars.models.progress import ContentType
from littlestars.schemas.progress import (
    LeaderboardEntry,
    ProgressRecordResponse,
    ProgressSummary,
    RecordAttemptRequest,
)
from littlestars.services.progress import ProgressService

router = APIRouter(prefix="/progress", tags=["Progress"])


@router.get("/leaderboard", response_model=List[LeaderboardEntry])
async def get_leaderboard(
    db: DbSession,
    limit: int | None = Query(default=None, ge=1, le=100),
):
    """Children ranked by the stars earned across their progress."""
    service = ProgressService(db)
    return await service.get_leaderboard(limit)


@router.post(
    "/{child_id}",
    response_model=ProgressRecordResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_attempt(
    child_id: uuid.UUID,
    request: RecordAttemptRequest,
    db: DbSession,
):
    """
    Record one attempt of a content item.

    Awards stars for completed items (1 below 80, 2 from 80, 3 from 95),
    updates the streak, the level and today's activity.
    """
    service = ProgressService(db)
    try:
        record = await service.record_attempt(
            child_id=child_id,
            content_type=request.content_type,
            content_id=request.content_id,
            activity_type=request.activity_type,
            completed=request.completed,
            score=request.score,
            time_spent_seconds=request.time_spent_seconds,
        )
    except CLIENT_ERRORS as e:
        raise to_http_exception(e)

    return ProgressRecordResponse.model_validate(record)


@router.get("/{child_id}", response_model=List[ProgressRecordResponse])
async def list_progress(child_id: uuid.UUID, db: DbSession):
    """All progress records of a child, newest first."""
    service = ProgressService(db)
    try:
        records = await service.list_progress(child_id)
    except CLIENT_ERRORS as e:
        raise to_http_exception(e)
    return [ProgressRecordResponse.model_validate(r) for r in records]


@router.get("/{child_id}/summary", response_model=ProgressSummary)
async def get_progress_summary(child_id: uuid.UUID, db: DbSession):
    """Items learned per module with stars, streak and level."""
    service = ProgressService(db)
    try:
        return await service.get_progress_summary(child_id)
    except CLIENT_ERRORS as e:
        raise to_http_exception(e)


@router.get("/{child_id}/content/{content_type}", response_model=List[ProgressRecordResponse])
async def get_content_progress(
    child_id: uuid.UUID,
    content_type: ContentType,
    db: DbSession,
):
    """Progress for one module, ordered by content id."""
    service = ProgressService(db)
    try:
        records = await service.get_content_progress(child_id, content_type)
    except CLIENT_ERRORS as e:
        raise to_http_exception(e)
    return [ProgressRecordResponse.model_validate(r) for r in records]
