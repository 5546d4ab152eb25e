"""
Little Stars - Profile API Router
Endpoints for the profile summary, level, activity calendar and streaks
"""
import uuid
from datetime import date, timedelta
from typing import List

from fastapi import APIRouter, Query

from littlestars.api.deps import CLIENT_ERRORS, DbSession, to_http_exception
from littlestars.core.config import settings
from littlestars.schemas.profile import (
    DailyActivityResponse,
    LevelInfoResponse,
    ProfileSummary,
)
from littlestars.schemas.streak import MonthlyStreakResponse, StreakCalendarResponse
from littlestars.services.profile import ProfileService
from littlestars.services.streak import StreakReportService

router = APIRouter(prefix="/profile", tags=["Profile"])

MonthQuery = Query(default=None, description="Month as YYYY-MM, defaults to the current month")


@router.get("/{child_id}", response_model=ProfileSummary)
async def get_profile(child_id: uuid.UUID, db: DbSession):
    """Get the child's profile summary with stats."""
    service = ProfileService(db)
    try:
        return await service.get_profile_summary(child_id)
    except CLIENT_ERRORS as e:
        raise to_http_exception(e)


@router.get("/{child_id}/level", response_model=LevelInfoResponse)
async def get_level_info(child_id: uuid.UUID, db: DbSession):
    """Level, title and stars needed for the next level."""
    service = ProfileService(db)
    try:
        return await service.get_level_info(child_id)
    except CLIENT_ERRORS as e:
        raise to_http_exception(e)


@router.get("/{child_id}/calendar", response_model=List[DailyActivityResponse])
async def get_calendar(
    child_id: uuid.UUID,
    db: DbSession,
    start_date: date | None = None,
    end_date: date | None = None,
):
    """
    Get daily activity for a date range.

    Defaults to the last DEFAULT_CALENDAR_DAYS days up to today.
    """
    end = end_date or date.today()
    start = start_date or end - timedelta(days=settings.DEFAULT_CALENDAR_DAYS)

    service = ProfileService(db)
    try:
        return await service.get_activity_calendar(child_id, start, end)
    except CLIENT_ERRORS as e:
        raise to_http_exception(e)


@router.get("/{child_id}/streak", response_model=MonthlyStreakResponse)
async def get_monthly_streak(
    child_id: uuid.UUID,
    db: DbSession,
    month: str | None = MonthQuery,
):
    """Monthly streak report with achievement badge."""
    service = StreakReportService(db)
    try:
        return await service.get_monthly_streak(child_id, month)
    except CLIENT_ERRORS as e:
        raise to_http_exception(e)


@router.get("/{child_id}/streak/calendar", response_model=StreakCalendarResponse)
async def get_streak_calendar(
    child_id: uuid.UUID,
    db: DbSession,
    month: str | None = MonthQuery,
):
    """Every day of the month marked active or not."""
    service = StreakReportService(db)
    try:
        return await service.get_streak_calendar(child_id, month)
    except CLIENT_ERRORS as e:
        raise to_http_exception(e)
