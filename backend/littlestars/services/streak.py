"""
Little Stars - Monthly Streak Reporter
Read-only month reports built from the daily activity aggregates
"""
import calendar
import math
import re
import uuid
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from littlestars.core.config import settings
from littlestars.core.exceptions import ProgressValidationError
from littlestars.models.progress import DailyActivity
from littlestars.schemas.streak import (
    Badge,
    CalendarDay,
    MonthlyStreakResponse,
    MonthStats,
    StreakCalendarResponse,
    StreakStatus,
)
from littlestars.services.profile import ProfileService

MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass
class MonthlyStreakStats:
    """Streak numbers for one month of active dates."""
    total_active_days: int
    longest_streak: int
    current_streak: int
    achievement_percentage: int
    is_target_met: bool
    status: StreakStatus
    badge: Optional[Badge]
    completed_dates: List[date] = field(default_factory=list)


def parse_month(month: Optional[str], today: date) -> tuple[int, int]:
    """Parse ``YYYY-MM`` into (year, month); None means the month of ``today``."""
    if month is None:
        return today.year, today.month
    match = MONTH_PATTERN.match(month)
    if not match:
        raise ProgressValidationError("month", f"expected YYYY-MM, got '{month}'")
    year, month_num = int(match.group(1)), int(match.group(2))
    if not 1 <= month_num <= 12:
        raise ProgressValidationError("month", f"month must be 01-12, got '{month}'")
    return year, month_num


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def achievement_badge(is_target_met: bool, percentage: int) -> Optional[Badge]:
    if is_target_met:
        return Badge.CHAMPION
    if percentage >= 75:
        return Badge.GREAT_PROGRESS
    if percentage >= 50:
        return Badge.KEEP_GOING
    return None


def summarize_month(
    active_dates: Iterable[date],
    today: date,
    target_days: int,
) -> MonthlyStreakStats:
    """
    Streak statistics for the active dates of one month.

    The trailing run only counts as the current streak when it ends today or
    yesterday; the child's all-time streak column is not consulted.
    """
    dates = sorted(set(active_dates))

    longest = 0
    run = 0
    previous = None
    for current in dates:
        if previous is not None and current - previous == timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = current

    current_streak = 0
    if dates and (today - dates[-1]).days in (0, 1):
        current_streak = run

    total = len(dates)
    # Half-up rounding, 12.5% reports as 13
    percentage = min(100, math.floor(100 * total / target_days + 0.5))
    is_target_met = total >= target_days

    if current_streak > 0:
        status = StreakStatus.ACTIVE
    elif total > 0:
        status = StreakStatus.BROKEN
    else:
        status = StreakStatus.NEW

    return MonthlyStreakStats(
        total_active_days=total,
        longest_streak=longest,
        current_streak=current_streak,
        achievement_percentage=percentage,
        is_target_met=is_target_met,
        status=status,
        badge=achievement_badge(is_target_met, percentage),
        completed_dates=dates,
    )


def build_calendar(
    year: int,
    month: int,
    activities: Sequence[DailyActivity],
) -> StreakCalendarResponse:
    """Every day of the month mapped to its activity, plus month totals."""
    first_day, last_day = month_bounds(year, month)
    by_date = {a.activity_date: a for a in activities if a.lessons_completed > 0}

    days = {}
    day = first_day
    while day <= last_day:
        activity = by_date.get(day)
        if activity is None:
            days[day.isoformat()] = CalendarDay(is_active=False)
        else:
            days[day.isoformat()] = CalendarDay(
                is_active=True,
                lesson_count=activity.lessons_completed,
                stars_earned=activity.stars_earned,
            )
        day += timedelta(days=1)

    return StreakCalendarResponse(
        month=f"{year:04d}-{month:02d}",
        calendar=days,
        stats=MonthStats(
            total_days=last_day.day,
            active_days=len(by_date),
            total_lessons=sum(a.lessons_completed for a in by_date.values()),
            total_stars=sum(a.stars_earned for a in by_date.values()),
        ),
    )


class StreakReportService:
    """
    Monthly streak and calendar reports.

    Pure reads: no locks, and a report may not yet include an attempt that
    is still being committed for the same child.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.profile = ProfileService(db)

    async def _month_activities(
        self,
        child_id: uuid.UUID,
        year: int,
        month: int,
    ) -> List[DailyActivity]:
        first_day, last_day = month_bounds(year, month)
        result = await self.db.execute(
            select(DailyActivity)
            .where(
                DailyActivity.child_id == child_id,
                DailyActivity.activity_date >= first_day,
                DailyActivity.activity_date <= last_day,
                DailyActivity.lessons_completed > 0,
            )
            .order_by(DailyActivity.activity_date)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def get_monthly_streak(
        self,
        child_id: uuid.UUID,
        month: Optional[str] = None,
        today: Optional[date] = None,
    ) -> MonthlyStreakResponse:
        today = today or date.today()
        year, month_num = parse_month(month, today)
        await self.profile.get_child(child_id)

        activities = await self._month_activities(child_id, year, month_num)
        stats = summarize_month(
            (a.activity_date for a in activities),
            today,
            settings.MONTHLY_TARGET_DAYS,
        )

        return MonthlyStreakResponse(
            child_id=child_id,
            month=f"{year:04d}-{month_num:02d}",
            current_streak=stats.current_streak,
            longest_streak_this_month=stats.longest_streak,
            total_active_days=stats.total_active_days,
            target_days=settings.MONTHLY_TARGET_DAYS,
            completed_dates=[d.isoformat() for d in stats.completed_dates],
            status=stats.status,
            achievement_percentage=stats.achievement_percentage,
            is_target_met=stats.is_target_met,
            badge=stats.badge,
        )

    async def get_streak_calendar(
        self,
        child_id: uuid.UUID,
        month: Optional[str] = None,
        today: Optional[date] = None,
    ) -> StreakCalendarResponse:
        today = today or date.today()
        year, month_num = parse_month(month, today)
        await self.profile.get_child(child_id)

        activities = await self._month_activities(child_id, year, month_num)
        return build_calendar(year, month_num, activities)
