"""
Little Stars - Streak Schemas
Pydantic schemas for the monthly streak report and streak calendar
"""
import uuid
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class StreakStatus(str, Enum):
    ACTIVE = "active"
    BROKEN = "broken"
    NEW = "new"


class Badge(str, Enum):
    CHAMPION = "Champion"
    GREAT_PROGRESS = "Great Progress"
    KEEP_GOING = "Keep Going"


class MonthlyStreakResponse(BaseModel):
    """Streak achievement for one calendar month."""
    child_id: uuid.UUID
    month: str  # YYYY-MM
    current_streak: int
    longest_streak_this_month: int
    total_active_days: int
    target_days: int
    completed_dates: List[str] = Field(default_factory=list)
    status: StreakStatus
    achievement_percentage: int  # 0 to 100
    is_target_met: bool
    badge: Optional[Badge] = None


class CalendarDay(BaseModel):
    """One day in the streak calendar."""
    is_active: bool
    lesson_count: int = 0
    stars_earned: int = 0


class MonthStats(BaseModel):
    total_days: int
    active_days: int
    total_lessons: int
    total_stars: int


class StreakCalendarResponse(BaseModel):
    """Every day of a month with its activity, plus month totals."""
    month: str  # YYYY-MM
    calendar: Dict[str, CalendarDay]
    stats: MonthStats
