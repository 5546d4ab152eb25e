"""
Little Stars - Profile Service
Streak tracking, daily activity aggregates and the child profile summary
"""
import logging
import uuid
from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from littlestars.core.config import settings
from littlestars.core.database import upsert_insert
from littlestars.core.exceptions import ChildNotFoundError, ProgressValidationError
from littlestars.models.child import Child
from littlestars.models.progress import (
    CONTENT_COUNTER_COLUMNS,
    ContentType,
    DailyActivity,
    ProgressRecord,
)
from littlestars.schemas.profile import (
    DailyActivityResponse,
    LevelInfoResponse,
    ModuleProgress,
    ProfileSummary,
)
from littlestars.services.gamification import level_of, next_streak, select_favorite_module

logger = logging.getLogger(__name__)


def to_activity_response(activity: DailyActivity) -> DailyActivityResponse:
    return DailyActivityResponse(
        date=activity.activity_date,
        lessons_completed=activity.lessons_completed,
        stars_earned=activity.stars_earned,
        minutes_played=activity.minutes_played,
        letters_learned=activity.letters_learned,
        numbers_learned=activity.numbers_learned,
        animals_learned=activity.animals_learned,
    )


class ProfileService:
    """
    Child-level gamification state.

    The write helpers (touch_streak, accumulate_daily_activity,
    update_favorite_module, update_level) never commit: they run inside the
    transaction opened by ProgressService.record_attempt.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_child(self, child_id: uuid.UUID, for_update: bool = False) -> Child:
        """Get a child by ID, refreshed from the database."""
        query = select(Child).where(Child.id == child_id)
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(
            query.execution_options(populate_existing=True)
        )
        child = result.scalar_one_or_none()
        if not child:
            raise ChildNotFoundError(child_id)
        return child

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def touch_streak(self, child: Child, today: date) -> bool:
        """
        Mark the child active on ``today``.

        Returns True when the streak state changed. Calling it again on the
        same day is a no-op.
        """
        streak, last_active = next_streak(child.last_active_date, child.streak, today)
        if streak == child.streak and last_active == child.last_active_date:
            return False

        logger.debug(
            "Streak for child %s: %s -> %s (last active %s)",
            child.id, child.streak, streak, child.last_active_date,
        )
        child.streak = streak
        child.last_active_date = last_active
        return True

    async def credit_stars(self, child: Child, stars: int) -> None:
        """Add stars to the child's balance with an atomic increment."""
        await self.db.execute(
            update(Child)
            .where(Child.id == child.id)
            .values(total_stars=Child.total_stars + stars)
        )

    def update_level(self, child: Child) -> bool:
        """Recompute the cached level column. Returns True on level up/down."""
        info = level_of(child.total_stars)
        if child.level == info.level:
            return False
        logger.info(
            "Child %s reached level %s (%s) with %s stars",
            child.id, info.level, info.title, child.total_stars,
        )
        child.level = info.level
        return True

    async def accumulate_daily_activity(
        self,
        child: Child,
        activity_date: date,
        content_type: ContentType,
        stars_earned: int = 0,
        minutes_played: int = 0,
    ) -> None:
        """Add one attempt to the child's aggregate for ``activity_date``."""
        counter = CONTENT_COUNTER_COLUMNS[ContentType(content_type)]

        row = {
            "id": uuid.uuid4(),
            "child_id": child.id,
            "activity_date": activity_date,
            "lessons_completed": 1,
            "stars_earned": stars_earned,
            "minutes_played": minutes_played,
            "letters_learned": 0,
            "numbers_learned": 0,
            "animals_learned": 0,
        }
        row[counter] = 1

        # Insert the day or increment the existing row in one statement
        stmt = upsert_insert(self.db, DailyActivity).values(**row)
        stmt = stmt.on_conflict_do_update(
            index_elements=["child_id", "activity_date"],
            set_={
                "lessons_completed": DailyActivity.lessons_completed + 1,
                "stars_earned": DailyActivity.stars_earned + stars_earned,
                "minutes_played": DailyActivity.minutes_played + minutes_played,
                counter: getattr(DailyActivity, counter) + 1,
            },
        )
        await self.db.execute(stmt)

        await self.db.execute(
            update(Child)
            .where(Child.id == child.id)
            .values(total_lessons_completed=Child.total_lessons_completed + 1)
        )
        await self.update_favorite_module(child)

    async def update_favorite_module(self, child: Child) -> Optional[ContentType]:
        """Recompute the cached favorite module from completion counts."""
        counts = await self.count_completed_by_type(child.id)
        favorite = select_favorite_module(counts)
        child.favorite_module = favorite.value if favorite else None
        return favorite

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def count_completed_by_type(self, child_id: uuid.UUID) -> dict[ContentType, int]:
        """Completed progress records per content type."""
        result = await self.db.execute(
            select(ProgressRecord.content_type, func.count(ProgressRecord.id))
            .where(
                ProgressRecord.child_id == child_id,
                ProgressRecord.completed.is_(True),
            )
            .group_by(ProgressRecord.content_type)
        )
        counts = {content_type: 0 for content_type in ContentType}
        for content_type, count in result.all():
            counts[ContentType(content_type)] = count
        return counts

    async def get_activity_calendar(
        self,
        child_id: uuid.UUID,
        start_date: date,
        end_date: date,
    ) -> List[DailyActivityResponse]:
        """Daily aggregates between two dates (inclusive), oldest first."""
        if start_date > end_date:
            raise ProgressValidationError("start_date", "must not be after end_date")
        await self.get_child(child_id)

        result = await self.db.execute(
            select(DailyActivity)
            .where(
                DailyActivity.child_id == child_id,
                DailyActivity.activity_date >= start_date,
                DailyActivity.activity_date <= end_date,
            )
            .order_by(DailyActivity.activity_date)
            .execution_options(populate_existing=True)
        )
        return [to_activity_response(a) for a in result.scalars().all()]

    async def get_level_info(self, child_id: uuid.UUID) -> LevelInfoResponse:
        child = await self.get_child(child_id)
        info = level_of(child.total_stars)
        return LevelInfoResponse(
            level=info.level,
            title=info.title,
            total_stars=child.total_stars,
            stars_to_next_level=info.stars_to_next_level,
        )

    async def get_profile_summary(
        self,
        child_id: uuid.UUID,
        today: Optional[date] = None,
    ) -> ProfileSummary:
        """Get the full profile summary shown on the child's profile screen."""
        child = await self.get_child(child_id)
        today = today or date.today()
        info = level_of(child.total_stars)

        counts = await self.count_completed_by_type(child_id)

        days_active_result = await self.db.execute(
            select(func.count(DailyActivity.id)).where(
                DailyActivity.child_id == child_id,
                DailyActivity.lessons_completed > 0,
            )
        )
        days_active = days_active_result.scalar() or 0

        recent_start = today - timedelta(days=settings.RECENT_ACTIVITY_DAYS - 1)
        recent_activity = await self.get_activity_calendar(child_id, recent_start, today)

        return ProfileSummary(
            child_id=child.id,
            name=child.name,
            nickname=child.nickname,
            avatar_url=child.avatar_url,
            level=info.level,
            level_title=info.title,
            total_stars=child.total_stars,
            stars_to_next_level=info.stars_to_next_level,
            total_lessons_completed=child.total_lessons_completed,
            streak=child.streak,
            days_active=days_active,
            favorite_module=child.favorite_module,
            recent_activity=recent_activity,
            letters_progress=ModuleProgress(
                completed=counts[ContentType.LETTER], total=settings.TOTAL_LETTERS
            ),
            numbers_progress=ModuleProgress(
                completed=counts[ContentType.NUMBER], total=settings.TOTAL_NUMBERS
            ),
            animals_progress=ModuleProgress(
                completed=counts[ContentType.ANIMAL], total=settings.TOTAL_ANIMALS
            ),
        )
