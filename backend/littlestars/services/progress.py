"""
Little Stars - Progress Service
Records attempts and turns them into stars, levels, streaks and daily activity
"""
import logging
import uuid
from datetime import date
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from littlestars.core.config import settings
from littlestars.core.exceptions import (
    LittleStarsError,
    ProgressConsistencyError,
    ProgressValidationError,
)
from littlestars.models.child import Child
from littlestars.models.progress import ActivityType, ContentType, ProgressRecord
from littlestars.schemas.progress import LeaderboardEntry, ProgressSummary
from littlestars.services.gamification import award_stars
from littlestars.services.locks import ChildLockRegistry, child_locks
from littlestars.services.profile import ProfileService

logger = logging.getLogger(__name__)


def validate_attempt(
    content_type: ContentType,
    activity_type: ActivityType,
    score: Optional[int],
    time_spent_seconds: Optional[int],
) -> tuple[ContentType, ActivityType]:
    """Reject out-of-range input before anything is written."""
    try:
        content_type = ContentType(content_type)
    except ValueError:
        raise ProgressValidationError("content_type", f"unknown content type {content_type!r}")
    try:
        activity_type = ActivityType(activity_type)
    except ValueError:
        raise ProgressValidationError("activity_type", f"unknown activity type {activity_type!r}")
    if score is not None and not 0 <= score <= 100:
        raise ProgressValidationError("score", f"must be between 0 and 100, got {score}")
    if time_spent_seconds is not None and time_spent_seconds < 0:
        raise ProgressValidationError(
            "time_spent_seconds", f"must not be negative, got {time_spent_seconds}"
        )
    return content_type, activity_type


class ProgressService:
    """
    The Progress Ledger.

    One call to record_attempt is one transaction: the progress record, the
    child's stars/level/streak and the daily aggregate are committed together
    or not at all. Writes for the same child are serialized by a per-child
    lock, and the child row is locked (SELECT ... FOR UPDATE) so that several
    worker processes cannot interleave either.
    """

    def __init__(self, db: AsyncSession, locks: Optional[ChildLockRegistry] = None):
        self.db = db
        self.locks = locks or child_locks
        self.profile = ProfileService(db)

    async def record_attempt(
        self,
        child_id: uuid.UUID,
        content_type: ContentType,
        content_id: int,
        activity_type: ActivityType,
        completed: Optional[bool] = None,
        score: Optional[int] = None,
        time_spent_seconds: Optional[int] = None,
        today: Optional[date] = None,
    ) -> ProgressRecord:
        """
        Record one attempt of a content item by a child.

        Raises:
            ProgressValidationError: unknown content or activity type, or score/time out of range
            ChildNotFoundError: unknown child
            ProgressConsistencyError: storage failed mid-way, nothing was kept
        """
        content_type, activity_type = validate_attempt(
            content_type, activity_type, score, time_spent_seconds
        )
        today = today or date.today()

        async with self.locks.get_lock(child_id):
            # Raises ChildNotFoundError before any mutation
            child = await self.profile.get_child(child_id, for_update=True)
            try:
                record, stars_awarded = await self._apply_attempt(
                    child,
                    content_type,
                    content_id,
                    activity_type,
                    completed,
                    score,
                    time_spent_seconds,
                    today,
                )
                await self.db.commit()
            except (SQLAlchemyError, LittleStarsError) as e:
                await self.db.rollback()
                logger.exception(
                    "Recording attempt failed for child %s (%s:%s %s), rolled back",
                    child_id, content_type.value, content_id, activity_type.value,
                )
                raise ProgressConsistencyError(child_id, e) from e

        # Load server-generated timestamps while still in async context
        await self.db.refresh(record)
        logger.info(
            "Attempt recorded: child=%s content=%s:%s activity=%s stars_awarded=%s",
            child_id, content_type.value, content_id, activity_type.value, stars_awarded,
        )
        return record

    async def _apply_attempt(
        self,
        child: Child,
        content_type: ContentType,
        content_id: int,
        activity_type: ActivityType,
        completed: Optional[bool],
        score: Optional[int],
        time_spent_seconds: Optional[int],
        today: date,
    ) -> tuple[ProgressRecord, int]:
        record = await self._get_or_create_record(
            child.id, content_type, content_id, activity_type
        )

        record.attempts += 1
        if completed is not None:
            # Latest call wins, a later "not completed" flips it back
            record.completed = completed
        if score is not None and score > record.best_score:
            record.best_score = score
        if time_spent_seconds:
            record.time_spent_seconds += time_spent_seconds

        stars_awarded = award_stars(score, completed, record.stars_earned)
        if stars_awarded > 0:
            record.stars_earned += stars_awarded
            await self.profile.credit_stars(child, stars_awarded)
        self.profile.update_level(child)

        # Favorite module counts read the record back
        await self.db.flush()

        self.profile.touch_streak(child, today)
        await self.profile.accumulate_daily_activity(
            child,
            today,
            content_type,
            stars_earned=stars_awarded,
            minutes_played=(time_spent_seconds or 0) // 60,
        )
        await self.db.flush()
        return record, stars_awarded

    async def _get_or_create_record(
        self,
        child_id: uuid.UUID,
        content_type: ContentType,
        content_id: int,
        activity_type: ActivityType,
    ) -> ProgressRecord:
        result = await self.db.execute(
            select(ProgressRecord)
            .where(
                ProgressRecord.child_id == child_id,
                ProgressRecord.content_type == content_type.value,
                ProgressRecord.content_id == content_id,
                ProgressRecord.activity_type == activity_type.value,
            )
            .execution_options(populate_existing=True)
        )
        record = result.scalar_one_or_none()
        if record is None:
            record = ProgressRecord(
                child_id=child_id,
                content_type=content_type.value,
                content_id=content_id,
                activity_type=activity_type.value,
                attempts=0,
                completed=False,
                best_score=0,
                stars_earned=0,
                time_spent_seconds=0,
            )
            self.db.add(record)
        return record

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_progress(self, child_id: uuid.UUID) -> List[ProgressRecord]:
        """All progress records of a child, newest first."""
        await self.profile.get_child(child_id)
        result = await self.db.execute(
            select(ProgressRecord)
            .where(ProgressRecord.child_id == child_id)
            .order_by(ProgressRecord.created_at.desc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def get_content_progress(
        self,
        child_id: uuid.UUID,
        content_type: ContentType,
    ) -> List[ProgressRecord]:
        """Progress records for one module, ordered by content id."""
        await self.profile.get_child(child_id)
        result = await self.db.execute(
            select(ProgressRecord)
            .where(
                ProgressRecord.child_id == child_id,
                ProgressRecord.content_type == ContentType(content_type).value,
            )
            .order_by(ProgressRecord.content_id, ProgressRecord.activity_type)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def get_progress_summary(self, child_id: uuid.UUID) -> ProgressSummary:
        child = await self.profile.get_child(child_id)
        counts = await self.profile.count_completed_by_type(child_id)
        return ProgressSummary(
            letters_learned=counts[ContentType.LETTER],
            numbers_learned=counts[ContentType.NUMBER],
            animals_learned=counts[ContentType.ANIMAL],
            total_stars=child.total_stars,
            streak=child.streak,
            level=child.level,
        )

    async def get_leaderboard(self, limit: Optional[int] = None) -> List[LeaderboardEntry]:
        """Children ranked by stars summed over their progress records."""
        if limit is None:
            limit = settings.LEADERBOARD_DEFAULT_LIMIT
        if limit < 1:
            raise ProgressValidationError("limit", f"must be at least 1, got {limit}")

        total_stars = func.sum(ProgressRecord.stars_earned).label("total_stars")
        result = await self.db.execute(
            select(ProgressRecord.child_id, total_stars)
            .group_by(ProgressRecord.child_id)
            .order_by(total_stars.desc(), ProgressRecord.child_id)
            .limit(limit)
        )
        return [
            LeaderboardEntry(child_id=child_id, total_stars=stars or 0)
            for child_id, stars in result.all()
        ]
