"""
Little Stars - Progress Models
Per-content progress records and per-day activity aggregates
"""
import uuid
from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from littlestars.core.database import Base

if TYPE_CHECKING:
    from littlestars.models.child import Child


MAX_STARS_PER_ITEM = 3


class ContentType(str, Enum):
    """Learning modules a child can practise."""
    LETTER = "letter"
    NUMBER = "number"
    ANIMAL = "animal"


class ActivityType(str, Enum):
    """How the child interacted with a content item."""
    LEARN = "learn"
    QUIZ = "quiz"
    GAME = "game"


class ProgressRecord(Base):
    """Progress for one (child, content item, activity type) combination."""

    __tablename__ = "progress"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )
    child_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("children.id", ondelete="CASCADE"),
        index=True
    )

    # Key
    content_type: Mapped[ContentType] = mapped_column(String(20))
    content_id: Mapped[int] = mapped_column(Integer)
    activity_type: Mapped[ActivityType] = mapped_column(String(20))

    # Progress metrics
    attempts: Mapped[int] = mapped_column(Integer, default=0)
    completed: Mapped[bool] = mapped_column(Boolean, default=False)
    best_score: Mapped[int] = mapped_column(Integer, default=0)  # 0 to 100
    stars_earned: Mapped[int] = mapped_column(Integer, default=0)  # 0 to 3, never decreases
    time_spent_seconds: Mapped[int] = mapped_column(Integer, default=0)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    # Relationships
    child: Mapped["Child"] = relationship("Child", back_populates="progress")

    __table_args__ = (
        UniqueConstraint(
            "child_id", "content_type", "content_id", "activity_type",
            name="uq_progress_child_content_activity",
        ),
        CheckConstraint(
            f"stars_earned >= 0 AND stars_earned <= {MAX_STARS_PER_ITEM}",
            name="ck_progress_stars_range",
        ),
    )

    def __repr__(self):
        return (
            f"<ProgressRecord {self.content_type}:{self.content_id} "
            f"{self.activity_type} stars={self.stars_earned}>"
        )


class DailyActivity(Base):
    """
    Per-child, per-day rollup of attempts.

    Used for the activity calendar and the monthly streak report.
    """

    __tablename__ = "daily_activities"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )
    child_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("children.id", ondelete="CASCADE"),
        index=True
    )
    activity_date: Mapped[date] = mapped_column(Date)

    lessons_completed: Mapped[int] = mapped_column(Integer, default=0)
    stars_earned: Mapped[int] = mapped_column(Integer, default=0)
    minutes_played: Mapped[int] = mapped_column(Integer, default=0)
    letters_learned: Mapped[int] = mapped_column(Integer, default=0)
    numbers_learned: Mapped[int] = mapped_column(Integer, default=0)
    animals_learned: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now()
    )

    child: Mapped["Child"] = relationship("Child", back_populates="daily_activities")

    __table_args__ = (
        UniqueConstraint("child_id", "activity_date", name="uq_daily_activity_child_date"),
    )

    def __repr__(self):
        return f"<DailyActivity {self.child_id} {self.activity_date} lessons={self.lessons_completed}>"


# Daily counter column incremented for each content type
CONTENT_COUNTER_COLUMNS = {
    ContentType.LETTER: "letters_learned",
    ContentType.NUMBER: "numbers_learned",
    ContentType.ANIMAL: "animals_learned",
}
