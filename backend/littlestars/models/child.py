"""
Little Stars - Child Model
Child profile with the gamification columns owned by the progress engine
"""
import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, Integer, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from littlestars.core.database import Base

if TYPE_CHECKING:
    from littlestars.models.progress import DailyActivity, ProgressRecord


class Child(Base):
    """
    Child profile.

    Identity fields are created and edited by the user-management service.
    Everything under "Gamification" is written only by the progress engine.
    """

    __tablename__ = "children"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )

    # Profile
    name: Mapped[str] = mapped_column(String(100))
    nickname: Mapped[str | None] = mapped_column(String(100), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Gamification - stars & levels
    total_stars: Mapped[int] = mapped_column(Integer, default=0)
    level: Mapped[int] = mapped_column(Integer, default=1)
    total_lessons_completed: Mapped[int] = mapped_column(Integer, default=0)
    favorite_module: Mapped[str | None] = mapped_column(String(20), nullable=True)

    # Gamification - streaks
    streak: Mapped[int] = mapped_column(Integer, default=0)
    last_active_date: Mapped[date | None] = mapped_column(Date, nullable=True)

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
    progress: Mapped[list["ProgressRecord"]] = relationship(
        "ProgressRecord",
        back_populates="child",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    daily_activities: Mapped[list["DailyActivity"]] = relationship(
        "DailyActivity",
        back_populates="child",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
