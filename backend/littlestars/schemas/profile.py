"""
Little Stars - Profile Schemas
Pydantic schemas for the child profile summary and activity calendar
"""
import uuid
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field

from littlestars.models.progress import ContentType


class DailyActivityResponse(BaseModel):
    """Rollup of one day of activity."""
    date: date
    lessons_completed: int
    stars_earned: int
    minutes_played: int
    letters_learned: int
    numbers_learned: int
    animals_learned: int


class ModuleProgress(BaseModel):
    """Completed items out of the module's catalog size."""
    completed: int
    total: int


class LevelInfoResponse(BaseModel):
    """Level derived from the child's stars."""
    level: int
    title: str
    total_stars: int
    stars_to_next_level: int


class ProfileSummary(BaseModel):
    """Everything the child profile screen shows."""
    child_id: uuid.UUID
    name: str
    nickname: Optional[str] = None
    avatar_url: Optional[str] = None

    level: int
    level_title: str
    total_stars: int
    stars_to_next_level: int
    total_lessons_completed: int
    streak: int
    days_active: int
    favorite_module: Optional[ContentType] = None

    recent_activity: List[DailyActivityResponse] = Field(default_factory=list)
    letters_progress: ModuleProgress
    numbers_progress: ModuleProgress
    animals_progress: ModuleProgress
