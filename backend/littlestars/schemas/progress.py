"""
Little Stars - Progress Schemas
Pydantic schemas for recording attempts and reading progress
"""
import uuid
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from littlestars.models.progress import ActivityType, ContentType


# ============================================================================
# Requests
# ============================================================================

class RecordAttemptRequest(BaseModel):
    """A child attempted a content item."""
    content_type: ContentType
    content_id: Annotated[int, Field(ge=0)]
    activity_type: ActivityType
    completed: bool | None = None
    score: Annotated[int, Field(ge=0, le=100)] | None = None
    time_spent_seconds: Annotated[int, Field(ge=0)] | None = None


# ============================================================================
# Responses
# ============================================================================

class ProgressRecordResponse(BaseModel):
    """Stored progress for one content item and activity."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    child_id: uuid.UUID
    content_type: ContentType
    content_id: int
    activity_type: ActivityType
    attempts: int
    completed: bool
    best_score: int
    stars_earned: int
    time_spent_seconds: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProgressSummary(BaseModel):
    """Completed items per module plus the child's gamification state."""
    letters_learned: int
    numbers_learned: int
    animals_learned: int
    total_stars: int
    streak: int
    level: int


class LeaderboardEntry(BaseModel):
    """A child ranked by the stars summed over their progress records."""
    child_id: uuid.UUID
    total_stars: int
