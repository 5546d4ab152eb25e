"""
Little Stars - Gamification Rules
Stars, levels, streaks and favorite module, as pure functions
"""
from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional

from littlestars.models.progress import MAX_STARS_PER_ITEM, ContentType


# Level star thresholds, ascending by min_stars
LEVEL_THRESHOLDS = {
    1: 0,
    2: 50,
    3: 150,
    4: 300,
    5: 500,
}

LEVEL_TITLES = {
    1: "Pemula",
    2: "Pelajar",
    3: "Mahir",
    4: "Ahli",
    5: "Master",
}

# Score needed for each star on a completed item
STAR_SCORE_THRESHOLDS = (
    (95, 3),
    (80, 2),
    (0, 1),
)

DEFAULT_SCORE = 100

# Fixed tie-break order for the favorite module
FAVORITE_MODULE_PRIORITY = (
    ContentType.LETTER,
    ContentType.NUMBER,
    ContentType.ANIMAL,
)


@dataclass(frozen=True)
class LevelInfo:
    """Level derived from a star balance."""
    level: int
    title: str
    stars_to_next_level: int


def level_of(total_stars: int) -> LevelInfo:
    """Calculate the level for a star balance."""
    level = 1
    for lvl, threshold in sorted(LEVEL_THRESHOLDS.items()):
        if total_stars >= threshold:
            level = lvl

    next_level = level + 1
    if next_level in LEVEL_THRESHOLDS:
        stars_to_next = max(0, LEVEL_THRESHOLDS[next_level] - total_stars)
    else:
        # Max level
        stars_to_next = 0

    return LevelInfo(
        level=level,
        title=LEVEL_TITLES[level],
        stars_to_next_level=stars_to_next,
    )


def target_stars(score: Optional[int]) -> int:
    """Stars a completed item is worth at the given score."""
    if score is None:
        score = DEFAULT_SCORE
    for min_score, stars in STAR_SCORE_THRESHOLDS:
        if score >= min_score:
            return stars
    return 1


def award_stars(score: Optional[int], completed: Optional[bool], prior_stars: int) -> int:
    """
    Additional stars to grant for an attempt.

    Stars are sticky: a lower score on a later attempt never takes back what
    the item already earned, so the result is never negative.
    """
    if not completed:
        return 0
    target = min(target_stars(score), MAX_STARS_PER_ITEM)
    return max(0, target - prior_stars)


def next_streak(
    last_active_date: Optional[date],
    streak: int,
    today: date,
) -> tuple[int, Optional[date]]:
    """
    Streak transition for a child that was active on ``today``.

    Returns the new ``(streak, last_active_date)`` pair. Same-day repeats and
    dates before the last activity (clock skew) leave the state untouched.
    """
    if last_active_date is None:
        # First ever activity
        return 1, today

    gap = (today - last_active_date).days
    if gap <= 0:
        return streak, last_active_date
    if gap == 1:
        return streak + 1, today
    # Streak broken
    return 1, today


def select_favorite_module(counts: Mapping[ContentType, int]) -> Optional[ContentType]:
    """
    Content type with the strictly largest count.

    Ties go to the earlier entry of FAVORITE_MODULE_PRIORITY; all zero
    means no favorite yet.
    """
    favorite = None
    best = 0
    for content_type in FAVORITE_MODULE_PRIORITY:
        count = counts.get(content_type, 0)
        if count > best:
            favorite = content_type
            best = count
    return favorite
