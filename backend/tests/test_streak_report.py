"""
Little Stars - Monthly Streak Report Tests
"""
from datetime import date

import pytest

from littlestars.core.exceptions import ProgressValidationError
from littlestars.models.progress import DailyActivity
from littlestars.schemas.streak import Badge, StreakStatus
from littlestars.services.streak import build_calendar, parse_month, summarize_month


def december(*days: int) -> list[date]:
    return [date(2024, 12, d) for d in days]


def test_runs_in_december():
    stats = summarize_month(december(1, 2, 3, 5, 6, 7), date(2024, 12, 7), 20)
    assert stats.total_active_days == 6
    assert stats.longest_streak == 3
    assert stats.current_streak == 3
    assert stats.status == StreakStatus.ACTIVE
    assert stats.achievement_percentage == 30
    assert stats.badge is None


def test_current_streak_counts_when_last_day_was_yesterday():
    stats = summarize_month(december(5, 6, 7), date(2024, 12, 8), 20)
    assert stats.current_streak == 3


def test_current_streak_is_zero_after_a_gap():
    stats = summarize_month(december(1, 2, 3, 4), date(2024, 12, 10), 20)
    assert stats.current_streak == 0
    assert stats.longest_streak == 4
    assert stats.status == StreakStatus.BROKEN


def test_longest_run_in_the_middle():
    stats = summarize_month(december(1, 3, 4, 5, 6, 9), date(2024, 12, 9), 20)
    assert stats.longest_streak == 4
    assert stats.current_streak == 1


def test_empty_month_is_new():
    stats = summarize_month([], date(2024, 12, 7), 20)
    assert stats.total_active_days == 0
    assert stats.longest_streak == 0
    assert stats.current_streak == 0
    assert stats.status == StreakStatus.NEW
    assert stats.badge is None


def test_duplicate_dates_count_once():
    stats = summarize_month(december(1, 1, 2), date(2024, 12, 2), 20)
    assert stats.total_active_days == 2
    assert stats.longest_streak == 2


@pytest.mark.parametrize(
    "active_days,percentage,badge,met",
    [
        (9, 45, None, False),
        (10, 50, Badge.KEEP_GOING, False),
        (15, 75, Badge.GREAT_PROGRESS, False),
        (19, 95, Badge.GREAT_PROGRESS, False),
        (20, 100, Badge.CHAMPION, True),
        (25, 100, Badge.CHAMPION, True),
    ],
)
def test_achievement_badges(active_days, percentage, badge, met):
    dates = [date(2024, 12, d) for d in range(1, active_days + 1)]
    stats = summarize_month(dates, date(2024, 12, 31), 20)
    assert stats.achievement_percentage == percentage
    assert stats.badge == badge
    assert stats.is_target_met is met


def test_percentage_rounds_half_up():
    # 5 of 40 is 12.5%
    stats = summarize_month(december(1, 2, 3, 4, 5), date(2024, 12, 31), 40)
    assert stats.achievement_percentage == 13


def test_parse_month():
    assert parse_month("2024-02", date(2024, 12, 7)) == (2024, 2)
    assert parse_month(None, date(2024, 12, 7)) == (2024, 12)


@pytest.mark.parametrize("month", ["2024-13", "2024-1", "December", "2024-00"])
def test_parse_month_rejects_bad_input(month):
    with pytest.raises(ProgressValidationError):
        parse_month(month, date(2024, 12, 7))


def test_calendar_covers_every_day():
    activities = [
        DailyActivity(activity_date=date(2024, 2, 3), lessons_completed=4, stars_earned=5),
        DailyActivity(activity_date=date(2024, 2, 4), lessons_completed=1, stars_earned=0),
    ]
    report = build_calendar(2024, 2, activities)

    assert report.month == "2024-02"
    assert len(report.calendar) == 29
    assert report.calendar["2024-02-03"].is_active is True
    assert report.calendar["2024-02-03"].lesson_count == 4
    assert report.calendar["2024-02-03"].stars_earned == 5
    assert report.calendar["2024-02-01"].is_active is False
    assert report.calendar["2024-02-01"].lesson_count == 0
    assert report.stats.total_days == 29
    assert report.stats.active_days == 2
    assert report.stats.total_lessons == 5
    assert report.stats.total_stars == 5
