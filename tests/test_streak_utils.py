from datetime import date, datetime

import pytest

from moodlift.streak_utils import (
    StreakUpdateResult,
    calculate_streak_update,
    days_between,
    is_consecutive_day,
    to_date,
)

TODAY = date(2024, 3, 10)


def test_first_login_starts_streak():
    result = calculate_streak_update(0, 0, None, TODAY)
    assert result == StreakUpdateResult(1, 1, is_new_streak=True, streak_broken=False)


def test_consecutive_day_extends_streak_and_longest():
    result = calculate_streak_update(4, 4, "2024-03-09", TODAY)
    assert result.current_streak == 5
    assert result.longest_streak == 5
    assert not result.is_new_streak
    assert not result.streak_broken


def test_same_day_login_is_idempotent():
    first = calculate_streak_update(3, 6, "2024-03-09", TODAY)
    second = calculate_streak_update(first.current_streak, first.longest_streak, TODAY, TODAY)
    assert (second.current_streak, second.longest_streak) == (4, 6)
    assert not second.is_new_streak


def test_gap_resets_streak_but_keeps_longest():
    result = calculate_streak_update(9, 12, "2024-03-01", TODAY)
    assert result == StreakUpdateResult(1, 12, is_new_streak=True, streak_broken=True)


def test_future_last_login_leaves_streak_alone():
    result = calculate_streak_update(2, 5, "2024-03-12", TODAY)
    assert (result.current_streak, result.longest_streak) == (2, 5)
    assert not result.streak_broken


def test_longest_never_below_current():
    result = calculate_streak_update(7, 3, "2024-03-09", TODAY)
    assert result.longest_streak >= result.current_streak == 8


def test_calendar_days_ignore_time_of_day():
    late = datetime(2024, 3, 9, 23, 59)
    assert days_between(late, datetime(2024, 3, 10, 0, 1)) == 1
    assert is_consecutive_day(late, TODAY)
    assert not is_consecutive_day("2024-03-08", TODAY)
    assert not is_consecutive_day(None, TODAY)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2024-03-10", TODAY),
        ("2024-03-10T08:30:00+00:00", TODAY),
        (datetime(2024, 3, 10, 8, 30), TODAY),
        (None, None),
        ("", None),
    ],
)
def test_to_date(value, expected):
    assert to_date(value) == expected
