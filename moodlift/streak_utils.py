from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


@dataclass(frozen=True)
class StreakData:
    current_streak: int
    longest_streak: int
    last_login_date: date | None


@dataclass(frozen=True)
class StreakUpdateResult:
    current_streak: int
    longest_streak: int
    is_new_streak: bool
    streak_broken: bool


def get_today(tz_name: str | None = None) -> date:
    if not tz_name:
        return date.today()
    try:
        return datetime.now(ZoneInfo(tz_name)).date()
    except ZoneInfoNotFoundError:
        return date.today()


def to_date(value) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def days_between(earlier, later) -> int:
    return (to_date(later) - to_date(earlier)).days


def is_consecutive_day(last_login_date, today=None) -> bool:
    if to_date(last_login_date) is None:
        return False
    return days_between(last_login_date, today or get_today()) == 1


def calculate_streak_update(current_streak: int, longest_streak: int, last_login_date, today=None) -> StreakUpdateResult:
    """Apply one login on ``today`` to an existing streak.

    Days are compared as calendar dates. A second login on the same day, or a
    last login dated after ``today``, leaves the streak untouched.
    """
    today = to_date(today) or get_today()
    current = max(0, int(current_streak or 0))
    longest = max(current, int(longest_streak or 0))
    last = to_date(last_login_date)

    if last is None:
        return StreakUpdateResult(1, max(longest, 1), is_new_streak=True, streak_broken=False)

    gap = (today - last).days
    if gap <= 0:
        return StreakUpdateResult(current, longest, is_new_streak=False, streak_broken=False)
    if gap == 1:
        new_current = current + 1
        return StreakUpdateResult(new_current, max(longest, new_current), is_new_streak=False, streak_broken=False)
    return StreakUpdateResult(1, max(longest, 1), is_new_streak=True, streak_broken=True)
