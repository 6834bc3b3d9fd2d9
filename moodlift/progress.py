from __future__ import annotations

from datetime import date, datetime, timedelta, timezone, tzinfo
from decimal import Decimal, ROUND_HALF_UP

WEEKDAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
STREAK_LOOKBACK_DAYS = 365
HEATMAP_DAYS = 365


def parse_timestamp(value) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def round_half_up(value: float, digits: int = 0) -> float:
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _mean(values: list) -> float:
    return sum(values) / len(values) if values else 0.0


def _mood_values(sessions: list[dict]) -> list[float]:
    return [float(s["mood_after"]) for s in sessions if s.get("mood_after") is not None]


def _session_dates(sessions: list[dict], tz: tzinfo) -> set[date]:
    days = set()
    for session in sessions:
        completed = parse_timestamp(session.get("completed_at"))
        if completed is not None:
            days.add(completed.astimezone(tz).date())
    return days


def average_mood(sessions: list[dict]) -> float:
    moods = _mood_values(sessions)
    if not moods:
        return 0.0
    return round_half_up(_mean(moods), 1)


def weekly_activity(sessions: list[dict], now: datetime | None = None, tz: tzinfo = timezone.utc) -> list[dict]:
    now = now or datetime.now(timezone.utc)
    since = now - timedelta(days=7)
    buckets = {label: {"games": 0, "moods": []} for label in WEEKDAY_LABELS}
    for session in sessions:
        completed = parse_timestamp(session.get("completed_at"))
        if completed is None or completed < since:
            continue
        label = WEEKDAY_LABELS[completed.astimezone(tz).weekday()]
        buckets[label]["games"] += 1
        if session.get("mood_after") is not None:
            buckets[label]["moods"].append(float(session["mood_after"]))
    return [
        {
            "day": label,
            "games": buckets[label]["games"],
            "mood": int(round_half_up(_mean(buckets[label]["moods"]))) if buckets[label]["moods"] else 0,
        }
        for label in WEEKDAY_LABELS
    ]


def calculate_streak(sessions: list[dict], today: date | None = None, tz: tzinfo = timezone.utc) -> int:
    """Count consecutive active days ending today.

    A day without sessions ends the streak, except today itself: an idle today
    means the streak is counted from yesterday.
    """
    if not sessions:
        return 0
    today = today or datetime.now(tz).date()
    active_days = _session_dates(sessions, tz)
    streak = 0
    for offset in range(STREAK_LOOKBACK_DAYS):
        if today - timedelta(days=offset) in active_days:
            streak += 1
        elif offset > 0:
            break
    return streak


def calculate_achievements(
    total_games: int,
    assessments: list[dict],
    sessions: list[dict],
    today: date | None = None,
    tz: tzinfo = timezone.utc,
) -> list[dict]:
    titles = [s.get("game_title") for s in sessions]
    return [
        {
            "title": "First Steps",
            "description": "Completed your first game",
            "earned": total_games >= 1,
        },
        {
            "title": "Week Warrior",
            "description": "7-day streak achieved",
            "earned": calculate_streak(sessions, today, tz) >= 7,
        },
        {
            "title": "Gratitude Guru",
            "description": "Planted 50 gratitude flowers",
            "earned": sum(1 for t in titles if t == "Gratitude Garden") >= 50,
        },
        {
            "title": "Breath Master",
            "description": "Completed 100 breathing cycles",
            "earned": sum(1 for t in titles if t and "Breath" in t) >= 100,
        },
        {
            "title": "Mindful Maven",
            "description": "Finished all mindfulness activities",
            "earned": len(set(titles)) >= 7,
        },
        {
            "title": "Affirmation Ace",
            "description": "Perfect score in 10 games",
            "earned": sum(1 for s in sessions if s.get("score") == 100) >= 10,
        },
    ]


def summarize_progress(
    sessions: list[dict],
    assessments: list[dict],
    now: datetime | None = None,
    tz: tzinfo = timezone.utc,
) -> dict:
    now = now or datetime.now(timezone.utc)
    today = now.astimezone(tz).date()
    total_games = len(sessions)
    return {
        "total_games": total_games,
        "avg_mood": average_mood(sessions),
        "current_streak": calculate_streak(sessions, today, tz),
        "weekly_activity": weekly_activity(sessions, now, tz),
        "achievements": calculate_achievements(total_games, assessments, sessions, today, tz),
    }


def heatmap_window_start(today: date, days: int = HEATMAP_DAYS) -> datetime:
    start_day = today - timedelta(days=days - 1)
    return datetime(start_day.year, start_day.month, start_day.day, tzinfo=timezone.utc)


def build_contribution_heatmap(completed_at_values, today: date | None = None, days: int = HEATMAP_DAYS) -> list[dict]:
    today = today or datetime.now(timezone.utc).date()
    start_day = today - timedelta(days=days - 1)
    counts = {(start_day + timedelta(days=i)).isoformat(): 0 for i in range(days)}
    for value in completed_at_values:
        completed = parse_timestamp(value)
        if completed is None:
            continue
        key = completed.astimezone(timezone.utc).date().isoformat()
        if key in counts:
            counts[key] += 1
    return [{"date": key, "count": count} for key, count in counts.items()]
