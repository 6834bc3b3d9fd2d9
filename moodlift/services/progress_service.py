from __future__ import annotations

import logging
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from moodlift import progress
from moodlift.db_init import ASSESSMENT_RESULTS_TABLE, GAME_SESSIONS_TABLE
from moodlift.settings import get_settings
from moodlift.store import RowStore, StoreError, new_id

logger = logging.getLogger(__name__)


def _app_timezone():
    try:
        return ZoneInfo(get_settings().app_timezone)
    except ZoneInfoNotFoundError:
        logger.warning("Unknown APP_TIMEZONE %r, falling back to UTC", get_settings().app_timezone)
        return timezone.utc


async def save_game_session(
    store: RowStore,
    user_id: str,
    game_title: str,
    score: int,
    duration: int,
    mood_before: int | None = None,
    mood_after: int | None = None,
) -> dict | None:
    try:
        rows = await store.table(GAME_SESSIONS_TABLE).insert(
            {
                "id": new_id(),
                "user_id": user_id,
                "game_title": game_title,
                "score": score,
                "duration": duration,
                "mood_before": mood_before,
                "mood_after": mood_after,
                "completed_at": datetime.now(timezone.utc).isoformat(),
            }
        ).execute()
    except StoreError as exc:
        logger.error("Error saving game session: %s", exc)
        return None
    return rows[0]


async def save_assessment_result(store: RowStore, user_id: str, score: int, insights: str) -> dict | None:
    try:
        rows = await store.table(ASSESSMENT_RESULTS_TABLE).insert(
            {
                "id": new_id(),
                "user_id": user_id,
                "score": score,
                "insights": insights,
                "completed_at": datetime.now(timezone.utc).isoformat(),
            }
        ).execute()
    except StoreError as exc:
        logger.error("Error saving assessment result: %s", exc)
        return None
    return rows[0]


async def get_user_progress(store: RowStore, user_id: str, now: datetime | None = None) -> dict | None:
    try:
        sessions = await (
            store.table(GAME_SESSIONS_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("completed_at", ascending=False)
            .execute()
        )
        assessments = await (
            store.table(ASSESSMENT_RESULTS_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("completed_at", ascending=False)
            .execute()
        )
        return progress.summarize_progress(sessions, assessments, now=now, tz=_app_timezone())
    except (StoreError, ValueError) as exc:
        logger.error("Error fetching user progress: %s", exc)
        return None


async def get_contribution_heatmap(store: RowStore, user_id: str, now: datetime | None = None) -> list[dict]:
    today = (now or datetime.now(timezone.utc)).astimezone(timezone.utc).date()
    start = progress.heatmap_window_start(today)
    try:
        sessions = await (
            store.table(GAME_SESSIONS_TABLE)
            .select("completed_at")
            .eq("user_id", user_id)
            .gte("completed_at", start.isoformat())
            .order("completed_at", ascending=True)
            .execute()
        )
        return progress.build_contribution_heatmap((s.get("completed_at") for s in sessions), today)
    except (StoreError, ValueError) as exc:
        logger.error("Error building contribution heatmap: %s", exc)
        return []
