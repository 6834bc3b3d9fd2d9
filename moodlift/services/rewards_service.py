from __future__ import annotations

import logging
from datetime import datetime, timezone

from moodlift.db_init import REWARD_ACTIVITIES_TABLE
from moodlift.settings import get_settings
from moodlift.store import RowStore, new_id
from moodlift.streak_utils import get_today, to_date

logger = logging.getLogger(__name__)

DAILY_LOGIN = "daily_login"
GAME = "game"


def _day_iso(today=None) -> str:
    return (to_date(today) or get_today(get_settings().app_timezone)).isoformat()


async def has_activity_today(store: RowStore, user_id: str, activity_type: str, today=None) -> bool:
    row = await (
        store.table(REWARD_ACTIVITIES_TABLE)
        .select("id")
        .eq("user_id", user_id)
        .eq("activity_type", activity_type)
        .eq("activity_date", _day_iso(today))
        .limit(1)
        .execute()
    )
    return bool(row)


async def add_activity(
    store: RowStore, user_id: str, activity_type: str, description: str | None = None, today=None
) -> dict:
    activity_type = str(activity_type or "").strip()
    if not activity_type:
        raise ValueError("Activity type cannot be empty")
    payload = {
        "id": new_id(),
        "user_id": user_id,
        "activity_type": activity_type,
        "description": description,
        "activity_date": _day_iso(today),
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    rows = await store.table(REWARD_ACTIVITIES_TABLE).insert(payload).execute()
    logger.debug("Recorded %s activity for %s", activity_type, user_id)
    return rows[0]


async def list_activities(store: RowStore, user_id: str, limit: int = 30) -> list[dict]:
    return await (
        store.table(REWARD_ACTIVITIES_TABLE)
        .select("id, activity_type, description, activity_date, created_at")
        .eq("user_id", user_id)
        .order("created_at", ascending=False)
        .limit(limit)
        .execute()
    )
