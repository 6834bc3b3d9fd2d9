from __future__ import annotations

import logging

from moodlift.db_init import CONSULTANTS_TABLE, GAMES_TABLE
from moodlift.store import RowStore, StoreError

logger = logging.getLogger(__name__)

CONSULTANT_LIMIT = 12


async def list_consultants(store: RowStore, limit: int = CONSULTANT_LIMIT) -> list[dict]:
    try:
        return await (
            store.table(CONSULTANTS_TABLE)
            .select("*")
            .order("created_at", ascending=False)
            .limit(limit)
            .execute()
        )
    except StoreError as exc:
        logger.error("Error loading consultants: %s", exc)
        return []


async def list_games(store: RowStore, popular_only: bool = False) -> list[dict]:
    query = store.table(GAMES_TABLE).select("id, title, slug, description, is_popular")
    if popular_only:
        query = query.eq("is_popular", 1)
    try:
        rows = await query.order("title").execute()
    except StoreError as exc:
        logger.error("Error loading games: %s", exc)
        return []
    return [{**row, "is_popular": bool(row.get("is_popular"))} for row in rows]
