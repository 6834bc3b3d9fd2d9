from __future__ import annotations

import json
import logging

from moodlift.db_init import SEO_METADATA_TABLE
from moodlift.store import RowStore

logger = logging.getLogger(__name__)


def normalize_page_path(raw_path) -> str:
    path = str(raw_path or "").strip()
    if not path:
        return ""
    return path if path.startswith("/") else f"/{path}"


def _decode_structured_data(raw) -> dict | None:
    if not raw:
        return None
    if isinstance(raw, dict):
        return raw
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring malformed structured_data payload")
        return None
    return payload if isinstance(payload, dict) else None


async def get_all_seo_metadata(store: RowStore) -> list[dict]:
    return await (
        store.table(SEO_METADATA_TABLE)
        .select("page_url, priority, change_frequency, updated_at")
        .order("page_url")
        .execute()
    )


async def get_seo_metadata(store: RowStore, page_url: str) -> dict | None:
    path = normalize_page_path(page_url)
    if not path:
        raise ValueError("page_url cannot be empty")
    rows = await (
        store.table(SEO_METADATA_TABLE)
        .select("page_url, title, description, keywords, structured_data")
        .eq("page_url", path)
        .limit(1)
        .execute()
    )
    if not rows:
        return None
    row = dict(rows[0])
    row["structured_data"] = _decode_structured_data(row.get("structured_data"))
    return row
