from __future__ import annotations

import logging
from datetime import datetime, timezone
from xml.etree import ElementTree

from moodlift.progress import parse_timestamp
from moodlift.services import seo_service
from moodlift.settings import get_settings
from moodlift.store import RowStore, StoreError

logger = logging.getLogger(__name__)

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"

# Core routes that are always part of the product.
STATIC_PATHS = [
    "/",
    "/about",
    "/blog",
    "/books",
    "/contact",
    "/discover",
    "/games",
    "/games&activities",
    "/mood-assessment",
    "/all-activities",
    "/dashboard",
    "/progress",
    "/rewards",
    "/privacy-policy",
]

CHANGE_FREQUENCIES = {"always", "hourly", "daily", "weekly", "monthly", "yearly", "never"}
DEFAULT_CHANGE_FREQUENCY = "weekly"


def default_priority(path: str) -> float:
    return 1.0 if path == "/" else 0.7


def _entry(origin: str, path: str, last_modified: datetime, change_frequency: str, priority: float) -> dict:
    return {
        "url": f"{origin}{path}",
        "last_modified": last_modified,
        "change_frequency": change_frequency,
        "priority": priority,
    }


def _seo_entry(origin: str, record: dict, now: datetime) -> dict | None:
    path = seo_service.normalize_page_path(record.get("page_url"))
    if not path:
        return None
    priority = record.get("priority")
    try:
        priority = default_priority(path) if priority is None else min(1.0, max(0.0, float(priority)))
    except (TypeError, ValueError):
        priority = default_priority(path)
    change_frequency = str(record.get("change_frequency") or "").strip().lower()
    if change_frequency not in CHANGE_FREQUENCIES:
        change_frequency = DEFAULT_CHANGE_FREQUENCY
    try:
        last_modified = parse_timestamp(record.get("updated_at")) or now
    except ValueError:
        last_modified = now
    return _entry(origin, path, last_modified, change_frequency, priority)


def build_sitemap(origin: str, seo_records: list[dict], now: datetime | None = None) -> list[dict]:
    """Static routes plus every page with SEO metadata, one entry per URL.

    SEO-backed entries win over static ones with the same URL.
    """
    origin = origin.rstrip("/")
    now = now or datetime.now(timezone.utc)
    by_url: dict[str, dict] = {}
    for path in STATIC_PATHS:
        entry = _entry(origin, path, now, DEFAULT_CHANGE_FREQUENCY, default_priority(path))
        by_url[entry["url"]] = entry

    seen = set()
    for record in seo_records:
        entry = _seo_entry(origin, record, now)
        if entry is None or entry["url"] in seen:
            continue
        seen.add(entry["url"])
        by_url[entry["url"]] = entry
    return list(by_url.values())


async def generate_sitemap(store: RowStore, now: datetime | None = None) -> list[dict]:
    try:
        seo_records = await seo_service.get_all_seo_metadata(store)
    except StoreError as exc:
        logger.error("Error building SEO-based sitemap entries: %s", exc)
        seo_records = []
    return build_sitemap(get_settings().site_origin, seo_records, now)


def render_sitemap_xml(entries: list[dict]) -> str:
    urlset = ElementTree.Element("urlset", xmlns=SITEMAP_NS)
    for entry in entries:
        node = ElementTree.SubElement(urlset, "url")
        ElementTree.SubElement(node, "loc").text = entry["url"]
        ElementTree.SubElement(node, "lastmod").text = entry["last_modified"].isoformat()
        ElementTree.SubElement(node, "changefreq").text = entry["change_frequency"]
        ElementTree.SubElement(node, "priority").text = f"{entry['priority']:.1f}"
    body = ElementTree.tostring(urlset, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}'
