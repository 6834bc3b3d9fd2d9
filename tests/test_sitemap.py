import asyncio
from datetime import datetime, timezone
from xml.etree import ElementTree

from moodlift.sitemap import STATIC_PATHS, build_sitemap, generate_sitemap, render_sitemap_xml

ORIGIN = "https://moodlift.test"
NOW = datetime(2024, 8, 1, tzinfo=timezone.utc)


def _by_url(entries):
    return {entry["url"]: entry for entry in entries}


def test_static_entries_only():
    entries = build_sitemap(ORIGIN + "/", [], NOW)
    assert [entry["url"] for entry in entries] == [ORIGIN + path for path in STATIC_PATHS]
    by_url = _by_url(entries)
    assert by_url[ORIGIN + "/"]["priority"] == 1.0
    assert by_url[ORIGIN + "/about"]["priority"] == 0.7
    assert all(entry["change_frequency"] == "weekly" for entry in entries)
    assert all(entry["last_modified"] == NOW for entry in entries)


def test_seo_record_overrides_static_entry_in_place():
    records = [{"page_url": "about", "priority": 0.9, "change_frequency": "monthly", "updated_at": "2024-07-01T00:00:00Z"}]
    entries = build_sitemap(ORIGIN, records, NOW)
    assert len(entries) == len(STATIC_PATHS)
    about = entries[STATIC_PATHS.index("/about")]
    assert about["url"] == ORIGIN + "/about"
    assert about["priority"] == 0.9
    assert about["change_frequency"] == "monthly"
    assert about["last_modified"] == datetime(2024, 7, 1, tzinfo=timezone.utc)


def test_seo_records_are_normalized_and_deduplicated():
    records = [
        {"page_url": " /games/calm-clouds "},
        {"page_url": "games/calm-clouds", "priority": 0.1},
        {"page_url": ""},
        {"page_url": "   "},
        {"page_url": "/blog/breathing", "priority": "not a number", "change_frequency": "sometimes"},
    ]
    entries = build_sitemap(ORIGIN, records, NOW)
    assert len(entries) == len(STATIC_PATHS) + 2
    by_url = _by_url(entries)
    assert by_url[ORIGIN + "/games/calm-clouds"]["priority"] == 0.7
    assert by_url[ORIGIN + "/blog/breathing"]["change_frequency"] == "weekly"
    assert entries[-1]["url"] == ORIGIN + "/blog/breathing"


def test_xml_rendering():
    xml = render_sitemap_xml(build_sitemap(ORIGIN, [], NOW))
    assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    root = ElementTree.fromstring(xml.split("\n", 1)[1])
    ns = {"sm": "http://www.sitemaps.org/schemas/sitemap/0.9"}
    urls = root.findall("sm:url", ns)
    assert len(urls) == len(STATIC_PATHS)
    assert urls[0].find("sm:loc", ns).text == ORIGIN + "/"
    assert urls[0].find("sm:priority", ns).text == "1.0"


def test_generate_sitemap_falls_back_to_static_routes(broken_store):
    entries = asyncio.run(generate_sitemap(broken_store, NOW))
    assert [entry["url"] for entry in entries] == [ORIGIN + path for path in STATIC_PATHS]
