from datetime import date, timedelta

import numpy as np
import pytest
import requests

from moodlift_dashboard.components.consultant_carousel import carousel_pages, consultant_card_view
from moodlift_dashboard.data import api_client
from moodlift_dashboard.header import needs_streak_check, streak_message
from moodlift_dashboard.visualizations import build_heatmap_grid


def test_consultant_card_fallbacks():
    card = consultant_card_view({"id": "c1", "full_name": "  ", "title": None})
    assert card["name"] == "Consultant"
    assert card["title"] == "Therapist"
    assert card["initial"] == "C"
    assert (card["cta_label"], card["cta_url"], card["external"]) == ("Details", "/consultants/c1", False)


def test_consultant_card_with_booking_link():
    card = consultant_card_view(
        {
            "id": "c2",
            "full_name": "Dr. Asha Rao",
            "title": "Clinical Psychologist",
            "picture_url": "https://cdn.example/asha.png",
            "booking_url": "https://book.example/asha",
        }
    )
    assert card["name"] == "Dr. Asha Rao"
    assert card["picture_url"] == "https://cdn.example/asha.png"
    assert (card["cta_label"], card["cta_url"], card["external"]) == ("Book Now", "https://book.example/asha", True)


def test_carousel_pages():
    assert carousel_pages(list(range(7)), per_page=3) == [[0, 1, 2], [3, 4, 5], [6]]
    assert carousel_pages([]) == []


def test_heatmap_grid_places_every_day():
    today = date(2024, 5, 15)
    items = [
        {"date": (today - timedelta(days=offset)).isoformat(), "count": offset % 3}
        for offset in range(364, -1, -1)
    ]
    z, text, x_labels, y_labels = build_heatmap_grid(items)
    assert z.shape[0] == 7
    assert z.shape[1] == len(x_labels)
    assert np.count_nonzero(~np.isnan(z)) == 365
    assert np.nansum(z) == sum(item["count"] for item in items)
    # 2024-05-15 is a Wednesday, the last column
    assert z[2, -1] == 0
    assert text[2][-1].startswith("2024-05-15")
    assert y_labels[0] == "Mon"


def test_heatmap_grid_empty():
    z, text, x_labels, _ = build_heatmap_grid([])
    assert z.shape == (7, 0)
    assert x_labels == []


@pytest.mark.parametrize(
    "state, expected",
    [
        ({"current_streak": 1, "is_new_streak": True, "streak_broken": True}, "reset"),
        ({"current_streak": 1, "is_new_streak": True, "streak_broken": False}, "starts today"),
        ({"current_streak": 5, "is_new_streak": False, "streak_broken": False}, "5 days in a row"),
    ],
)
def test_streak_message(state, expected):
    assert expected in streak_message(state)


class _FakeResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self.ok = status_code < 400
        self.reason = "Bad Gateway" if status_code >= 400 else "OK"
        self._payload = payload
        self.text = str(payload)

    def json(self):
        return self._payload


@pytest.fixture
def configured_client(monkeypatch):
    monkeypatch.setenv("API_BASE_URL", "https://api.moodlift.test/")
    monkeypatch.setenv("BACKEND_SESSION_SECRET", "dash-secret")
    api_client.configure(lambda path, default=None: default, lambda: ("user-1", "mia@example.com"))
    calls = []
    yield calls
    api_client.configure(None, None)


def test_api_request_sends_service_headers(configured_client, monkeypatch):
    def fake_request(method, url, params=None, json=None, headers=None, timeout=None):
        configured_client.append((method, url, headers))
        return _FakeResponse(200, {"items": []})

    monkeypatch.setattr(api_client._SESSION, "request", fake_request)
    assert api_client.request("GET", "/v1/consultants") == {"items": []}
    method, url, headers = configured_client[0]
    assert (method, url) == ("GET", "https://api.moodlift.test/v1/consultants")
    assert headers == {"X-Backend-Token": "dash-secret", "X-User-Id": "user-1", "X-User-Email": "mia@example.com"}


def test_api_request_raises_with_detail(configured_client, monkeypatch):
    monkeypatch.setattr(
        api_client._SESSION,
        "request",
        lambda *args, **kwargs: _FakeResponse(502, {"detail": "Progress unavailable"}),
    )
    with pytest.raises(api_client.ApiError) as excinfo:
        api_client.request("GET", "/v1/progress")
    assert excinfo.value.status_code == 502
    assert "Progress unavailable" in str(excinfo.value)


def test_api_client_is_disabled_without_config(monkeypatch):
    monkeypatch.delenv("API_BASE_URL", raising=False)
    monkeypatch.delenv("BACKEND_SESSION_SECRET", raising=False)
    api_client.configure(None, None)
    assert not api_client.is_enabled()
    with pytest.raises(api_client.ApiError):
        api_client.request("GET", "/v1/progress")


def test_api_request_wraps_connection_errors(configured_client, monkeypatch):
    def refuse(*args, **kwargs):
        raise requests.ConnectionError("Connection refused")

    monkeypatch.setattr(api_client._SESSION, "request", refuse)
    with pytest.raises(api_client.ApiError) as excinfo:
        api_client.request("GET", "/v1/progress")
    assert excinfo.value.status_code is None
    assert "Connection refused" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, requests.RequestException)


def test_streak_is_rechecked_on_a_new_day():
    today = date(2024, 5, 15)
    cached = {"user_id": "user-1", "checked_on": today.isoformat(), "current_streak": 3}
    assert needs_streak_check(None, "user-1", today)
    assert not needs_streak_check(cached, "user-1", today)
    assert needs_streak_check(cached, "user-1", today + timedelta(days=1))
    assert needs_streak_check(cached, "user-2", today)
