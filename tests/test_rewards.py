import asyncio

import pytest

from moodlift.services import rewards_service
from moodlift.services.activity_logger import GameActivityLogger


def _activities(store, user_id="u1"):
    return asyncio.run(rewards_service.list_activities(store, user_id))


def test_has_activity_today(store):
    assert not asyncio.run(rewards_service.has_activity_today(store, "u1", rewards_service.DAILY_LOGIN))
    asyncio.run(rewards_service.add_activity(store, "u1", rewards_service.DAILY_LOGIN, "Daily Login"))
    assert asyncio.run(rewards_service.has_activity_today(store, "u1", rewards_service.DAILY_LOGIN))
    assert not asyncio.run(rewards_service.has_activity_today(store, "u1", rewards_service.GAME))
    assert not asyncio.run(rewards_service.has_activity_today(store, "u2", rewards_service.DAILY_LOGIN))


def test_add_activity_rejects_blank_type(store):
    with pytest.raises(ValueError):
        asyncio.run(rewards_service.add_activity(store, "u1", "  "))


def test_list_activities_respects_limit(store):
    for idx in range(3):
        asyncio.run(rewards_service.add_activity(store, "u1", rewards_service.GAME, f"Game {idx}"))
    assert len(asyncio.run(rewards_service.list_activities(store, "u1", limit=2))) == 2


def test_game_logger_fires_once(store):
    logger = GameActivityLogger(store, "u1", "Calm Clouds")

    async def run():
        await logger.log(when=False)
        await logger.log(when=True)
        await logger.log(when=True)

    asyncio.run(run())
    activities = _activities(store)
    assert logger.logged
    assert [(item["activity_type"], item["description"]) for item in activities] == [("game", "Calm Clouds")]


def test_game_logger_prefers_explicit_description(store):
    asyncio.run(GameActivityLogger(store, "u1", "Calm Clouds", "Finished a calm session").log(True))
    assert _activities(store)[0]["description"] == "Finished a calm session"


def test_game_logger_swallows_store_errors(broken_store):
    logger = GameActivityLogger(broken_store, "u1", "Calm Clouds")
    asyncio.run(logger.log(True))
    assert logger.logged
