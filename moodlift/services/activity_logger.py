from __future__ import annotations

import logging

from moodlift.services import rewards_service
from moodlift.store import RowStore, StoreError

logger = logging.getLogger(__name__)


class GameActivityLogger:
    """Records a ``game`` reward activity the first time a game is finished.

    One logger belongs to one play-through: once it has fired, later calls are
    no-ops even if the write failed.
    """

    def __init__(self, store: RowStore, user_id: str, game_name: str, description: str | None = None):
        self._store = store
        self.user_id = user_id
        self.game_name = game_name
        self.description = description
        self.logged = False

    async def log(self, when: bool) -> None:
        if not when or self.logged:
            return
        self.logged = True
        try:
            await rewards_service.add_activity(
                self._store,
                self.user_id,
                rewards_service.GAME,
                self.description if self.description is not None else self.game_name,
            )
        except (StoreError, ValueError) as exc:
            logger.error("Failed to log game activity: %s", exc)
