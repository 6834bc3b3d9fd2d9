from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from moodlift.db_init import USER_STREAKS_TABLE
from moodlift.services import rewards_service
from moodlift.settings import get_settings
from moodlift.store import RowStore, StoreError
from moodlift.streak_utils import (
    StreakData,
    StreakUpdateResult,
    calculate_streak_update,
    get_today,
    to_date,
)

logger = logging.getLogger(__name__)

UserGetter = Callable[[], Awaitable[Optional[object]]]


class StreakTracker:
    """Login-streak state for one user.

    Mirrors what a page shows: ``streak_data``, ``loading`` and ``error``.
    Call :meth:`fetch_streak` before :meth:`update_streak` so the tracker knows
    whether the user already has a streak row.
    """

    def __init__(self, store: RowStore, get_user: UserGetter, today=None):
        self._store = store
        self._get_user = get_user
        self._today = today
        self.streak_data: StreakData | None = None
        self.loading = True
        self.error: str | None = None

    def _current_day(self):
        return to_date(self._today) or get_today(get_settings().app_timezone)

    async def fetch_streak(self) -> None:
        self.loading = True
        self.error = None
        try:
            user = await self._get_user()
            if not user:
                self.streak_data = None
                return
            row = await (
                self._store.table(USER_STREAKS_TABLE)
                .select("current_streak, longest_streak, last_login_date")
                .eq("user_id", user.id)
                .maybe_single()
            )
            if row:
                self.streak_data = StreakData(
                    current_streak=int(row.get("current_streak") or 0),
                    longest_streak=int(row.get("longest_streak") or 0),
                    last_login_date=to_date(row.get("last_login_date")),
                )
        except (StoreError, ValueError) as exc:
            self.error = str(exc) or "Failed to fetch streak"
        finally:
            self.loading = False

    async def refetch_streak(self) -> None:
        await self.fetch_streak()

    async def _log_daily_login(self, user_id: str, today) -> None:
        try:
            if not await rewards_service.has_activity_today(
                self._store, user_id, rewards_service.DAILY_LOGIN, today=today
            ):
                await rewards_service.add_activity(
                    self._store, user_id, rewards_service.DAILY_LOGIN, "Daily Login", today=today
                )
        except (StoreError, ValueError) as exc:
            logger.error("Failed to log daily_login activity: %s", exc)

    async def update_streak(self) -> StreakUpdateResult | None:
        try:
            user = await self._get_user()
            if not user:
                return None

            today = self._current_day()
            await self._log_daily_login(user.id, today)
            now_iso = datetime.now(timezone.utc).isoformat()

            if self.streak_data is None:
                await self._store.table(USER_STREAKS_TABLE).insert(
                    {
                        "user_id": user.id,
                        "current_streak": 1,
                        "longest_streak": 1,
                        "last_login_date": today.isoformat(),
                        "updated_at": now_iso,
                    }
                ).execute()
                self.streak_data = StreakData(1, 1, today)
                return StreakUpdateResult(1, 1, is_new_streak=True, streak_broken=False)

            update = calculate_streak_update(
                self.streak_data.current_streak,
                self.streak_data.longest_streak,
                self.streak_data.last_login_date,
                today,
            )
            last_login = max(today, self.streak_data.last_login_date or today)
            await (
                self._store.table(USER_STREAKS_TABLE)
                .update(
                    {
                        "current_streak": update.current_streak,
                        "longest_streak": update.longest_streak,
                        "last_login_date": last_login.isoformat(),
                        "updated_at": now_iso,
                    }
                )
                .eq("user_id", user.id)
                .execute()
            )
            self.streak_data = StreakData(update.current_streak, update.longest_streak, last_login)
            return update
        except (StoreError, ValueError) as exc:
            self.error = str(exc) or "Failed to update streak"
            return None
