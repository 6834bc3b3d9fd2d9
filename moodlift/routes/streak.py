from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from moodlift.auth import require_user
from moodlift.schemas import StreakCheckResponse, StreakResponse
from moodlift.services.auth_service import AuthUser
from moodlift.services.streak_service import StreakTracker
from moodlift.store import RowStore, get_store

router = APIRouter()


def _tracker(store: RowStore, user: AuthUser) -> StreakTracker:
    async def current_user():
        return user

    return StreakTracker(store, current_user)


@router.get("/v1/streak", response_model=StreakResponse)
async def get_streak(user: AuthUser = Depends(require_user), store: RowStore = Depends(get_store)):
    tracker = _tracker(store, user)
    await tracker.fetch_streak()
    if tracker.error:
        raise HTTPException(status_code=502, detail=tracker.error)
    data = tracker.streak_data
    if data is None:
        return {"current_streak": 0, "longest_streak": 0, "last_login_date": None}
    return {
        "current_streak": data.current_streak,
        "longest_streak": data.longest_streak,
        "last_login_date": data.last_login_date.isoformat() if data.last_login_date else None,
    }


@router.post("/v1/streak/check", response_model=StreakCheckResponse)
async def check_streak(user: AuthUser = Depends(require_user), store: RowStore = Depends(get_store)):
    tracker = _tracker(store, user)
    await tracker.fetch_streak()
    if tracker.error:
        raise HTTPException(status_code=502, detail=tracker.error)
    result = await tracker.update_streak()
    if result is None:
        raise HTTPException(status_code=502, detail=tracker.error or "Failed to update streak")
    return {
        "current_streak": result.current_streak,
        "longest_streak": result.longest_streak,
        "is_new_streak": result.is_new_streak,
        "streak_broken": result.streak_broken,
    }
