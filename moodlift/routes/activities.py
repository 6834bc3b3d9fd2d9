from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from moodlift.auth import require_user
from moodlift.services import rewards_service
from moodlift.services.auth_service import AuthUser
from moodlift.store import RowStore, get_store

router = APIRouter()


@router.get("/v1/activities")
async def list_activities(
    limit: int = Query(30, ge=1, le=200),
    user: AuthUser = Depends(require_user),
    store: RowStore = Depends(get_store),
):
    return {"items": await rewards_service.list_activities(store, user.id, limit=limit)}
