from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from moodlift.services import catalog_service
from moodlift.store import RowStore, get_store

router = APIRouter()


@router.get("/v1/consultants")
async def list_consultants(store: RowStore = Depends(get_store)):
    return {"items": await catalog_service.list_consultants(store)}


@router.get("/v1/games")
async def list_games(popular: bool = Query(False), store: RowStore = Depends(get_store)):
    return {"items": await catalog_service.list_games(store, popular_only=popular)}
