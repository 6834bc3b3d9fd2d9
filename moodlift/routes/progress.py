from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from moodlift.auth import require_user
from moodlift.schemas import (
    AssessmentCreate,
    AssessmentResponse,
    GameSessionCreate,
    GameSessionResponse,
    HeatmapResponse,
    UserProgressResponse,
)
from moodlift.services import progress_service
from moodlift.services.activity_logger import GameActivityLogger
from moodlift.services.auth_service import AuthUser
from moodlift.store import RowStore, get_store

router = APIRouter()


@router.get("/v1/progress", response_model=UserProgressResponse)
async def get_progress(user: AuthUser = Depends(require_user), store: RowStore = Depends(get_store)):
    summary = await progress_service.get_user_progress(store, user.id)
    if summary is None:
        raise HTTPException(status_code=502, detail="Progress unavailable")
    return summary


@router.get("/v1/progress/heatmap", response_model=HeatmapResponse)
async def get_heatmap(user: AuthUser = Depends(require_user), store: RowStore = Depends(get_store)):
    return {"items": await progress_service.get_contribution_heatmap(store, user.id)}


@router.post("/v1/sessions", status_code=201, response_model=GameSessionResponse)
async def create_game_session(
    payload: GameSessionCreate,
    user: AuthUser = Depends(require_user),
    store: RowStore = Depends(get_store),
):
    session = await progress_service.save_game_session(
        store,
        user.id,
        payload.game_title.strip(),
        payload.score,
        payload.duration,
        payload.mood_before,
        payload.mood_after,
    )
    if session is None:
        raise HTTPException(status_code=502, detail="Could not save game session")
    await GameActivityLogger(store, user.id, payload.game_title.strip(), payload.description).log(when=True)
    return session


@router.post("/v1/assessments", status_code=201, response_model=AssessmentResponse)
async def create_assessment(
    payload: AssessmentCreate,
    user: AuthUser = Depends(require_user),
    store: RowStore = Depends(get_store),
):
    result = await progress_service.save_assessment_result(store, user.id, payload.score, payload.insights)
    if result is None:
        raise HTTPException(status_code=502, detail="Could not save assessment result")
    return result
