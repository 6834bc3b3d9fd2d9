from __future__ import annotations

from typing import Optional, List, Dict, Any

from pydantic import BaseModel, Field


class GameSessionCreate(BaseModel):
    game_title: str = Field(..., min_length=1)
    score: int = 0
    duration: int = Field(0, ge=0)
    mood_before: Optional[int] = None
    mood_after: Optional[int] = None
    description: Optional[str] = None


class GameSessionResponse(BaseModel):
    id: str
    user_id: str
    game_title: str
    score: int
    duration: int
    mood_before: Optional[int] = None
    mood_after: Optional[int] = None
    completed_at: str


class AssessmentCreate(BaseModel):
    score: int
    insights: str = ""


class AssessmentResponse(BaseModel):
    id: str
    user_id: str
    score: int
    insights: str
    completed_at: str


class WeeklyActivity(BaseModel):
    day: str
    games: int
    mood: int


class Achievement(BaseModel):
    title: str
    description: str
    earned: bool


class UserProgressResponse(BaseModel):
    total_games: int
    avg_mood: float
    current_streak: int
    weekly_activity: List[WeeklyActivity]
    achievements: List[Achievement]


class HeatmapDay(BaseModel):
    date: str
    count: int


class HeatmapResponse(BaseModel):
    items: List[HeatmapDay]


class StreakResponse(BaseModel):
    current_streak: int
    longest_streak: int
    last_login_date: Optional[str]


class StreakCheckResponse(BaseModel):
    current_streak: int
    longest_streak: int
    is_new_streak: bool
    streak_broken: bool


class SeoMetadataResponse(BaseModel):
    page_url: str
    title: Optional[str] = None
    description: Optional[str] = None
    keywords: Optional[str] = None
    structured_data: Optional[Dict[str, Any]] = None
    structured_data_html: Optional[str] = None
