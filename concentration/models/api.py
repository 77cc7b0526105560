"""API request/response models."""

from typing import Optional
from pydantic import BaseModel

from .game import Difficulty, GameState, Record, Theme


class SessionConfigRequest(BaseModel):
    """Request to create a new game session."""

    theme: Optional[str] = None
    symbols: Optional[list[str]] = None
    difficulty: Difficulty = Difficulty.EASY
    duration_seconds: Optional[int] = None


class SessionResponse(BaseModel):
    """Response after creating a session."""

    session_id: str
    websocket_url: str
    theme: str
    difficulty: Difficulty
    card_count: int


class SessionStatusResponse(BaseModel):
    """Current session status."""

    session_id: str
    status: str
    theme: str
    state: GameState


class ThemesResponse(BaseModel):
    """Available themes."""

    themes: list[Theme]


class RecordsResponse(BaseModel):
    """Best scores for a theme and difficulty."""

    theme: str
    difficulty: Difficulty
    records: list[Record]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    active_sessions: int
