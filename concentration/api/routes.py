"""REST API routes."""

from typing import Optional

from fastapi import APIRouter, HTTPException

from ..config import settings
from ..models.api import (
    SessionConfigRequest,
    SessionResponse,
    SessionStatusResponse,
    ThemesResponse,
    RecordsResponse,
    HealthResponse,
)
from ..models.game import Difficulty, GameConfig, Theme
from ..game import GameSessionManager, ThemeCatalog

router = APIRouter()

# Global instances (will be initialized in main.py)
session_manager: GameSessionManager = None
theme_catalog: ThemeCatalog = None


def init_dependencies(sm: GameSessionManager, catalog: ThemeCatalog):
    """Initialize route dependencies."""
    global session_manager, theme_catalog
    session_manager = sm
    theme_catalog = catalog


def _resolve_theme(request: SessionConfigRequest) -> Theme:
    if request.symbols:
        # Custom decks must not share a built-in theme's records board
        if request.theme is not None and theme_catalog.get(request.theme) is not None:
            raise HTTPException(
                status_code=400,
                detail=f"Theme name already in use: {request.theme}",
            )
        try:
            return Theme(title=request.theme or "Custom", symbols=request.symbols)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    if request.theme is None:
        return theme_catalog.default

    theme = theme_catalog.get(request.theme)
    if theme is None:
        raise HTTPException(status_code=404, detail=f"Theme not found: {request.theme}")
    return theme


@router.post("/sessions", response_model=SessionResponse)
async def create_session(request: SessionConfigRequest):
    """Create a new game session."""
    if session_manager is None or theme_catalog is None:
        raise HTTPException(status_code=500, detail="Server not initialized")

    if request.duration_seconds is not None and request.duration_seconds < 1:
        raise HTTPException(status_code=400, detail="duration_seconds must be positive")

    theme = _resolve_theme(request)
    config = GameConfig.from_settings(settings)
    if request.duration_seconds is not None:
        config.duration_seconds = request.duration_seconds

    session = await session_manager.create_session(theme, request.difficulty, config)

    return SessionResponse(
        session_id=session.session_id,
        websocket_url=f"/ws/{session.session_id}",
        theme=theme.title,
        difficulty=request.difficulty,
        card_count=session.card_count,
    )


@router.get("/sessions/{session_id}", response_model=SessionStatusResponse)
async def get_session(session_id: str):
    """Get current session status."""
    if session_manager is None:
        raise HTTPException(status_code=500, detail="Server not initialized")

    session = await session_manager.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")

    return SessionStatusResponse(
        session_id=session.session_id,
        status=session.status,
        theme=session.theme.title,
        state=session.engine.snapshot(),
    )


@router.delete("/sessions/{session_id}")
async def delete_session(session_id: str):
    """End and cleanup a session."""
    if session_manager is None:
        raise HTTPException(status_code=500, detail="Server not initialized")

    session = await session_manager.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")

    await session_manager.remove_session(session_id)
    return {"status": "deleted"}


@router.get("/themes", response_model=ThemesResponse)
async def list_themes():
    """List available themes."""
    if theme_catalog is None:
        raise HTTPException(status_code=500, detail="Server not initialized")

    return ThemesResponse(themes=theme_catalog.all())


@router.get("/records", response_model=RecordsResponse)
async def list_records(theme: str, difficulty: Difficulty = Difficulty.EASY, limit: Optional[int] = None):
    """Best scores for a theme and difficulty."""
    if session_manager is None:
        raise HTTPException(status_code=500, detail="Server not initialized")

    return RecordsResponse(
        theme=theme,
        difficulty=difficulty,
        records=session_manager.records.top(theme, difficulty, limit),
    )


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    active_sessions = session_manager.active_session_count if session_manager else 0

    return HealthResponse(status="healthy", active_sessions=active_sessions)
