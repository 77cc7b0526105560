"""Pydantic models for game state and events."""

from .game import (
    Card,
    CardColor,
    Difficulty,
    GameConfig,
    GameState,
    Record,
    Theme,
)
from .events import (
    # Server to client
    ConnectionAckEvent,
    GameStateEvent,
    TimeChangedEvent,
    ScoreChangedEvent,
    CardSelectedEvent,
    CardPositionsChangedEvent,
    MatchSucceededEvent,
    MatchFailedEvent,
    GameFinishedEvent,
    ErrorEvent,
    # Client to server
    StartGameMessage,
    SelectCardMessage,
    EndSessionMessage,
    PingMessage,
)
from .api import (
    SessionConfigRequest,
    SessionResponse,
    SessionStatusResponse,
    ThemesResponse,
    RecordsResponse,
    HealthResponse,
)

__all__ = [
    # Game models
    "Card",
    "CardColor",
    "Difficulty",
    "GameConfig",
    "GameState",
    "Record",
    "Theme",
    # Events
    "ConnectionAckEvent",
    "GameStateEvent",
    "TimeChangedEvent",
    "ScoreChangedEvent",
    "CardSelectedEvent",
    "CardPositionsChangedEvent",
    "MatchSucceededEvent",
    "MatchFailedEvent",
    "GameFinishedEvent",
    "ErrorEvent",
    "StartGameMessage",
    "SelectCardMessage",
    "EndSessionMessage",
    "PingMessage",
    # API
    "SessionConfigRequest",
    "SessionResponse",
    "SessionStatusResponse",
    "ThemesResponse",
    "RecordsResponse",
    "HealthResponse",
]
