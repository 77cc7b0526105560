"""WebSocket event models."""

import time
from typing import Literal, Optional
from pydantic import BaseModel, Field

from .game import Card, GameState


# =============================================================================
# Server to Client Events
# =============================================================================


class ConnectionAckEvent(BaseModel):
    """Connection acknowledged."""

    type: Literal["connection_ack"] = "connection_ack"
    session_id: str


class GameStateEvent(BaseModel):
    """Full game state snapshot."""

    type: Literal["game_state"] = "game_state"
    status: str
    state: GameState


class TimeChangedEvent(BaseModel):
    """Countdown update."""

    type: Literal["time_changed"] = "time_changed"
    remaining_seconds: int
    timestamp: float = Field(default_factory=time.time)


class ScoreChangedEvent(BaseModel):
    """Score update."""

    type: Literal["score_changed"] = "score_changed"
    score: int


class CardSelectedEvent(BaseModel):
    """A card was turned face-up."""

    type: Literal["card_selected"] = "card_selected"
    index: int


class CardPositionsChangedEvent(BaseModel):
    """Deck order changed; clients re-render every slot."""

    type: Literal["card_positions_changed"] = "card_positions_changed"
    deck: list[Optional[Card]]


class MatchSucceededEvent(BaseModel):
    """Pair matched and removed from the board."""

    type: Literal["match_succeeded"] = "match_succeeded"
    first_index: int
    second_index: int


class MatchFailedEvent(BaseModel):
    """Pair did not match; both cards go face-down."""

    type: Literal["match_failed"] = "match_failed"
    first_index: int
    second_index: int


class GameFinishedEvent(BaseModel):
    """Game over."""

    type: Literal["game_finished"] = "game_finished"
    score: int
    won: bool


class ErrorEvent(BaseModel):
    """Error notification."""

    type: Literal["error"] = "error"
    code: str
    message: str


# =============================================================================
# Client to Server Messages
# =============================================================================


class StartGameMessage(BaseModel):
    """Request to reveal, shuffle and start the countdown."""

    type: Literal["start_game"] = "start_game"


class SelectCardMessage(BaseModel):
    """Player tapped a card."""

    type: Literal["select_card"] = "select_card"
    index: int


class EndSessionMessage(BaseModel):
    """Request to end session."""

    type: Literal["end_session"] = "end_session"


class PingMessage(BaseModel):
    """Keep-alive ping."""

    type: Literal["ping"] = "ping"
