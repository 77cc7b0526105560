"""Game state models."""

import time
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class Difficulty(str, Enum):
    """Game difficulty."""

    EASY = "easy"
    HARD = "hard"

    def description(self) -> str:
        """Display name, also used as the records key."""
        return self.value.capitalize()


class Card(BaseModel):
    """Playing card.

    Two cards are equal when their symbols match, whatever their face state,
    so both halves of a pair compare equal.
    """

    symbol: str = Field(frozen=True)
    is_flipped: bool = False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.symbol == other.symbol

    def __hash__(self) -> int:
        return hash(self.symbol)

    def __str__(self) -> str:
        return self.symbol


class GameConfig(BaseModel):
    """Game configuration."""

    duration_seconds: int = Field(default=45, ge=0)
    max_symbols: int = Field(default=4, ge=1)
    match_points: int = 3
    mismatch_penalty: int = 1
    rotation_interval: int = Field(default=10, gt=0)
    tick_seconds: float = Field(default=1.0, gt=0)
    match_settle_seconds: float = Field(default=1.0, ge=0)
    flip_back_seconds: float = Field(default=0.3, ge=0)

    @classmethod
    def from_settings(cls, settings) -> "GameConfig":
        """Build a per-game config from application settings."""
        return cls(
            duration_seconds=settings.game_duration_seconds,
            max_symbols=settings.max_symbols,
            rotation_interval=settings.rotation_interval,
            match_settle_seconds=settings.match_settle_seconds,
            flip_back_seconds=settings.flip_back_seconds,
        )


class GameState(BaseModel):
    """Snapshot of a running game for clients."""

    score: int
    remaining_seconds: int
    difficulty: Difficulty
    deck: list[Optional[Card]]
    is_finished: bool = False
    won: Optional[bool] = None
    final_score: Optional[int] = None


class CardColor(BaseModel):
    """Card back colour, channels in 0..1."""

    red: float = Field(ge=0.0, le=1.0)
    green: float = Field(ge=0.0, le=1.0)
    blue: float = Field(ge=0.0, le=1.0)


class Theme(BaseModel):
    """A named set of card symbols."""

    title: str
    symbols: list[str]
    card_symbol: str = "?"
    card_color: CardColor = CardColor(red=1.0, green=0.5, blue=0.0)

    @field_validator("symbols")
    @classmethod
    def _unique_symbols(cls, value: list[str]) -> list[str]:
        # Order matters: only the first max_symbols make it into a deck
        unique = list(dict.fromkeys(s for s in value if s))
        if not unique:
            raise ValueError("theme needs at least one symbol")
        return unique


class Record(BaseModel):
    """A finished game's score."""

    theme: str
    difficulty: Difficulty
    score: int
    recorded_at: float = Field(default_factory=time.time)
