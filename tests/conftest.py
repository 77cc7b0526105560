"""Root conftest for path setup and shared fixtures.

This file is loaded first by pytest and ensures the project root
is on sys.path before any test modules are imported.
"""

import sys
from pathlib import Path

# Add project root to path IMMEDIATELY
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import json
import random
from typing import Any, Optional

import pytest

from concentration.game.engine import ConcentrationGame
from concentration.game.observer import GameObserver
from concentration.game.timer import ManualScheduler
from concentration.models.game import Card, CardColor, Difficulty, GameConfig, Theme


# =============================================================================
# Helpers
# =============================================================================


def indices_of(deck: list[Optional[Card]], symbol: str) -> list[int]:
    """Slots holding ``symbol``."""
    return [i for i, card in enumerate(deck) if card is not None and card.symbol == symbol]


def mismatched_pair(deck: list[Optional[Card]]) -> tuple[int, int]:
    """Two live slots with different symbols."""
    live = [i for i, card in enumerate(deck) if card is not None]
    first = live[0]
    for other in live[1:]:
        if deck[other].symbol != deck[first].symbol:
            return first, other
    raise AssertionError("deck has a single symbol")


def flipped_indices(deck: list[Optional[Card]]) -> list[int]:
    return [i for i, card in enumerate(deck) if card is not None and card.is_flipped]


class RecordingObserver(GameObserver):
    """Records every engine notification in order."""

    def __init__(self):
        self.calls: list[tuple[str, tuple]] = []

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))

    def on_time_changed(self, seconds):
        self._record("time_changed", seconds)

    def on_score_changed(self, score):
        self._record("score_changed", score)

    def on_card_selected(self, index):
        self._record("card_selected", index)

    def on_card_positions_changed(self, deck):
        self._record("card_positions_changed", deck)

    def on_match_succeeded(self, first_index, second_index):
        self._record("match_succeeded", first_index, second_index)

    def on_match_failed(self, first_index, second_index):
        self._record("match_failed", first_index, second_index)

    def on_game_finished(self, score, won):
        self._record("game_finished", score, won)

    def named(self, name: str) -> list[tuple]:
        """Arguments of every call to ``name``."""
        return [args for call, args in self.calls if call == name]

    def names(self) -> list[str]:
        return [call for call, _ in self.calls]


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Virtual clock."""
    return ManualScheduler()


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source."""
    return random.Random(1234)


@pytest.fixture
def observer() -> RecordingObserver:
    """Observer recording engine calls."""
    return RecordingObserver()


@pytest.fixture
def game_config() -> GameConfig:
    """Default game configuration."""
    return GameConfig()


@pytest.fixture
def make_engine(scheduler, rng, observer, game_config):
    """Factory for engines on the virtual clock, deck already built."""

    def factory(
        symbols=("A", "B", "C", "D"),
        difficulty=Difficulty.EASY,
        config: Optional[GameConfig] = None,
    ) -> ConcentrationGame:
        game = ConcentrationGame(
            list(symbols),
            difficulty,
            config=config or game_config,
            scheduler=scheduler,
            rng=rng,
            observer=observer,
        )
        game.create_deck()
        return game

    return factory


# =============================================================================
# Theme Fixtures
# =============================================================================


@pytest.fixture
def sample_theme() -> Theme:
    """Four-symbol theme."""
    return Theme(
        title="Letters",
        symbols=["A", "B", "C", "D"],
        card_symbol="#",
        card_color=CardColor(red=0.1, green=0.2, blue=0.3),
    )


@pytest.fixture
def themes_json() -> str:
    """Theme list in the remote file's format."""
    return json.dumps(
        [
            {
                "card_color": {"blue": 0.2, "green": 0.8, "red": 0.1},
                "card_symbol": "🍏",
                "symbols": ["🍎", "🍌", "🍇", "🍓", "🍒"],
                "title": "Fruits",
            },
            {
                "card_color": {"blue": 1.0, "green": 0.0, "red": 0.0},
                "card_symbol": "⭐",
                "symbols": ["🚀", "🪐", "🌍"],
                "title": "Space",
            },
        ]
    )


# =============================================================================
# Mock WebSocket Fixture
# =============================================================================


class MockWebSocket:
    """Mock WebSocket for testing."""

    def __init__(self):
        self.accepted = False
        self.closed = False
        self.sent_messages: list[str] = []
        self._should_fail = False

    async def accept(self) -> None:
        """Accept the connection."""
        self.accepted = True

    async def close(self) -> None:
        """Close the connection."""
        self.closed = True

    async def send_text(self, message: str) -> None:
        """Send a text message."""
        if self._should_fail:
            raise ConnectionError("Connection closed")
        self.sent_messages.append(message)

    def set_should_fail(self, should_fail: bool) -> None:
        """Set whether send should fail."""
        self._should_fail = should_fail

    def get_sent_events(self) -> list[dict]:
        """Parse sent messages as JSON events."""
        return [json.loads(msg) for msg in self.sent_messages]

    def get_sent_types(self) -> list[str]:
        return [event["type"] for event in self.get_sent_events()]


@pytest.fixture
def mock_websocket() -> MockWebSocket:
    """Create a mock WebSocket."""
    return MockWebSocket()


@pytest.fixture
def mock_websocket_factory():
    """Factory to create multiple mock WebSockets."""

    def factory() -> MockWebSocket:
        return MockWebSocket()

    return factory
