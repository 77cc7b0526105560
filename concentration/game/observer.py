"""Observer interface through which the engine reports state changes."""

from typing import Callable, Optional

from pydantic import BaseModel

from ..models.game import Card
from ..models.events import (
    TimeChangedEvent,
    ScoreChangedEvent,
    CardSelectedEvent,
    CardPositionsChangedEvent,
    MatchSucceededEvent,
    MatchFailedEvent,
    GameFinishedEvent,
)


class GameObserver:
    """Receives engine notifications. Override the ones you care about."""

    def on_time_changed(self, seconds: int) -> None:
        pass

    def on_score_changed(self, score: int) -> None:
        pass

    def on_card_selected(self, index: int) -> None:
        pass

    def on_card_positions_changed(self, deck: list[Optional[Card]]) -> None:
        pass

    def on_match_succeeded(self, first_index: int, second_index: int) -> None:
        pass

    def on_match_failed(self, first_index: int, second_index: int) -> None:
        pass

    def on_game_finished(self, score: int, won: bool) -> None:
        pass


class EventObserver(GameObserver):
    """Turns engine callbacks into event models and hands them to a sink."""

    def __init__(self, sink: Callable[[BaseModel], None]):
        self.sink = sink

    def on_time_changed(self, seconds: int) -> None:
        self.sink(TimeChangedEvent(remaining_seconds=seconds))

    def on_score_changed(self, score: int) -> None:
        self.sink(ScoreChangedEvent(score=score))

    def on_card_selected(self, index: int) -> None:
        self.sink(CardSelectedEvent(index=index))

    def on_card_positions_changed(self, deck: list[Optional[Card]]) -> None:
        self.sink(CardPositionsChangedEvent(deck=deck))

    def on_match_succeeded(self, first_index: int, second_index: int) -> None:
        self.sink(MatchSucceededEvent(first_index=first_index, second_index=second_index))

    def on_match_failed(self, first_index: int, second_index: int) -> None:
        self.sink(MatchFailedEvent(first_index=first_index, second_index=second_index))

    def on_game_finished(self, score: int, won: bool) -> None:
        self.sink(GameFinishedEvent(score=score, won=won))
