"""Concentration rules: deck building, card selection, scoring and countdown."""

import logging
import random
from typing import Callable, Optional, Sequence

from ..models.game import Card, Difficulty, GameConfig, GameState
from .observer import GameObserver
from .timer import Cancellable, CountdownTimer, Scheduler, resolve_scheduler

logger = logging.getLogger(__name__)

Deck = list[Optional[Card]]


def build_deck(
    symbols: Sequence[str],
    cap: int = 4,
    rng: Optional[random.Random] = None,
) -> Deck:
    """Two face-down cards for each of the first ``cap`` symbols, shuffled."""
    deck: Deck = []
    for symbol in list(symbols)[: max(0, cap)]:
        deck.append(Card(symbol=symbol))
        deck.append(Card(symbol=symbol))
    return reshuffle(deck, rng)


def reshuffle(deck: Sequence[Optional[Card]], rng: Optional[random.Random] = None) -> Deck:
    """Uniformly permute a deck, empty slots included."""
    shuffled = list(deck)
    (rng or random).shuffle(shuffled)
    return shuffled


def rotate_deck(deck: Sequence[Optional[Card]]) -> Deck:
    """Move the last slot to the front."""
    if not deck:
        return []
    return [deck[-1], *deck[:-1]]


class ConcentrationGame:
    """A single game of Concentration.

    The engine is driven from one thread: every mutation happens inside
    ``select_card`` or a scheduler callback. Time comes from ``scheduler``
    (the running asyncio loop when omitted).
    """

    def __init__(
        self,
        symbols: Sequence[str],
        difficulty: Difficulty = Difficulty.EASY,
        config: Optional[GameConfig] = None,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
        observer: Optional[GameObserver] = None,
    ):
        if not symbols:
            raise ValueError("At least one card symbol is required")

        self.config = config or GameConfig()
        self.symbols = list(symbols)
        self.observer = observer
        self._difficulty = Difficulty(difficulty)
        self._scheduler = scheduler
        self._rng = rng or random.Random()
        self._timer = CountdownTimer(
            self.config.duration_seconds,
            interval=self.config.tick_seconds,
            scheduler=scheduler,
        )

        self._deck: Deck = []
        self._score = 0
        self._pending: list[Cancellable] = []
        self._flip_back: Optional[Cancellable] = None
        # Bumped whenever pending callbacks must be voided
        self._generation = 0
        self._stopped = False
        self._finished = False
        self._won: Optional[bool] = None
        self._final_score: Optional[int] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def score(self) -> int:
        return self._score

    @property
    def remaining_seconds(self) -> int:
        return self._timer.get_remaining()

    @property
    def difficulty(self) -> Difficulty:
        return self._difficulty

    @property
    def deck(self) -> Deck:
        """Copy of the current deck."""
        return [card.model_copy() if card is not None else None for card in self._deck]

    @property
    def is_finished(self) -> bool:
        return self._finished

    @property
    def won(self) -> Optional[bool]:
        return self._won

    @property
    def final_score(self) -> Optional[int]:
        return self._final_score

    @property
    def is_timer_running(self) -> bool:
        return self._timer.is_running

    def snapshot(self) -> GameState:
        """Build complete game state for clients."""
        return GameState(
            score=self._score,
            remaining_seconds=self.remaining_seconds,
            difficulty=self._difficulty,
            deck=self.deck,
            is_finished=self._finished,
            won=self._won,
            final_score=self._final_score,
        )

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def create_deck(self) -> Deck:
        """Build a fresh, face-down deck."""
        self._deck = build_deck(self.symbols, self.config.max_symbols, self._rng)
        logger.debug("Built deck of %d cards", len(self._deck))
        return self.deck

    def shuffle(self) -> Deck:
        """Re-randomize the current deck order."""
        self._deck = reshuffle(self._deck, self._rng)
        return self.deck

    def start_timer(self) -> None:
        """Report the remaining time and start counting down."""
        if self._finished or self._stopped or self._timer.is_running:
            return
        self._notify("on_time_changed", self._timer.get_remaining())
        self._timer.start(on_tick=self._on_tick, on_expire=self._on_expire)

    def select_card(self, index: int) -> None:
        """Handle a tap on the card at ``index``."""
        if self._finished or self._stopped or not self._is_live_slot(index):
            return

        flipped = [i for i, card in enumerate(self._deck) if card is not None and card.is_flipped]

        if not flipped:
            self._flip_up(index)
        elif len(flipped) == 1:
            first = flipped[0]
            if index == first:
                return
            self._flip_up(index)
            self._check_matching(first, index)
        else:
            self._clear_selection()

    def stop(self) -> None:
        """Tear the game down without reporting anything."""
        self._stopped = True
        self._timer.cancel()
        self._void_pending()

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def _is_live_slot(self, index: int) -> bool:
        return 0 <= index < len(self._deck) and self._deck[index] is not None

    def _flip_up(self, index: int) -> None:
        self._deck[index].is_flipped = True
        self._notify("on_card_selected", index)

    def _check_matching(self, first: int, second: int) -> None:
        if self._deck[first] == self._deck[second]:
            self._set_score(self._score + self.config.match_points)
            self._deck[first] = None
            self._deck[second] = None
            self._notify("on_match_succeeded", first, second)
            if all(card is None for card in self._deck):
                self._win()
        else:
            self._set_score(self._score - self.config.mismatch_penalty)
            self._notify("on_match_failed", first, second)
            self._flip_back = self._schedule(self.config.flip_back_seconds, self._turn_all_face_down)

    def _clear_selection(self) -> None:
        if self._flip_back is not None:
            self._flip_back.cancel()
            if self._flip_back in self._pending:
                self._pending.remove(self._flip_back)
        self._turn_all_face_down()

    def _turn_all_face_down(self) -> None:
        # Only the mismatched pair can be face-up here
        self._flip_back = None
        for card in self._deck:
            if card is not None:
                card.is_flipped = False

    def _set_score(self, score: int) -> None:
        self._score = score
        self._notify("on_score_changed", score)

    # ------------------------------------------------------------------
    # Countdown
    # ------------------------------------------------------------------

    def _on_tick(self, remaining: int) -> None:
        self._notify("on_time_changed", remaining)
        if (
            self._difficulty == Difficulty.HARD
            and remaining > 0
            and remaining % self.config.rotation_interval == 0
        ):
            self._rotate()

    def _rotate(self) -> None:
        self._deck = rotate_deck(self._deck)
        logger.debug("Rotated deck at %ds remaining", self.remaining_seconds)
        self._notify("on_card_positions_changed", self.deck)

    def _on_expire(self) -> None:
        if self._finished or self._stopped:
            return
        self._finish(won=False, final_score=self._score)
        self._notify("on_game_finished", self._final_score, False)

    # ------------------------------------------------------------------
    # End of game
    # ------------------------------------------------------------------

    def _win(self) -> None:
        self._finish(won=True, final_score=self._score + self._timer.get_remaining())
        final_score = self._final_score
        self._schedule(
            self.config.match_settle_seconds,
            lambda: self._notify("on_game_finished", final_score, True),
        )

    def _finish(self, won: bool, final_score: int) -> None:
        self._finished = True
        self._won = won
        self._final_score = final_score
        self._timer.cancel()
        self._void_pending()
        # A voided flip-back would otherwise leave a mismatched pair face-up
        self._turn_all_face_down()
        logger.debug("Game finished: won=%s score=%d", won, final_score)

    # ------------------------------------------------------------------
    # Scheduling helpers
    # ------------------------------------------------------------------

    def _schedule(self, delay: float, callback: Callable[[], None]) -> Cancellable:
        """Run ``callback`` after ``delay`` unless pending work is voided first."""
        generation = self._generation

        def run() -> None:
            if handle in self._pending:
                self._pending.remove(handle)
            if generation == self._generation and not self._stopped:
                callback()

        handle = resolve_scheduler(self._scheduler).call_later(delay, run)
        self._pending.append(handle)
        return handle

    def _void_pending(self) -> None:
        self._generation += 1
        for handle in self._pending:
            handle.cancel()
        self._pending.clear()
        self._flip_back = None

    def _notify(self, name: str, *args) -> None:
        observer = self.observer
        if observer is not None:
            getattr(observer, name)(*args)
