"""Game engine components."""

from .engine import ConcentrationGame, build_deck, reshuffle, rotate_deck
from .observer import GameObserver, EventObserver
from .records import RecordsBoard
from .session import GameSession, GameSessionManager
from .themes import DEFAULT_THEMES, ThemeCatalog, load_themes, make_game
from .timer import CountdownTimer, ManualScheduler, Scheduler

__all__ = [
    "ConcentrationGame",
    "build_deck",
    "reshuffle",
    "rotate_deck",
    "GameObserver",
    "EventObserver",
    "RecordsBoard",
    "GameSession",
    "GameSessionManager",
    "DEFAULT_THEMES",
    "ThemeCatalog",
    "load_themes",
    "make_game",
    "CountdownTimer",
    "ManualScheduler",
    "Scheduler",
]
