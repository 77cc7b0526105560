"""Game session management."""

import asyncio
import logging
import uuid
from typing import Optional

from pydantic import BaseModel

from ..models.game import Difficulty, GameConfig, Theme
from ..models.events import (
    ConnectionAckEvent,
    GameStateEvent,
    CardPositionsChangedEvent,
    GameFinishedEvent,
    ErrorEvent,
)
from ..websocket_manager import WebSocketManager
from .observer import EventObserver
from .records import RecordsBoard
from .themes import make_game

logger = logging.getLogger(__name__)


class GameSession:
    """Runs one game of Concentration for its connected clients.

    Engine notifications are queued and broadcast in order by a single pump
    task, so clients see events exactly as the engine emitted them.
    """

    def __init__(
        self,
        session_id: str,
        theme: Theme,
        difficulty: Difficulty,
        config: GameConfig,
        records: Optional[RecordsBoard] = None,
        peek_seconds: float = 1.0,
    ):
        self.session_id = session_id
        self.theme = theme
        self.difficulty = Difficulty(difficulty)
        self.config = config
        self.records = records
        self.peek_seconds = peek_seconds
        self.status = "waiting"  # waiting, peeking, in_progress, complete

        self.ws_manager = WebSocketManager()
        self.engine = make_game(theme, self.difficulty, config, observer=EventObserver(self._on_engine_event))
        self.engine.create_deck()

        self._events: asyncio.Queue = asyncio.Queue()
        self._pump_task: Optional[asyncio.Task] = None
        self._start_task: Optional[asyncio.Task] = None

    @property
    def card_count(self) -> int:
        return len(self.engine.deck)

    def build_state_event(self) -> GameStateEvent:
        """Full snapshot for a (re)connecting client."""
        return GameStateEvent(status=self.status, state=self.engine.snapshot())

    # ------------------------------------------------------------------
    # Event flow
    # ------------------------------------------------------------------

    def publish(self, event: BaseModel) -> None:
        """Queue an event for broadcast."""
        self._events.put_nowait(event)
        self._ensure_pump()

    def _on_engine_event(self, event: BaseModel) -> None:
        self.publish(event)
        if isinstance(event, GameFinishedEvent):
            self._on_game_finished(event)

    def _on_game_finished(self, event: GameFinishedEvent) -> None:
        self.status = "complete"
        self.engine.observer = None
        if self.records is not None:
            kept = self.records.submit(self.theme.title, self.difficulty, event.score)
            logger.info(
                "Session %s finished: won=%s score=%d recorded=%s",
                self.session_id, event.won, event.score, kept,
            )

    def _ensure_pump(self) -> None:
        if self._pump_task is None or self._pump_task.done():
            self._pump_task = asyncio.get_running_loop().create_task(self._pump_events())

    async def _pump_events(self) -> None:
        while True:
            event = await self._events.get()
            try:
                await self.broadcast(event)
            finally:
                self._events.task_done()

    async def flush_events(self) -> None:
        """Wait until every queued event has been broadcast."""
        await self._events.join()

    async def broadcast(self, event: BaseModel) -> None:
        """Broadcast event to all connected clients."""
        await self.ws_manager.broadcast(event)

    # ------------------------------------------------------------------
    # Clients
    # ------------------------------------------------------------------

    async def on_client_connect(self, websocket) -> None:
        """Handle new client connection."""
        await self.ws_manager.connect(websocket)
        await self.ws_manager.send_event(websocket, ConnectionAckEvent(session_id=self.session_id))
        await self.ws_manager.send_event(websocket, self.build_state_event())

    async def on_client_disconnect(self, websocket) -> None:
        """Handle client disconnection."""
        await self.ws_manager.disconnect(websocket)

    # ------------------------------------------------------------------
    # Game flow
    # ------------------------------------------------------------------

    def launch(self) -> Optional[asyncio.Task]:
        """Start the game in the background. Only the first call does anything."""
        if self._start_task is not None or self.status != "waiting":
            return None
        self._start_task = asyncio.get_running_loop().create_task(self.start())
        return self._start_task

    async def start(self) -> None:
        """Show the cards, shuffle them once, then start the countdown."""
        if self.status != "waiting":
            return
        try:
            self.status = "peeking"
            self.publish(self.build_state_event())

            await asyncio.sleep(self.peek_seconds)
            if self.status != "peeking":
                return

            deck = self.engine.shuffle()
            self.status = "in_progress"
            self.publish(CardPositionsChangedEvent(deck=deck))
            self.engine.start_timer()
            logger.info("Session %s started (%s, %s)", self.session_id, self.theme.title, self.difficulty.value)
        except Exception as e:
            logger.exception("Error in game session %s", self.session_id)
            self.publish(ErrorEvent(code="game_error", message=str(e)))

    async def select_card(self, index: int) -> None:
        """Receive a card tap from a client."""
        if self.status != "in_progress":
            return
        self.engine.select_card(index)

    async def end_session(self) -> None:
        """End the game session without a result."""
        if self.status == "complete":
            return
        self.engine.stop()
        self.status = "complete"
        self.publish(self.build_state_event())

    async def cleanup(self) -> None:
        """Cleanup session resources."""
        self.engine.stop()
        for task in (self._start_task, self._pump_task):
            if task is not None and not task.done():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
        await self.ws_manager.close_all()


class GameSessionManager:
    """Manages all active game sessions."""

    def __init__(self, records: Optional[RecordsBoard] = None, peek_seconds: float = 1.0):
        self.records = records if records is not None else RecordsBoard()
        self.peek_seconds = peek_seconds
        self._sessions: dict[str, GameSession] = {}
        self._lock = asyncio.Lock()

    async def create_session(
        self,
        theme: Theme,
        difficulty: Difficulty,
        config: GameConfig,
    ) -> GameSession:
        """Create a new game session."""
        async with self._lock:
            session_id = str(uuid.uuid4())[:8]
            session = GameSession(
                session_id,
                theme,
                difficulty,
                config,
                records=self.records,
                peek_seconds=self.peek_seconds,
            )
            self._sessions[session_id] = session
            return session

    async def get_session(self, session_id: str) -> Optional[GameSession]:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    async def remove_session(self, session_id: str) -> None:
        """Remove and cleanup a session."""
        async with self._lock:
            if session_id in self._sessions:
                await self._sessions[session_id].cleanup()
                del self._sessions[session_id]

    @property
    def active_session_count(self) -> int:
        """Number of active sessions."""
        return len(self._sessions)

    async def cleanup_all(self) -> None:
        """Cleanup all sessions."""
        async with self._lock:
            for session in self._sessions.values():
                await session.cleanup()
            self._sessions.clear()
