"""Tests for GameSession and GameSessionManager."""

# Add project root to path for imports BEFORE other imports
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import asyncio

import pytest

from concentration.game.records import RecordsBoard
from concentration.game.session import GameSession, GameSessionManager
from concentration.models.game import Difficulty, GameConfig

from conftest import flipped_indices, indices_of, mismatched_pair


# =============================================================================
# Test Fixtures
# =============================================================================


@pytest.fixture
def session_config():
    """Fast config: long countdown, short delays."""
    return GameConfig(match_settle_seconds=0.01, flip_back_seconds=0.01)


@pytest.fixture
def records():
    return RecordsBoard()


async def started_session(theme, config, records, websocket=None) -> GameSession:
    """Create a session, attach a client and run it past the peek."""
    session = GameSession("test123", theme, Difficulty.EASY, config, records=records, peek_seconds=0)
    if websocket is not None:
        await session.on_client_connect(websocket)
    await session.start()
    await session.flush_events()
    return session


# =============================================================================
# GameSession Tests
# =============================================================================


class TestGameSession:
    """Tests for GameSession class."""

    @pytest.mark.asyncio
    async def test_session_initialization(self, sample_theme, session_config, records):
        """Test session is created with a dealt, face-down deck."""
        session = GameSession("abc", sample_theme, "hard", session_config, records=records)
        try:
            assert session.session_id == "abc"
            assert session.status == "waiting"
            assert session.difficulty == Difficulty.HARD
            assert session.card_count == 8
            assert flipped_indices(session.engine.deck) == []
        finally:
            await session.cleanup()

    @pytest.mark.asyncio
    async def test_connect_sends_ack_and_state(self, sample_theme, session_config, mock_websocket):
        """Test a new client gets an ack and a snapshot."""
        session = GameSession("abc", sample_theme, Difficulty.EASY, session_config)
        try:
            await session.on_client_connect(mock_websocket)

            events = mock_websocket.get_sent_events()
            assert mock_websocket.accepted is True
            assert events[0] == {"type": "connection_ack", "session_id": "abc"}
            assert events[1]["type"] == "game_state"
            assert events[1]["status"] == "waiting"
            assert len(events[1]["state"]["deck"]) == 8
        finally:
            await session.cleanup()

    @pytest.mark.asyncio
    async def test_start_peeks_then_runs(self, sample_theme, session_config, records, mock_websocket):
        """Test the start sequence and its events."""
        session = await started_session(sample_theme, session_config, records, mock_websocket)
        try:
            assert session.status == "in_progress"
            assert session.engine.is_timer_running is True

            events = mock_websocket.get_sent_events()
            assert [e["type"] for e in events[:5]] == [
                "connection_ack",
                "game_state",
                "game_state",
                "card_positions_changed",
                "time_changed",
            ]
            assert events[2]["status"] == "peeking"
            assert len(events[3]["deck"]) == 8
            assert events[4]["remaining_seconds"] == 45
        finally:
            await session.cleanup()

    @pytest.mark.asyncio
    async def test_start_only_once(self, sample_theme, session_config, records):
        """Test a second start is ignored."""
        session = await started_session(sample_theme, session_config, records)
        try:
            await session.start()
            assert session.status == "in_progress"
            assert session.launch() is None
        finally:
            await session.cleanup()

    @pytest.mark.asyncio
    async def test_launch_runs_in_background(self, sample_theme, session_config, records):
        """Test launch schedules the start task once."""
        session = GameSession("abc", sample_theme, Difficulty.EASY, session_config, records=records, peek_seconds=0)
        try:
            task = session.launch()
            assert task is not None
            assert session.launch() is None

            await task
            assert session.status == "in_progress"
        finally:
            await session.cleanup()

    @pytest.mark.asyncio
    async def test_select_ignored_before_start(self, sample_theme, session_config):
        """Test taps before the game starts do nothing."""
        session = GameSession("abc", sample_theme, Difficulty.EASY, session_config)
        try:
            await session.select_card(0)
            assert flipped_indices(session.engine.deck) == []
        finally:
            await session.cleanup()

    @pytest.mark.asyncio
    async def test_match_is_broadcast(self, sample_theme, session_config, records, mock_websocket):
        """Test a matched pair produces selection, score and match events."""
        session = await started_session(sample_theme, session_config, records, mock_websocket)
        try:
            mock_websocket.sent_messages.clear()
            first, second = indices_of(session.engine.deck, "A")

            await session.select_card(first)
            await session.select_card(second)
            await session.flush_events()

            events = mock_websocket.get_sent_events()
            assert [e["type"] for e in events] == [
                "card_selected",
                "card_selected",
                "score_changed",
                "match_succeeded",
            ]
            assert events[2]["score"] == 3
            assert events[3] == {"type": "match_succeeded", "first_index": first, "second_index": second}
        finally:
            await session.cleanup()

    @pytest.mark.asyncio
    async def test_mismatch_is_broadcast(self, sample_theme, session_config, records, mock_websocket):
        """Test a failed match and the delayed flip back."""
        session = await started_session(sample_theme, session_config, records, mock_websocket)
        try:
            mock_websocket.sent_messages.clear()
            first, second = mismatched_pair(session.engine.deck)

            await session.select_card(first)
            await session.select_card(second)
            await session.flush_events()

            assert mock_websocket.get_sent_types() == [
                "card_selected",
                "card_selected",
                "score_changed",
                "match_failed",
            ]
            assert session.engine.score == -1

            await asyncio.sleep(0.05)
            assert flipped_indices(session.engine.deck) == []
        finally:
            await session.cleanup()

    @pytest.mark.asyncio
    async def test_win_is_recorded(self, sample_theme, session_config, records, mock_websocket):
        """Test clearing the board finishes the game and stores the score."""
        session = await started_session(sample_theme, session_config, records, mock_websocket)
        try:
            for symbol in sample_theme.symbols:
                first, second = indices_of(session.engine.deck, symbol)
                await session.select_card(first)
                await session.select_card(second)

            await asyncio.sleep(0.05)
            await session.flush_events()

            finished = [e for e in mock_websocket.get_sent_events() if e["type"] == "game_finished"]
            assert len(finished) == 1
            assert finished[0]["won"] is True
            assert finished[0]["score"] == session.engine.final_score
            assert session.status == "complete"

            top = records.top(sample_theme.title, Difficulty.EASY)
            assert [r.score for r in top] == [session.engine.final_score]
        finally:
            await session.cleanup()

    @pytest.mark.asyncio
    async def test_timeout_is_recorded(self, sample_theme, records, mock_websocket):
        """Test a countdown expiry ends the game as a loss."""
        config = GameConfig(duration_seconds=2, tick_seconds=0.01)
        session = await started_session(sample_theme, config, records, mock_websocket)
        try:
            await asyncio.sleep(0.1)
            await session.flush_events()

            events = mock_websocket.get_sent_events()
            times = [e["remaining_seconds"] for e in events if e["type"] == "time_changed"]
            assert times == [2, 1, 0]
            assert events[-1] == {"type": "game_finished", "score": 0, "won": False}
            assert session.status == "complete"
            assert records.count(sample_theme.title, Difficulty.EASY) == 1
        finally:
            await session.cleanup()

    @pytest.mark.asyncio
    async def test_end_session(self, sample_theme, session_config, records, mock_websocket):
        """Test ending a session stops the game without a record."""
        session = await started_session(sample_theme, session_config, records, mock_websocket)
        try:
            await session.end_session()
            await session.flush_events()

            last = mock_websocket.get_sent_events()[-1]
            assert session.status == "complete"
            assert last["type"] == "game_state"
            assert last["status"] == "complete"
            assert session.engine.is_timer_running is False
            assert records.count(sample_theme.title, Difficulty.EASY) == 0

            await session.select_card(0)
            assert flipped_indices(session.engine.deck) == []
        finally:
            await session.cleanup()

    @pytest.mark.asyncio
    async def test_failed_client_is_dropped(self, sample_theme, session_config, records, mock_websocket_factory):
        """Test one broken client does not stop the broadcast."""
        good = mock_websocket_factory()
        bad = mock_websocket_factory()
        session = GameSession("abc", sample_theme, Difficulty.EASY, session_config, records=records, peek_seconds=0)
        try:
            await session.on_client_connect(good)
            await session.on_client_connect(bad)
            bad.set_should_fail(True)

            await session.start()
            await session.flush_events()

            assert session.ws_manager.connection_count == 1
            assert "card_positions_changed" in good.get_sent_types()
        finally:
            await session.cleanup()

    @pytest.mark.asyncio
    async def test_cleanup_closes_clients(self, sample_theme, session_config, records, mock_websocket):
        """Test cleanup stops the game and closes connections."""
        session = await started_session(sample_theme, session_config, records, mock_websocket)

        await session.cleanup()

        assert mock_websocket.closed is True
        assert session.ws_manager.connection_count == 0
        assert session.engine.is_timer_running is False


# =============================================================================
# GameSessionManager Tests
# =============================================================================


class TestGameSessionManager:
    """Tests for GameSessionManager class."""

    @pytest.fixture
    def manager(self, records):
        return GameSessionManager(records=records, peek_seconds=0)

    @pytest.mark.asyncio
    async def test_create_session(self, manager, sample_theme, session_config):
        """Test creating a new session."""
        session = await manager.create_session(sample_theme, Difficulty.EASY, session_config)
        try:
            assert len(session.session_id) == 8
            assert session.peek_seconds == 0
            assert session.records is manager.records
            assert manager.active_session_count == 1
        finally:
            await manager.cleanup_all()

    @pytest.mark.asyncio
    async def test_get_session(self, manager, sample_theme, session_config):
        """Test getting an existing session."""
        session = await manager.create_session(sample_theme, Difficulty.EASY, session_config)
        try:
            assert await manager.get_session(session.session_id) is session
            assert await manager.get_session("nonexistent") is None
        finally:
            await manager.cleanup_all()

    @pytest.mark.asyncio
    async def test_unique_ids(self, manager, sample_theme, session_config):
        """Test session IDs are unique."""
        try:
            sessions = [
                await manager.create_session(sample_theme, Difficulty.EASY, session_config)
                for _ in range(5)
            ]
            assert len({s.session_id for s in sessions}) == 5
        finally:
            await manager.cleanup_all()

    @pytest.mark.asyncio
    async def test_remove_session(self, manager, sample_theme, session_config, mock_websocket):
        """Test removing a session cleans it up."""
        session = await manager.create_session(sample_theme, Difficulty.EASY, session_config)
        await session.on_client_connect(mock_websocket)

        await manager.remove_session(session.session_id)
        await manager.remove_session(session.session_id)

        assert manager.active_session_count == 0
        assert mock_websocket.closed is True

    @pytest.mark.asyncio
    async def test_cleanup_all(self, manager, sample_theme, session_config):
        """Test cleaning up all sessions."""
        for _ in range(3):
            session = await manager.create_session(sample_theme, Difficulty.HARD, session_config)
            await session.start()

        await manager.cleanup_all()

        assert manager.active_session_count == 0

    def test_default_records_board(self):
        """Test a manager creates its own board when none is given."""
        assert isinstance(GameSessionManager().records, RecordsBoard)
