"""WebSocket endpoint handler."""

import json
import logging

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from ..game import GameSessionManager
from ..models.events import ErrorEvent, SelectCardMessage

logger = logging.getLogger(__name__)


async def websocket_endpoint(
    websocket: WebSocket,
    session_id: str,
    session_manager: GameSessionManager,
):
    """Handle WebSocket connection for a game session."""
    logger.info("[WS] New connection for session %s", session_id)

    session = await session_manager.get_session(session_id)
    if session is None:
        logger.info("[WS] Session %s not found", session_id)
        await websocket.close(code=4004, reason="Session not found")
        return

    await session.on_client_connect(websocket)
    logger.info("[WS] Client connected, session status: %s", session.status)

    # Game starts on the client's start_game message

    try:
        while True:
            data = await websocket.receive_text()

            try:
                message = json.loads(data)
                msg_type = message.get("type") if isinstance(message, dict) else None

                if msg_type == "select_card":
                    selection = SelectCardMessage.model_validate(message)
                    await session.select_card(selection.index)

                elif msg_type == "start_game":
                    session.launch()

                elif msg_type == "end_session":
                    await session.end_session()
                    # Deliver the final state before this client is dropped
                    await session.flush_events()
                    break

                elif msg_type == "ping":
                    await websocket.send_text(json.dumps({"type": "pong"}))

                else:
                    await session.ws_manager.send_event(
                        websocket,
                        ErrorEvent(code="unknown_message", message=f"Unknown message type: {msg_type}"),
                    )

            except json.JSONDecodeError:
                await session.ws_manager.send_event(
                    websocket,
                    ErrorEvent(code="invalid_json", message="Invalid JSON message"),
                )
            except ValidationError as e:
                await session.ws_manager.send_event(
                    websocket,
                    ErrorEvent(code="invalid_message", message=str(e)),
                )

    except WebSocketDisconnect:
        pass
    finally:
        await session.on_client_disconnect(websocket)
