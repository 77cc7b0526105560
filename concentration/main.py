"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pathlib import Path

from .config import settings
from .api.routes import router as api_router, init_dependencies
from .api.websocket import websocket_endpoint
from .game import GameSessionManager, RecordsBoard, ThemeCatalog

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


# Global instances
session_manager: GameSessionManager = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    global session_manager

    # Startup
    catalog = ThemeCatalog.from_settings(settings)
    session_manager = GameSessionManager(
        records=RecordsBoard(capacity=settings.max_records),
        peek_seconds=settings.peek_seconds,
    )
    init_dependencies(session_manager, catalog)
    logger.info("Loaded %d themes", len(catalog))

    yield

    # Shutdown
    logger.info("Closing %d active sessions", session_manager.active_session_count)
    await session_manager.cleanup_all()


# Create FastAPI app
app = FastAPI(
    title="Concentration API",
    description="Memory card matching game",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(api_router, prefix="/api")


# WebSocket endpoint
@app.websocket("/ws/{session_id}")
async def ws_endpoint(websocket: WebSocket, session_id: str):
    """WebSocket endpoint for game sessions."""
    await websocket_endpoint(websocket, session_id, session_manager)


# Serve static files for frontend (if web/ directory exists)
web_dir = Path(__file__).parent.parent / "web" / "dist"
if web_dir.exists():
    app.mount("/", StaticFiles(directory=str(web_dir), html=True), name="static")


def main():
    """Run the server."""
    import uvicorn

    uvicorn.run(
        "concentration.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
