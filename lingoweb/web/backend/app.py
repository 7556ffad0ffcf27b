"""FastAPI application factory."""

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from ... import __version__
from ...config import Config
from .dependencies import (
    get_config,
    get_job_manager,
    get_page_service,
    get_websocket_manager,
)
from .routers import (
    jobs_router,
    languages_router,
    pages_router,
    translations_router,
    ui_router,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    # Startup
    loop = asyncio.get_running_loop()
    ws_manager = get_websocket_manager()
    job_manager = get_job_manager()
    job_manager.set_websocket_manager(ws_manager)
    job_manager.set_event_loop(loop)
    page_service = get_page_service()
    page_service.set_websocket_manager(ws_manager)
    page_service.set_event_loop(loop)

    yield

    # Shutdown
    job_manager.shutdown(wait=True)


def create_app(config: Config | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        config: Optional configuration. Uses the loaded config.yaml if not provided.

    Returns:
        The FastAPI application.
    """
    if config is None:
        config = get_config()

    app = FastAPI(
        title="LingoWeb API",
        description="Translate webpages into another language with a language model",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(languages_router, prefix="/api/v1")
    app.include_router(translations_router, prefix="/api/v1")
    app.include_router(pages_router, prefix="/api/v1")
    app.include_router(jobs_router, prefix="/api/v1")
    app.include_router(ui_router)

    @app.get("/health")
    def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok"}

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket, client_id: str | None = None):
        """WebSocket endpoint for page and job updates."""
        ws_manager = get_websocket_manager()
        cid = client_id or f"client_{id(websocket)}"

        await ws_manager.connect(websocket, cid)
        try:
            while True:
                try:
                    data = json.loads(await websocket.receive_text())
                except json.JSONDecodeError:
                    data = None
                if not isinstance(data, dict):
                    await ws_manager.send_to_client(
                        cid, {"type": "error", "message": "Expected a JSON object"}
                    )
                    continue
                # Handle subscription messages
                if data.get("type") == "subscribe":
                    session_id = data.get("session_id")
                    if session_id:
                        await ws_manager.subscribe_to_session(cid, session_id)
                        await ws_manager.send_to_client(
                            cid, {"type": "subscribed", "session_id": session_id}
                        )
                elif data.get("type") == "unsubscribe":
                    session_id = data.get("session_id")
                    if session_id:
                        await ws_manager.unsubscribe_from_session(cid, session_id)
        except WebSocketDisconnect:
            logger.debug("WebSocket client %s disconnected", cid)
        finally:
            ws_manager.disconnect(cid)

    return app
