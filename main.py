"""
FastAPI + Socket.IO Realtime Chat Hub
Presence tracking, chat broadcast and typing relay with a raw WebSocket fallback
"""

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional
import os
import uuid

import socketio
import uvicorn

from chathub import (
    ChatHub,
    Settings,
    SocketIOChannel,
    WebSocketChannel,
    decode_frame,
    get_settings,
    get_logger,
    set_log_level,
    log_websocket_event,
    log_system_event,
    EVENT_JOIN,
    EVENT_CHAT_MESSAGE,
    EVENT_TYPING,
)

logger = get_logger()


def register_socketio_handlers(sio: socketio.AsyncServer, hub: ChatHub):
    """Route Socket.IO events for every client into the hub"""

    @sio.event
    async def connect(sid, environ, auth=None):
        hub.connect(sid, SocketIOChannel(sio, sid))
        log_websocket_event("socketio_connected", sid, f"client_ip={environ.get('REMOTE_ADDR', 'unknown')}")

    @sio.event
    async def join(sid, name=None):
        await hub.dispatch(sid, EVENT_JOIN, name)

    @sio.event
    async def chat_message(sid, payload=None):
        await hub.dispatch(sid, EVENT_CHAT_MESSAGE, payload)

    @sio.event
    async def typing(sid, is_typing=None):
        await hub.dispatch(sid, EVENT_TYPING, is_typing)

    @sio.event
    async def disconnect(sid, reason=None):
        await hub.disconnect(sid, str(reason) if reason is not None else "socketio disconnect")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the HTTP/WebSocket application with its own chat hub

    Args:
        settings: Configuration; read from the environment when omitted

    Returns:
        FastAPI app; ``app.state.hub`` holds the ChatHub and ``app.state.sio``
        the Socket.IO server sharing it
    """
    settings = settings or get_settings()
    set_log_level(settings.log_level)

    hub = ChatHub()
    origins = settings.cors_origin_list
    sio = socketio.AsyncServer(
        async_mode="asgi",
        cors_allowed_origins="*" if origins == ["*"] else origins,
    )
    register_socketio_handlers(sio, hub)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan management"""
        logger.info("Chat hub starting up...")
        log_system_event("startup", f"static_dir={settings.static_dir}")

        yield

        log_system_event("shutdown", f"stats={hub.stats()}")
        logger.info("Chat hub shutting down...")

    app = FastAPI(
        title="Realtime Chat Hub",
        description="Group chat with presence, online count and typing indicators",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.hub = hub
    app.state.sio = sio
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        """Liveness probe"""
        now = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
        return {"status": "ok", "time": now}

    @app.get("/stats")
    async def get_stats():
        """Presence and connection counters"""
        return hub.stats()

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """Raw WebSocket fallback carrying {type, ...} JSON frames"""
        connection_id = f"ws_{uuid.uuid4().hex[:12]}"
        client_ip = websocket.client.host if websocket.client else "unknown"

        await websocket.accept()
        hub.connect(connection_id, WebSocketChannel(websocket))
        log_websocket_event("connection_accepted", connection_id, f"client_ip={client_ip}")

        reason = "client disconnect"
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    reason = f"code={message.get('code', 1000)}"
                    break

                raw = message.get("text")
                decoded = decode_frame(raw) if raw is not None else None
                if decoded is None:
                    log_websocket_event("frame_dropped", connection_id, "malformed or unknown frame")
                    continue

                event, payload = decoded
                await hub.dispatch(connection_id, event, payload)

        except Exception as e:
            reason = "transport error"
            logger.error(f"WebSocket error on {connection_id}: {e}")

        finally:
            await hub.disconnect(connection_id, reason)

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """Last-resort handler for HTTP routes"""
        logger.error(f"Unhandled exception on {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    # Client assets; registered last so API routes win
    if os.path.isdir(settings.static_dir):
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")

    return app


app = create_app()
asgi_app = socketio.ASGIApp(app.state.sio, other_asgi_app=app)

if __name__ == "__main__":
    settings = get_settings()
    logger.info(f"Starting chat hub on http://{settings.host}:{settings.port}")

    uvicorn.run(
        "main:asgi_app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
        access_log=True,
        ws_ping_interval=settings.ws_ping_interval,
        ws_ping_timeout=settings.ws_ping_timeout,
    )
