"""
Relay API и WebSocket.
"""
import logging

from fastapi import FastAPI, Request, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from .config import get_config
from .rooms import RoomRegistry
from .ws_handlers import ConnectionRouter, ws_connection_loop
from .ws_manager import WSManager

config = get_config()

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def create_app(registry: RoomRegistry | None = None) -> FastAPI:
    app = FastAPI(title="Room Relay")
    app.state.registry = registry if registry is not None else RoomRegistry()
    app.state.router = ConnectionRouter(app.state.registry)
    app.state.manager = WSManager()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/status")
    async def status(request: Request):
        state = request.app.state
        return {"connections": len(state.manager), "rooms": state.registry.snapshot()}

    @app.websocket("/ws")
    async def websocket_endpoint(ws: WebSocket):
        logger.info("WS: connection attempt from %s", ws.client)
        state = ws.app.state
        await ws_connection_loop(ws, state.manager, state.router)

    return app


app = create_app()
