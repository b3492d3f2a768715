"""WebSocket connection manager for the live report dashboard."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import WebSocket

from app.schemas import WSMessage

logger = logging.getLogger(__name__)


class ConnectionManager:
    def __init__(self):
        self._connections: list[WebSocket] = []

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self._connections.append(websocket)

    def disconnect(self, websocket: WebSocket):
        if websocket in self._connections:
            self._connections.remove(websocket)

    async def broadcast(self, event: str, data: dict[str, Any]):
        """Send an event to every connected dashboard, dropping dead sockets."""
        text = json.dumps(WSMessage(event=event, data=data).model_dump())
        dead = []
        for ws in list(self._connections):
            try:
                await ws.send_text(text)
            except Exception:
                dead.append(ws)
        for ws in dead:
            self.disconnect(ws)
        if dead:
            logger.info("Dropped %d stale dashboard connection(s)", len(dead))


ws_manager = ConnectionManager()
