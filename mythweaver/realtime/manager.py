"""
WebSocket fan-out for game sessions.

Services never call this directly. Routers schedule ``broadcast_to_session``
as a background task once the state change has been committed, so a slow or
dead client can neither block nor undo a write.
"""

import logging
from datetime import datetime
from typing import Any

from fastapi import BackgroundTasks, WebSocket

from ..config import settings

logger = logging.getLogger("mythweaver")


class ConnectionManager:
    """Manages WebSocket connections per game session."""

    def __init__(self):
        # session_id -> list of (user_id, websocket)
        self.active_connections: dict[int, list[tuple[int, WebSocket]]] = {}

    async def connect(self, websocket: WebSocket, session_id: int, user_id: int):
        await websocket.accept()
        self.active_connections.setdefault(session_id, []).append((user_id, websocket))
        logger.info(f"User {user_id} subscribed to session {session_id}")

    def disconnect(self, websocket: WebSocket, session_id: int):
        connections = self.active_connections.get(session_id)
        if not connections:
            return
        self.active_connections[session_id] = [c for c in connections if c[1] is not websocket]
        if not self.active_connections[session_id]:
            del self.active_connections[session_id]

    async def broadcast_to_session(self, session_id: int, message: dict[str, Any]):
        """Send a message to every subscriber, dropping connections that fail."""
        for user_id, websocket in list(self.active_connections.get(session_id, [])):
            try:
                await websocket.send_json(message)
            except Exception as e:
                logger.error(f"Failed to broadcast to user {user_id} in session {session_id}: {e}")
                self.disconnect(websocket, session_id)

    async def broadcast_many(self, session_id: int, messages: list[dict[str, Any]]):
        for message in messages:
            await self.broadcast_to_session(session_id, message)

    def connection_count(self, session_id: int) -> int:
        return len(self.active_connections.get(session_id, []))

    def schedule(self, background_tasks: BackgroundTasks, session_id: int, messages: list[dict[str, Any]]):
        """Queue a broadcast to run after the response is sent."""
        if not settings.realtime_enabled or not messages:
            return
        background_tasks.add_task(self.broadcast_many, session_id, messages)


def connected_message(session_id: int, user_id: int) -> dict[str, Any]:
    return {
        "type": "connected",
        "session_id": session_id,
        "user_id": user_id,
        "timestamp": datetime.utcnow().isoformat(),
    }


# Global connection manager
manager = ConnectionManager()
