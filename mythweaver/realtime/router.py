import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from ..core.exceptions import GameException
from ..database import SessionLocal
from ..session.access import resolve_access
from ..session.service import get_game_session
from ..user.models import User
from .manager import manager, connected_message

logger = logging.getLogger("mythweaver")

router = APIRouter(tags=["realtime"])


def _authorize(session_id: int, user_id: int) -> bool:
    db = SessionLocal()
    try:
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            return False
        resolve_access(db, get_game_session(db, session_id), user)
        return True
    except GameException as e:
        logger.info(f"Rejected subscription of user {user_id} to session {session_id}: {e.detail}")
        return False
    finally:
        db.close()


@router.websocket("/ws/sessions/{session_id}")
async def session_updates(websocket: WebSocket, session_id: int, user_id: int):
    """
    Push channel for a game session.

    Every committed session event is delivered as a JSON message. Messages
    from the client are ignored except for ``{"type": "ping"}``.
    """
    if not _authorize(session_id, user_id):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await manager.connect(websocket, session_id, user_id)
    await websocket.send_json(connected_message(session_id, user_id))

    try:
        while True:
            data = await websocket.receive_json()
            if isinstance(data, dict) and data.get("type") == "ping":
                await websocket.send_json({"type": "pong"})
    except WebSocketDisconnect:
        logger.info(f"User {user_id} unsubscribed from session {session_id}")
    finally:
        manager.disconnect(websocket, session_id)
