from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..core.enums import SessionEventType
from ..database import get_db
from ..session.access import resolve_access
from ..session.service import get_game_session
from ..user.models import User
from . import service
from .schemas import SessionEventResponse

router = APIRouter(prefix="/sessions", tags=["events"])


@router.get("/{session_id}/events", response_model=list[SessionEventResponse])
def list_events(
    session_id: int,
    after_id: int | None = Query(None, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    event_type: SessionEventType | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Poll session events newer than `after_id`, oldest first."""
    game_session = get_game_session(db, session_id)
    resolve_access(db, game_session, current_user)
    return service.get_session_events(db, session_id, after_id, limit, event_type)
