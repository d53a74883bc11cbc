from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..event.service import to_message
from ..realtime.manager import manager
from ..user.models import User
from . import service
from .access import resolve_access
from .schemas import (
    GameSessionCreate,
    GameSessionUpdate,
    GameSessionResponse,
    SessionJoinRequest,
    ParticipantResponse,
    RestRequest,
    RestResponse,
)

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("/", response_model=GameSessionResponse, status_code=201)
def create_session(
    session_data: GameSessionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Open a game session in a world. DM only."""
    return service.create_game_session(db, session_data, current_user)


@router.get("/{session_id}", response_model=GameSessionResponse)
def get_session(
    session_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get a session, its participants and its turn state."""
    game_session = service.get_game_session(db, session_id)
    resolve_access(db, game_session, current_user)
    return game_session


@router.put("/{session_id}", response_model=GameSessionResponse)
def update_session(
    session_id: int,
    session_data: GameSessionUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Rename or close a session. DM only."""
    return service.update_game_session(db, session_id, session_data, current_user)


@router.post("/{session_id}/join", response_model=ParticipantResponse, status_code=201)
def join_session(
    session_id: int,
    request: SessionJoinRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Join a session as a player of its world."""
    participant, events = service.join_game_session(db, session_id, request, current_user)
    manager.schedule(background_tasks, session_id, [to_message(e) for e in events])
    return participant


@router.post("/{session_id}/rest", response_model=RestResponse)
def rest(
    session_id: int,
    request: RestRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Short or long rest for every participant. DM only."""
    restored, events = service.take_rest(db, session_id, request, current_user)
    manager.schedule(background_tasks, session_id, [to_message(e) for e in events])
    return RestResponse(rest_type=request.type, restored_character_ids=restored)
