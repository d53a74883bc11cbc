from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..core.enums import ActionCategory
from ..database import get_db
from ..event.schemas import SessionEventResponse
from ..event.service import to_message
from ..realtime.manager import manager
from ..user.models import User
from . import service
from .catalog import CombatAction, actions_by_category
from .schemas import (
    AddCombatantsRequest,
    CombatantResponse,
    CombatStateResponse,
    UpdateCombatantRequest,
    TakeActionRequest,
    TakeActionResponse,
)

router = APIRouter(prefix="/sessions/{session_id}/combat", tags=["combat"])
catalog_router = APIRouter(prefix="/combat", tags=["combat"])


def _publish(background_tasks: BackgroundTasks, session_id: int, events):
    manager.schedule(background_tasks, session_id, [to_message(e) for e in events])


@catalog_router.get("/actions", response_model=dict[ActionCategory, list[CombatAction]])
def list_combat_actions():
    """All 5e combat actions grouped by the part of the turn they use."""
    return actions_by_category()


@router.get("", response_model=CombatStateResponse)
def get_combat_state(
    session_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Combat state with combatants in initiative order."""
    return service.get_combat_state(db, session_id, current_user)


@router.post("", response_model=list[CombatantResponse], status_code=201)
def add_combatants(
    session_id: int,
    request: AddCombatantsRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Add characters and enemies to the fight. DM only, all or nothing."""
    added, events = service.add_combatants(db, session_id, request, current_user)
    _publish(background_tasks, session_id, events)
    return added


@router.delete("", response_model=CombatStateResponse)
def end_combat(
    session_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """End combat and clear every combatant."""
    state, events = service.end_combat(db, session_id, current_user)
    _publish(background_tasks, session_id, events)
    return state


@router.post("/start", response_model=CombatStateResponse)
def start_combat(
    session_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Start combat at round 1 with the highest initiative acting first."""
    state, events = service.start_combat(db, session_id, current_user)
    _publish(background_tasks, session_id, events)
    return state


@router.post("/turn", response_model=CombatStateResponse)
def advance_turn(
    session_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Pass the turn to the next combatant in initiative order."""
    state, events = service.advance_turn(db, session_id, current_user)
    _publish(background_tasks, session_id, events)
    return state


@router.post("/actions", response_model=TakeActionResponse)
def take_action(
    session_id: int,
    request: TakeActionRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Spend an action, bonus action, reaction, movement or free action."""
    result, events = service.take_turn_action(db, session_id, request, current_user)
    _publish(background_tasks, session_id, events)
    return result


@router.get("/log", response_model=list[SessionEventResponse])
def get_action_log(
    session_id: int,
    after_id: int | None = Query(None, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Actions taken in this session, oldest first."""
    return service.get_action_log(db, session_id, current_user, after_id, limit)


@router.patch("/{combatant_id}", response_model=CombatantResponse)
def update_combatant(
    session_id: int,
    combatant_id: int,
    request: UpdateCombatantRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Change HP (owner or DM) or status, position and visibility (DM)."""
    combatant, events = service.update_combatant(db, session_id, combatant_id, request, current_user)
    _publish(background_tasks, session_id, events)
    return combatant


@router.delete("/{combatant_id}", response_model=CombatStateResponse)
def remove_combatant(
    session_id: int,
    combatant_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Remove a combatant from the fight."""
    state, events = service.remove_combatant(db, session_id, combatant_id, current_user)
    _publish(background_tasks, session_id, events)
    return state
