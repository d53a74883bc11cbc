import logging

from sqlalchemy.orm import Session

from .access import resolve_access
from .models import GameSession, SessionParticipant
from .schemas import GameSessionCreate, GameSessionUpdate, SessionJoinRequest, RestRequest
from ..character.models import Character
from ..core.enums import RestType
from ..core.exceptions import NotFoundError, AuthorizationError, ValidationError, CombatError
from ..database import commit
from ..event.models import SessionEvent
from ..event.service import log_participant_joined, log_rest_completed
from ..spellcasting import ledger
from ..user.models import User
from ..world.service import get_world

logger = logging.getLogger("mythweaver")


def get_game_session(db: Session, session_id: int) -> GameSession:
    game_session = db.query(GameSession).filter(GameSession.id == session_id).first()
    if not game_session:
        raise NotFoundError("GameSession", session_id)
    return game_session


def create_game_session(db: Session, session_data: GameSessionCreate, user: User) -> GameSession:
    world = get_world(db, session_data.world_id)
    if world.dm_id != user.id:
        raise AuthorizationError("Only the DM of this world can start a session")

    game_session = GameSession(world_id=world.id, name=session_data.name)
    db.add(game_session)
    commit(db)
    db.refresh(game_session)

    logger.info(f"Session '{game_session.name}' opened in world {world.id}")
    return game_session


def update_game_session(db: Session, session_id: int, session_data: GameSessionUpdate, user: User) -> GameSession:
    game_session = get_game_session(db, session_id)
    resolve_access(db, game_session, user).require_dm("change the session")

    for field, value in session_data.model_dump(exclude_unset=True).items():
        setattr(game_session, field, value)
    commit(db)
    db.refresh(game_session)
    return game_session


def join_game_session(
    db: Session, session_id: int, request: SessionJoinRequest, user: User
) -> tuple[SessionParticipant, list[SessionEvent]]:
    """Register the user as a participant, optionally with one of their characters."""
    game_session = get_game_session(db, session_id)
    access = resolve_access(db, game_session, user)
    if access.is_dm:
        raise ValidationError("The DM runs this session and cannot join it as a player")
    if not game_session.is_active:
        raise ValidationError("This session has ended")

    if request.character_id is not None:
        if request.character_id not in access.character_ids:
            raise AuthorizationError("You can only join with your own character")
        character = db.query(Character).filter(Character.id == request.character_id).first()
        if character.world_id != game_session.world_id:
            raise ValidationError(f"{character.name} is not part of this world")

    participant = db.query(SessionParticipant).filter(
        SessionParticipant.session_id == session_id,
        SessionParticipant.user_id == user.id,
    ).first()
    if participant:
        participant.character_id = request.character_id
    else:
        participant = SessionParticipant(session_id=session_id, user_id=user.id, character_id=request.character_id)
        db.add(participant)

    event = log_participant_joined(db, session_id, user.id, request.character_id)
    commit(db)
    db.refresh(participant)

    logger.info(f"User {user.id} joined session {session_id}")
    return participant, [event]


def take_rest(
    db: Session, session_id: int, request: RestRequest, user: User
) -> tuple[list[int], list[SessionEvent]]:
    """
    Resolve a party rest.

    A long rest heals every participant character to full and restores all
    of their spell slots, all in one transaction. A short rest changes no
    tracked state; hit dice and class resources are handled at the table.
    """
    game_session = get_game_session(db, session_id)
    resolve_access(db, game_session, user).require_dm("call for a rest")
    if not game_session.is_active:
        raise ValidationError("This session has ended")
    if game_session.combat_active:
        raise CombatError("Cannot rest during combat")

    character_ids = sorted({p.character_id for p in game_session.participants if p.character_id is not None})
    restored = []

    if request.type == RestType.LONG:
        characters = db.query(Character).filter(Character.id.in_(character_ids)).all()
        for character in characters:
            character.set_hp(character.max_hp)
            info = character.get_spellcasting()
            if info is not None:
                character.set_spell_slots(ledger.restore_all(info.spell_slots))
            restored.append(character.id)
        restored.sort()

    event = log_rest_completed(db, session_id, user.id, request.type.value, restored)
    commit(db)

    logger.info(f"Session {session_id}: {request.type.value} rest, restored {len(restored)} character(s)")
    return restored, [event]
