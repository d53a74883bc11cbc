from typing import Any

from sqlalchemy.orm import Session

from .models import SessionEvent
from ..core.enums import SessionEventType


def record_event(
    db: Session,
    session_id: int,
    event_type: SessionEventType,
    description: str,
    combatant_id: int | None = None,
    user_id: int | None = None,
    data: dict[str, Any] | None = None,
) -> SessionEvent:
    """Stage an event in the caller's transaction. The caller commits."""
    event = SessionEvent(
        session_id=session_id,
        event_type=event_type,
        description=description[:500],
        combatant_id=combatant_id,
        user_id=user_id,
        data=data or {},
    )
    db.add(event)
    return event


def get_session_events(
    db: Session,
    session_id: int,
    after_id: int | None = None,
    limit: int = 100,
    event_type: SessionEventType | None = None,
) -> list[SessionEvent]:
    q = db.query(SessionEvent).filter(SessionEvent.session_id == session_id)

    if after_id is not None:
        q = q.filter(SessionEvent.id > after_id)
    if event_type:
        q = q.filter(SessionEvent.event_type == event_type)

    return q.order_by(SessionEvent.id).limit(limit).all()


def to_message(event: SessionEvent) -> dict[str, Any]:
    """Realtime payload for a committed event."""
    return {
        "type": event.event_type.value,
        "event_id": event.id,
        "session_id": event.session_id,
        "combatant_id": event.combatant_id,
        "user_id": event.user_id,
        "description": event.description,
        "data": event.data or {},
        "timestamp": event.timestamp.isoformat() if event.timestamp else None,
    }


# Helper functions for common event types
def log_participant_joined(db: Session, session_id: int, user_id: int, character_id: int | None) -> SessionEvent:
    return record_event(
        db, session_id, SessionEventType.PARTICIPANT_JOINED,
        f"User {user_id} joined the session",
        user_id=user_id,
        data={"character_id": character_id},
    )


def log_combat_started(db: Session, session_id: int, user_id: int, first_turn: int, order: list[int]) -> SessionEvent:
    return record_event(
        db, session_id, SessionEventType.COMBAT_STARTED,
        "Combat started",
        combatant_id=first_turn,
        user_id=user_id,
        data={"round": 1, "current_turn": first_turn, "order": order},
    )


def log_combat_ended(db: Session, session_id: int, user_id: int, rounds: int) -> SessionEvent:
    return record_event(
        db, session_id, SessionEventType.COMBAT_ENDED,
        f"Combat ended after {rounds} round(s)",
        user_id=user_id,
        data={"rounds": rounds},
    )


def log_turn_advanced(db: Session, session_id: int, user_id: int, current_turn: int, round: int, name: str) -> SessionEvent:
    return record_event(
        db, session_id, SessionEventType.TURN_ADVANCED,
        f"Round {round}: {name}'s turn",
        combatant_id=current_turn,
        user_id=user_id,
        data={"round": round, "current_turn": current_turn},
    )


def log_rest_completed(db: Session, session_id: int, user_id: int, rest_type: str, character_ids: list[int]) -> SessionEvent:
    return record_event(
        db, session_id, SessionEventType.REST_COMPLETED,
        f"The party completed a {rest_type} rest",
        user_id=user_id,
        data={"rest_type": rest_type, "character_ids": character_ids},
    )
