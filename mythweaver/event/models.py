from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Enum, JSON, ForeignKey

from ..database import Base
from ..core.enums import SessionEventType


class SessionEvent(Base):
    __tablename__ = "session_events"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("game_sessions.id"), nullable=False, index=True)
    event_type = Column(Enum(SessionEventType), nullable=False, index=True)
    timestamp = Column(DateTime, default=datetime.utcnow, index=True)

    # Related entities (optional); combatants are deleted when combat ends so no FK
    combatant_id = Column(Integer, nullable=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    description = Column(String(500), nullable=True)
    data = Column(JSON, default=dict)  # Event-specific payload, safe to show players
