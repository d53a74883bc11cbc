from datetime import datetime
from pydantic import BaseModel
from typing import Any

from ..core.enums import SessionEventType


class SessionEventResponse(BaseModel):
    id: int
    session_id: int
    event_type: SessionEventType
    timestamp: datetime
    combatant_id: int | None
    user_id: int | None
    description: str | None
    data: dict[str, Any]

    class Config:
        from_attributes = True
