from datetime import datetime
from pydantic import BaseModel, Field

from ..core.enums import RestType


class GameSessionCreate(BaseModel):
    world_id: int
    name: str = Field(..., min_length=1, max_length=100)


class GameSessionUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    is_active: bool | None = None


class SessionJoinRequest(BaseModel):
    character_id: int | None = None


class ParticipantResponse(BaseModel):
    id: int
    session_id: int
    user_id: int
    character_id: int | None
    joined_at: datetime

    class Config:
        from_attributes = True


class GameSessionResponse(BaseModel):
    id: int
    world_id: int
    name: str
    is_active: bool
    combat_active: bool
    combat_round: int
    current_turn_id: int | None
    version: int
    participants: list[ParticipantResponse]

    class Config:
        from_attributes = True


class RestRequest(BaseModel):
    type: RestType


class RestResponse(BaseModel):
    rest_type: RestType
    restored_character_ids: list[int]
