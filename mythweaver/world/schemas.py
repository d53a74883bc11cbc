from datetime import datetime
from pydantic import BaseModel, Field


class WorldCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None


class WorldJoinRequest(BaseModel):
    character_id: int | None = None


class WorldMemberResponse(BaseModel):
    id: int
    world_id: int
    user_id: int
    character_id: int | None
    joined_at: datetime

    class Config:
        from_attributes = True


class WorldResponse(BaseModel):
    id: int
    name: str
    description: str | None
    dm_id: int
    members: list[WorldMemberResponse]

    class Config:
        from_attributes = True
