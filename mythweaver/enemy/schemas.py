from pydantic import BaseModel, Field


class EnemyTemplateCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    world_id: int | None = None
    max_hp: int = Field(..., ge=1)
    armor_class: int = Field(default=10, ge=0)
    dexterity: int = Field(default=10, ge=1, le=30)
    speed: int = Field(default=30, ge=0)
    challenge_rating: str | None = Field(default=None, max_length=10)
    description: str | None = None


class EnemyTemplateUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    max_hp: int | None = Field(default=None, ge=1)
    armor_class: int | None = Field(default=None, ge=0)
    dexterity: int | None = Field(default=None, ge=1, le=30)
    speed: int | None = Field(default=None, ge=0)
    challenge_rating: str | None = Field(default=None, max_length=10)
    description: str | None = None


class EnemyTemplateResponse(BaseModel):
    id: int
    dm_id: int
    world_id: int | None
    name: str
    max_hp: int
    armor_class: int
    dexterity: int
    speed: int
    challenge_rating: str | None
    description: str | None

    class Config:
        from_attributes = True
