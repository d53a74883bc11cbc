from pydantic import BaseModel, Field

from ..core.enums import CharacterClass, SpellcastingAbility
from ..spellcasting.schemas import SpellcastingInfo


class CharacterCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    character_class: CharacterClass
    race: str | None = Field(default=None, max_length=50)
    level: int = Field(default=1, ge=1, le=20)
    world_id: int | None = None
    strength: int = Field(default=10, ge=1, le=30)
    dexterity: int = Field(default=10, ge=1, le=30)
    constitution: int = Field(default=10, ge=1, le=30)
    intelligence: int = Field(default=10, ge=1, le=30)
    wisdom: int = Field(default=10, ge=1, le=30)
    charisma: int = Field(default=10, ge=1, le=30)
    max_hp: int = Field(default=10, ge=1)
    armor_class: int = Field(default=10, ge=0)
    speed: int = Field(default=30, ge=0)
    # Turns spellcasting on for classes that lack it, e.g. an Eldritch Knight
    spellcasting_ability: SpellcastingAbility | None = None


class CharacterUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    character_class: CharacterClass | None = None
    race: str | None = Field(default=None, max_length=50)
    level: int | None = Field(default=None, ge=1, le=20)
    armor_class: int | None = Field(default=None, ge=0)
    speed: int | None = Field(default=None, ge=0)
    spellcasting_ability: SpellcastingAbility | None = None


class CharacterResponse(BaseModel):
    id: int
    user_id: int
    world_id: int | None
    name: str
    character_class: CharacterClass
    race: str | None
    level: int
    strength: int
    dexterity: int
    constitution: int
    intelligence: int
    wisdom: int
    charisma: int
    current_hp: int
    max_hp: int
    armor_class: int
    speed: int
    spellcasting: SpellcastingInfo | None
    version: int

    class Config:
        from_attributes = True


class AttributesUpdate(BaseModel):
    strength: int | None = Field(default=None, ge=1, le=30)
    dexterity: int | None = Field(default=None, ge=1, le=30)
    constitution: int | None = Field(default=None, ge=1, le=30)
    intelligence: int | None = Field(default=None, ge=1, le=30)
    wisdom: int | None = Field(default=None, ge=1, le=30)
    charisma: int | None = Field(default=None, ge=1, le=30)


class AttributesResponse(BaseModel):
    strength: int
    dexterity: int
    constitution: int
    intelligence: int
    wisdom: int
    charisma: int

    class Config:
        from_attributes = True


class HealthUpdate(BaseModel):
    current_hp: int | None = Field(default=None, ge=0)
    max_hp: int | None = Field(default=None, ge=1)
    armor_class: int | None = Field(default=None, ge=0)


class HealthResponse(BaseModel):
    current_hp: int
    max_hp: int
    armor_class: int

    class Config:
        from_attributes = True
