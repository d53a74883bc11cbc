from pydantic import BaseModel, Field, model_validator

from ..core.enums import CastingTime, SlotAction, SpellcastingAbility


class SpellSlot(BaseModel):
    used: int = Field(default=0, ge=0)
    max: int = Field(default=0, ge=0)

    class Config:
        frozen = True

    @model_validator(mode="after")
    def check_used_within_max(self):
        if self.used > self.max:
            raise ValueError(f"used ({self.used}) cannot exceed max ({self.max})")
        return self


class SpellSlots(BaseModel):
    """Slot pools for spell levels 1-9. Cantrips are not tracked."""

    level1: SpellSlot = Field(default_factory=SpellSlot)
    level2: SpellSlot = Field(default_factory=SpellSlot)
    level3: SpellSlot = Field(default_factory=SpellSlot)
    level4: SpellSlot = Field(default_factory=SpellSlot)
    level5: SpellSlot = Field(default_factory=SpellSlot)
    level6: SpellSlot = Field(default_factory=SpellSlot)
    level7: SpellSlot = Field(default_factory=SpellSlot)
    level8: SpellSlot = Field(default_factory=SpellSlot)
    level9: SpellSlot = Field(default_factory=SpellSlot)


class SpellcastingInfo(BaseModel):
    ability: SpellcastingAbility | None = None
    spell_slots: SpellSlots = Field(default_factory=SpellSlots)


class SpellSlotUpdate(BaseModel):
    action: SlotAction
    level: int | None = Field(default=None, ge=1, le=9)
    # Only read for the "set" action
    used: int | None = Field(default=None, ge=0)
    max: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_level_present(self):
        if self.action != SlotAction.RESTORE_ALL and self.level is None:
            raise ValueError(f"level is required for '{self.action.value}'")
        return self


class SpellSlotsResponse(BaseModel):
    character_id: int
    spell_slots: SpellSlots


class SpellCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    level: int = Field(..., ge=0, le=9)
    casting_time: CastingTime = CastingTime.ACTION
    school: str | None = Field(default=None, max_length=50)
    description: str | None = None


class SpellResponse(BaseModel):
    id: int
    name: str
    level: int
    casting_time: CastingTime
    school: str | None
    description: str | None

    class Config:
        from_attributes = True
