from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, model_validator

from ..core.enums import CombatantType
from ..spellcasting.schemas import SpellSlots
from .economy import ActionEconomy, TakenAction


class StatusEffect(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    duration: int | None = Field(default=None, ge=0)  # rounds remaining, None for indefinite
    description: str | None = Field(default=None, max_length=200)


class CharacterSource(BaseModel):
    kind: Literal["character"] = "character"
    character_id: int


class EnemySource(BaseModel):
    kind: Literal["enemy"] = "enemy"
    template_id: int
    custom_name: str | None = Field(default=None, min_length=1, max_length=100)


CombatantSource = Annotated[Union[CharacterSource, EnemySource], Field(discriminator="kind")]


class CombatantSelection(BaseModel):
    source: CombatantSource
    initiative: int | None = Field(default=None, ge=1, le=30)  # rolled when omitted
    is_companion: bool = False
    show_hp_to_players: bool = False


class AddCombatantsRequest(BaseModel):
    combatants: list[CombatantSelection] = Field(..., min_length=1)


class UpdateCombatantRequest(BaseModel):
    hp_delta: int | None = None  # negative for damage, positive for healing
    current_hp: int | None = Field(default=None, ge=0)
    status_effects: list[StatusEffect] | None = None
    show_hp_to_players: bool | None = None
    is_companion: bool | None = None
    position: int | None = None

    @model_validator(mode="after")
    def check_hp_fields(self):
        if self.hp_delta is not None and self.current_hp is not None:
            raise ValueError("Send either hp_delta or current_hp, not both")
        return self


class CatalogSelection(BaseModel):
    type: Literal["catalog"] = "catalog"
    action_id: str
    details: str | None = Field(default=None, max_length=200)


class SpellSelection(BaseModel):
    type: Literal["spell"] = "spell"
    spell_id: int
    slot_level: int | None = Field(default=None, ge=1, le=9)  # defaults to the spell's level
    details: str | None = Field(default=None, max_length=200)


ActionSelection = Annotated[Union[CatalogSelection, SpellSelection], Field(discriminator="type")]


class TakeActionRequest(BaseModel):
    combatant_id: int
    selection: ActionSelection


class CombatantResponse(BaseModel):
    id: int
    combatant_type: CombatantType
    character_id: int | None
    template_id: int | None
    name: str
    current_hp: int | None  # None when hidden from the viewer
    max_hp: int | None
    armor_class: int
    position: int
    is_companion: bool
    show_hp_to_players: bool
    status_effects: list[StatusEffect]
    action_economy: ActionEconomy
    version: int


class CombatStateResponse(BaseModel):
    session_id: int
    combat_active: bool
    round: int
    current_turn: int | None
    combatants: list[CombatantResponse]  # initiative order


class TakeActionResponse(BaseModel):
    combatant_id: int
    action: TakenAction
    action_economy: ActionEconomy
    spell_slots: SpellSlots | None = None  # the caster's slots after a levelled spell
