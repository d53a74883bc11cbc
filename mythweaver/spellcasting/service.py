import logging

from sqlalchemy.orm import Session

from . import ledger
from .models import Spell
from .schemas import SpellCreate, SpellSlotUpdate, SpellSlots
from ..character.models import Character
from ..character.service import get_character
from ..core.enums import SlotAction
from ..core.exceptions import NotFoundError, ValidationError, AuthorizationError
from ..database import commit
from ..user.models import User
from ..world.models import World

logger = logging.getLogger("mythweaver")


def get_spell(db: Session, spell_id: int) -> Spell:
    spell = db.query(Spell).filter(Spell.id == spell_id).first()
    if not spell:
        raise NotFoundError("Spell", spell_id)
    return spell


def get_spells(db: Session, skip: int = 0, limit: int = 100, level: int | None = None) -> list[Spell]:
    query = db.query(Spell)
    if level is not None:
        query = query.filter(Spell.level == level)
    return query.order_by(Spell.level, Spell.name).offset(skip).limit(limit).all()


def create_spell(db: Session, spell_data: SpellCreate) -> Spell:
    spell = Spell(**spell_data.model_dump())
    db.add(spell)
    commit(db)
    db.refresh(spell)
    return spell


def ensure_slot_access(db: Session, character: Character, user: User):
    """Owners manage their own slots; the DM of the character's world may too."""
    if character.user_id == user.id:
        return
    if character.world_id is not None:
        world = db.query(World).filter(World.id == character.world_id).first()
        if world and world.dm_id == user.id:
            return
    raise AuthorizationError("You cannot change this character's spell slots")


def get_spell_slots(character: Character) -> SpellSlots:
    info = character.get_spellcasting()
    if info is None:
        raise ValidationError(f"{character.name} has no spellcasting")
    return info.spell_slots


def apply_slot_update(slots: SpellSlots, request: SpellSlotUpdate) -> SpellSlots:
    if request.action == SlotAction.USE:
        return ledger.use_slot(slots, request.level)
    if request.action == SlotAction.RESTORE:
        return ledger.restore_slot(slots, request.level)
    if request.action == SlotAction.RESTORE_ALL:
        return ledger.restore_all(slots)
    return ledger.set_slot(slots, request.level, used=request.used, maximum=request.max)


def update_spell_slots(db: Session, character_id: int, request: SpellSlotUpdate, user: User) -> Character:
    character = get_character(db, character_id)
    ensure_slot_access(db, character, user)

    slots = apply_slot_update(get_spell_slots(character), request)
    character.set_spell_slots(slots)
    commit(db)
    db.refresh(character)

    logger.info(f"Spell slots of {character.name} updated ({request.action.value})")
    return character
