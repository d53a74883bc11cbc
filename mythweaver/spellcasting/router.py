from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..user.models import User
from . import service
from .schemas import SpellCreate, SpellResponse, SpellSlotUpdate, SpellSlotsResponse

router = APIRouter(prefix="/spells", tags=["spells"])
slots_router = APIRouter(prefix="/characters", tags=["spellcasting"])


@router.post("/", response_model=SpellResponse, status_code=201)
def create_spell(
    spell: SpellCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Add a spell to the compendium."""
    return service.create_spell(db, spell)


@router.get("/", response_model=list[SpellResponse])
def list_spells(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    level: int | None = Query(None, ge=0, le=9),
    db: Session = Depends(get_db),
):
    """List spells, optionally of one level."""
    return service.get_spells(db, skip, limit, level)


@router.get("/{spell_id}", response_model=SpellResponse)
def get_spell(spell_id: int, db: Session = Depends(get_db)):
    """Get a specific spell by ID."""
    return service.get_spell(db, spell_id)


@slots_router.get("/{character_id}/spell-slots", response_model=SpellSlotsResponse)
def get_spell_slots(character_id: int, db: Session = Depends(get_db)):
    """Get a character's spell slot pools."""
    character = service.get_character(db, character_id)
    return {"character_id": character.id, "spell_slots": service.get_spell_slots(character)}


@slots_router.patch("/{character_id}/spell-slots", response_model=SpellSlotsResponse)
def update_spell_slots(
    character_id: int,
    request: SpellSlotUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Use, restore, restore all (long rest) or set a character's spell slots."""
    character = service.update_spell_slots(db, character_id, request, current_user)
    return {"character_id": character.id, "spell_slots": service.get_spell_slots(character)}
