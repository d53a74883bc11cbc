from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..user.models import User
from . import service
from .schemas import (
    CharacterCreate,
    CharacterUpdate,
    CharacterResponse,
    AttributesUpdate,
    AttributesResponse,
    HealthUpdate,
    HealthResponse,
)

router = APIRouter(prefix="/characters", tags=["characters"])


@router.post("/", response_model=CharacterResponse, status_code=201)
def create_character(
    character: CharacterCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create a character owned by the caller. Casters get their slot pools."""
    return service.create_character(db, character, current_user)


@router.get("/", response_model=list[CharacterResponse])
def list_characters(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    user_id: int | None = None,
    world_id: int | None = None,
    db: Session = Depends(get_db),
):
    """List characters with optional filtering."""
    return service.get_characters(db, skip, limit, user_id, world_id)


@router.get("/{character_id}", response_model=CharacterResponse)
def get_character(character_id: int, db: Session = Depends(get_db)):
    """Get a specific character by ID."""
    return service.get_character(db, character_id)


@router.put("/{character_id}", response_model=CharacterResponse)
def update_character(
    character_id: int,
    character: CharacterUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update a character's basic info. A level or class change rescales spell slots."""
    return service.update_character(db, character_id, character, current_user)


@router.delete("/{character_id}", status_code=204)
def delete_character(
    character_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete a character."""
    service.delete_character(db, character_id, current_user)


# Attributes
@router.get("/{character_id}/attributes", response_model=AttributesResponse)
def get_attributes(character_id: int, db: Session = Depends(get_db)):
    """Get a character's attributes."""
    return service.get_character(db, character_id)


@router.put("/{character_id}/attributes", response_model=AttributesResponse)
def update_attributes(
    character_id: int,
    attrs: AttributesUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update a character's attributes."""
    return service.update_attributes(db, character_id, attrs, current_user)


# Health
@router.get("/{character_id}/health", response_model=HealthResponse)
def get_health(character_id: int, db: Session = Depends(get_db)):
    """Get a character's health stats."""
    return service.get_character(db, character_id)


@router.put("/{character_id}/health", response_model=HealthResponse)
def update_health(
    character_id: int,
    health: HealthUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update a character's health stats. HP is clamped to [0, max_hp]."""
    return service.update_health(db, character_id, health, current_user)
