from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..user.models import User
from . import service
from .schemas import EnemyTemplateCreate, EnemyTemplateUpdate, EnemyTemplateResponse

router = APIRouter(prefix="/enemies", tags=["enemies"])


@router.post("/", response_model=EnemyTemplateResponse, status_code=201)
def create_template(
    template: EnemyTemplateCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create an enemy template owned by the calling DM."""
    return service.create_template(db, template, current_user)


@router.get("/", response_model=list[EnemyTemplateResponse])
def list_templates(
    dm_id: int | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    """List enemy templates."""
    return service.get_templates(db, dm_id, skip, limit)


@router.get("/{template_id}", response_model=EnemyTemplateResponse)
def get_template(template_id: int, db: Session = Depends(get_db)):
    """Get a specific enemy template."""
    return service.get_template(db, template_id)


@router.put("/{template_id}", response_model=EnemyTemplateResponse)
def update_template(
    template_id: int,
    template: EnemyTemplateUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update a template. Combatants already in a fight keep their snapshot."""
    return service.update_template(db, template_id, template, current_user)


@router.delete("/{template_id}", status_code=204)
def delete_template(
    template_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete an enemy template."""
    service.delete_template(db, template_id, current_user)
