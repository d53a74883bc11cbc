from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..user.models import User
from . import service
from .schemas import WorldCreate, WorldJoinRequest, WorldResponse, WorldMemberResponse

router = APIRouter(prefix="/worlds", tags=["worlds"])


@router.post("/", response_model=WorldResponse, status_code=201)
def create_world(
    world: WorldCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create a world. The caller becomes its DM."""
    return service.create_world(db, world, current_user)


@router.get("/{world_id}", response_model=WorldResponse)
def get_world(world_id: int, db: Session = Depends(get_db)):
    """Get a world and its members."""
    return service.get_world(db, world_id)


@router.post("/{world_id}/join", response_model=WorldMemberResponse, status_code=201)
def join_world(
    world_id: int,
    request: WorldJoinRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Join a world as a player."""
    return service.join_world(db, world_id, request, current_user)
