from sqlalchemy.orm import Session

from .models import World, WorldMember
from .schemas import WorldCreate, WorldJoinRequest
from ..character.service import get_character
from ..core.exceptions import NotFoundError, AuthorizationError, ValidationError
from ..database import commit
from ..user.models import User


def get_world(db: Session, world_id: int) -> World:
    world = db.query(World).filter(World.id == world_id).first()
    if not world:
        raise NotFoundError("World", world_id)
    return world


def get_membership(db: Session, world_id: int, user_id: int) -> WorldMember | None:
    return db.query(WorldMember).filter(
        WorldMember.world_id == world_id,
        WorldMember.user_id == user_id,
    ).first()


def create_world(db: Session, world_data: WorldCreate, dm: User) -> World:
    world = World(name=world_data.name, description=world_data.description, dm_id=dm.id)
    db.add(world)
    commit(db)
    db.refresh(world)
    return world


def join_world(db: Session, world_id: int, request: WorldJoinRequest, user: User) -> WorldMember:
    """Add the user to a world, optionally bringing one of their characters."""
    world = get_world(db, world_id)
    if world.dm_id == user.id:
        raise ValidationError("The DM is already part of this world")

    if request.character_id is not None:
        character = get_character(db, request.character_id)
        if character.user_id != user.id:
            raise AuthorizationError("You can only join with your own character")

    membership = get_membership(db, world_id, user.id)
    if membership:
        membership.character_id = request.character_id
    else:
        membership = WorldMember(world_id=world_id, user_id=user.id, character_id=request.character_id)
        db.add(membership)

    if request.character_id is not None:
        character.world_id = world_id

    commit(db)
    db.refresh(membership)
    return membership
