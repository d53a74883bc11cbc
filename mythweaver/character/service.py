from sqlalchemy.orm import Session

from .models import Character
from .schemas import CharacterCreate, CharacterUpdate, AttributesUpdate, HealthUpdate
from ..core.exceptions import NotFoundError, AuthorizationError
from ..database import commit
from ..spellcasting.tables import derive_spellcasting, enable_spellcasting, rescale_spellcasting
from ..user.models import User


def get_character(db: Session, character_id: int) -> Character:
    character = db.query(Character).filter(Character.id == character_id).first()
    if not character:
        raise NotFoundError("Character", character_id)
    return character


def get_owned_character(db: Session, character_id: int, user: User) -> Character:
    character = get_character(db, character_id)
    if character.user_id != user.id:
        raise AuthorizationError("You can only modify your own characters")
    return character


def get_characters(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    user_id: int | None = None,
    world_id: int | None = None,
) -> list[Character]:
    query = db.query(Character)
    if user_id is not None:
        query = query.filter(Character.user_id == user_id)
    if world_id is not None:
        query = query.filter(Character.world_id == world_id)
    return query.order_by(Character.id).offset(skip).limit(limit).all()


def create_character(db: Session, character_data: CharacterCreate, owner: User) -> Character:
    character = Character(
        user_id=owner.id,
        world_id=character_data.world_id,
        name=character_data.name,
        character_class=character_data.character_class,
        race=character_data.race,
        level=character_data.level,
        strength=character_data.strength,
        dexterity=character_data.dexterity,
        constitution=character_data.constitution,
        intelligence=character_data.intelligence,
        wisdom=character_data.wisdom,
        charisma=character_data.charisma,
        max_hp=character_data.max_hp,
        current_hp=character_data.max_hp,
        armor_class=character_data.armor_class,
        speed=character_data.speed,
    )
    # Slot pools come from the class table once; afterwards only the ledger touches them
    spellcasting = derive_spellcasting(character.character_class, character.level)
    if character_data.spellcasting_ability is not None:
        spellcasting = enable_spellcasting(spellcasting, character_data.spellcasting_ability)
    character.set_spellcasting(spellcasting)

    db.add(character)
    commit(db)
    db.refresh(character)
    return character


def update_character(db: Session, character_id: int, character_data: CharacterUpdate, user: User) -> Character:
    character = get_owned_character(db, character_id, user)
    update_data = character_data.model_dump(exclude_unset=True)
    ability = update_data.pop("spellcasting_ability", None)
    for field, value in update_data.items():
        setattr(character, field, value)

    if "level" in update_data or "character_class" in update_data:
        character.set_spellcasting(
            rescale_spellcasting(character.get_spellcasting(), character.character_class, character.level)
        )
    if ability is not None:
        character.set_spellcasting(enable_spellcasting(character.get_spellcasting(), ability))

    commit(db)
    db.refresh(character)
    return character


def delete_character(db: Session, character_id: int, user: User) -> None:
    character = get_owned_character(db, character_id, user)
    db.delete(character)
    commit(db)


# Attributes
def update_attributes(db: Session, character_id: int, attrs: AttributesUpdate, user: User) -> Character:
    character = get_owned_character(db, character_id, user)
    update_data = attrs.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(character, field, value)
    commit(db)
    db.refresh(character)
    return character


# Health
def update_health(db: Session, character_id: int, health_data: HealthUpdate, user: User) -> Character:
    character = get_owned_character(db, character_id, user)
    update_data = health_data.model_dump(exclude_unset=True)
    if "max_hp" in update_data:
        character.max_hp = update_data["max_hp"]
    if "armor_class" in update_data:
        character.armor_class = update_data["armor_class"]
    character.set_hp(update_data.get("current_hp", character.current_hp))
    commit(db)
    db.refresh(character)
    return character
