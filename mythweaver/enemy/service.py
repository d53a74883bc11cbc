from sqlalchemy.orm import Session

from .models import EnemyTemplate
from .schemas import EnemyTemplateCreate, EnemyTemplateUpdate
from ..core.exceptions import NotFoundError, AuthorizationError
from ..database import commit
from ..user.models import User


def get_template(db: Session, template_id: int) -> EnemyTemplate:
    template = db.query(EnemyTemplate).filter(EnemyTemplate.id == template_id).first()
    if not template:
        raise NotFoundError("EnemyTemplate", template_id)
    return template


def get_owned_template(db: Session, template_id: int, user: User) -> EnemyTemplate:
    template = get_template(db, template_id)
    if template.dm_id != user.id:
        raise AuthorizationError("Only the DM who created this enemy can change it")
    return template


def get_templates(db: Session, dm_id: int | None = None, skip: int = 0, limit: int = 100) -> list[EnemyTemplate]:
    query = db.query(EnemyTemplate)
    if dm_id is not None:
        query = query.filter(EnemyTemplate.dm_id == dm_id)
    return query.order_by(EnemyTemplate.id).offset(skip).limit(limit).all()


def create_template(db: Session, template_data: EnemyTemplateCreate, dm: User) -> EnemyTemplate:
    template = EnemyTemplate(dm_id=dm.id, **template_data.model_dump())
    db.add(template)
    commit(db)
    db.refresh(template)
    return template


def update_template(db: Session, template_id: int, template_data: EnemyTemplateUpdate, user: User) -> EnemyTemplate:
    template = get_owned_template(db, template_id, user)
    for field, value in template_data.model_dump(exclude_unset=True).items():
        setattr(template, field, value)
    commit(db)
    db.refresh(template)
    return template


def delete_template(db: Session, template_id: int, user: User) -> None:
    template = get_owned_template(db, template_id, user)
    db.delete(template)
    commit(db)
