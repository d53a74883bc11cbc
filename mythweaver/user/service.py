from sqlalchemy.orm import Session

from .models import User
from .schemas import UserCreate
from ..core.exceptions import NotFoundError
from ..database import commit


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User", user_id)
    return user


def create_user(db: Session, user_data: UserCreate) -> User:
    user = User(name=user_data.name)
    db.add(user)
    commit(db)
    db.refresh(user)
    return user
