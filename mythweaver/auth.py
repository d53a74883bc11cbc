"""
Acting-user resolution.

Authentication itself happens in front of this service; the gateway forwards
the authenticated user's id in the ``X-User-Id`` header.
"""

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from .core.exceptions import AuthenticationError
from .database import get_db
from .user.models import User


def get_current_user(
    x_user_id: int | None = Header(default=None),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the user making the request, rejecting anonymous calls."""
    if x_user_id is None:
        raise AuthenticationError()
    user = db.query(User).filter(User.id == x_user_id).first()
    if not user:
        raise AuthenticationError("Unknown user")
    return user
