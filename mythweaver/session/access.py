"""
Who may do what inside a game session.

The DM of the session's world controls everything. Other world members are
players: they see the session and act only through their own characters.
"""

from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from .models import GameSession
from ..character.models import Character
from ..core.enums import CombatantType
from ..core.exceptions import AuthorizationError
from ..user.models import User
from ..world.models import World, WorldMember


@dataclass
class SessionAccess:
    user_id: int
    is_dm: bool
    character_ids: set[int] = field(default_factory=set)

    def require_dm(self, what: str = "do that"):
        if not self.is_dm:
            raise AuthorizationError(f"Only the DM can {what}")

    def controls(self, combatant) -> bool:
        """DM controls every combatant; players only those sourced from their characters."""
        if self.is_dm:
            return True
        return (
            combatant.combatant_type == CombatantType.CHARACTER
            and combatant.character_id in self.character_ids
        )

    def require_control(self, combatant, what: str = "act for"):
        if not self.controls(combatant):
            raise AuthorizationError(f"You cannot {what} {combatant.name}")


def resolve_access(db: Session, game_session: GameSession, user: User) -> SessionAccess:
    world = db.query(World).filter(World.id == game_session.world_id).first()
    owned = {c.id for c in db.query(Character.id).filter(Character.user_id == user.id).all()}

    if world and world.dm_id == user.id:
        return SessionAccess(user_id=user.id, is_dm=True, character_ids=owned)

    membership = db.query(WorldMember).filter(
        WorldMember.world_id == game_session.world_id,
        WorldMember.user_id == user.id,
    ).first()
    if not membership:
        raise AuthorizationError("You are not a member of this world")

    return SessionAccess(user_id=user.id, is_dm=False, character_ids=owned)
