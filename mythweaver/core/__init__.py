from .enums import (
    CharacterClass,
    ActionCategory,
    CombatantType,
    SpellcastingAbility,
    CastingTime,
    SlotAction,
    RestType,
    SessionEventType,
)
from .exceptions import (
    GameException,
    NotFoundError,
    ValidationError,
    CombatError,
    ResourceExhaustedError,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    PersistenceError,
)

__all__ = [
    "CharacterClass",
    "ActionCategory",
    "CombatantType",
    "SpellcastingAbility",
    "CastingTime",
    "SlotAction",
    "RestType",
    "SessionEventType",
    "GameException",
    "NotFoundError",
    "ValidationError",
    "CombatError",
    "ResourceExhaustedError",
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "PersistenceError",
]
