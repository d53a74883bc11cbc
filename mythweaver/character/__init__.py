from .models import Character
from .router import router
from .schemas import (
    CharacterCreate,
    CharacterUpdate,
    CharacterResponse,
    AttributesUpdate,
    AttributesResponse,
    HealthUpdate,
    HealthResponse,
)

__all__ = [
    "router",
    "Character",
    "CharacterCreate",
    "CharacterUpdate",
    "CharacterResponse",
    "AttributesUpdate",
    "AttributesResponse",
    "HealthUpdate",
    "HealthResponse",
]
