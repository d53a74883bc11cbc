from .models import World, WorldMember
from .router import router

__all__ = ["router", "World", "WorldMember"]
