from .models import EnemyTemplate
from .router import router

__all__ = ["router", "EnemyTemplate"]
