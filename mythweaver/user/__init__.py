from .models import User
from .router import router

__all__ = ["router", "User"]
