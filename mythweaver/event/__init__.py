from .models import SessionEvent
from .schemas import SessionEventResponse

__all__ = [
    "SessionEvent",
    "SessionEventResponse",
]
