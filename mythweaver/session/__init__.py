from .models import GameSession, SessionParticipant

__all__ = ["GameSession", "SessionParticipant"]
