from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey

from ..database import Base


class EnemyTemplate(Base):
    """Reusable enemy/NPC stat block. Combatants copy its numbers when added."""

    __tablename__ = "enemy_templates"

    id = Column(Integer, primary_key=True, index=True)
    dm_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    world_id = Column(Integer, ForeignKey("worlds.id"), nullable=True)
    name = Column(String(100), nullable=False)
    max_hp = Column(Integer, nullable=False)
    armor_class = Column(Integer, default=10)
    dexterity = Column(Integer, default=10)
    speed = Column(Integer, default=30)
    challenge_rating = Column(String(10), nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    def get_modifier(self, attribute: str) -> int:
        value = getattr(self, attribute, 10)
        return (value - 10) // 2
