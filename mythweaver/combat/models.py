from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum, ForeignKey, JSON

from ..database import Base
from ..core.enums import CombatantType
from .economy import ActionEconomy, default_economy


class Combatant(Base):
    __tablename__ = "combatants"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("game_sessions.id"), nullable=False, index=True)

    # Source: exactly one of character_id / template_id, per combatant_type
    combatant_type = Column(Enum(CombatantType), nullable=False)
    character_id = Column(Integer, ForeignKey("characters.id"), nullable=True)
    template_id = Column(Integer, ForeignKey("enemy_templates.id", ondelete="SET NULL"), nullable=True)

    # Combat stats (enemies snapshot these from the template when added)
    name = Column(String(100), nullable=False)
    current_hp = Column(Integer, nullable=False)
    max_hp = Column(Integer, nullable=False)
    armor_class = Column(Integer, default=10)

    # Initiative; higher acts first, ties by id
    position = Column(Integer, nullable=False, default=0)

    is_companion = Column(Boolean, default=False)
    show_hp_to_players = Column(Boolean, default=False)
    status_effects = Column(JSON, default=list)  # [{"name": "Poisoned", "duration": 3, "description": ...}]
    action_economy = Column(JSON, nullable=True)  # ActionEconomy; null until the first action

    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, default=datetime.utcnow)

    __mapper_args__ = {"version_id_col": version}

    def get_economy(self) -> ActionEconomy:
        if not self.action_economy:
            return default_economy()
        return ActionEconomy.model_validate(self.action_economy)

    def set_economy(self, economy: ActionEconomy):
        self.action_economy = economy.model_dump(mode="json")

    def set_hp(self, current_hp: int):
        """Store HP clamped to [0, max_hp]. 0 means down, not removed."""
        self.current_hp = min(max(current_hp, 0), self.max_hp)
