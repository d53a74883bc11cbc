from datetime import datetime
from sqlalchemy import Column, Integer, String, Enum, ForeignKey, JSON, DateTime

from ..database import Base
from ..core.enums import CharacterClass
from ..spellcasting.schemas import SpellcastingInfo, SpellSlots


class Character(Base):
    __tablename__ = "characters"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    world_id = Column(Integer, ForeignKey("worlds.id"), nullable=True, index=True)
    name = Column(String(100), nullable=False)
    character_class = Column(Enum(CharacterClass), nullable=False)
    race = Column(String(50), nullable=True)
    level = Column(Integer, default=1)

    # Attributes
    strength = Column(Integer, default=10)
    dexterity = Column(Integer, default=10)
    constitution = Column(Integer, default=10)
    intelligence = Column(Integer, default=10)
    wisdom = Column(Integer, default=10)
    charisma = Column(Integer, default=10)

    # Health
    current_hp = Column(Integer, default=10)
    max_hp = Column(Integer, default=10)
    armor_class = Column(Integer, default=10)
    speed = Column(Integer, default=30)

    # SpellcastingInfo as JSON, null for non-casters
    spellcasting = Column(JSON, nullable=True)

    # Bumped on every write; UPDATEs are conditional on the version that was read
    version = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __mapper_args__ = {"version_id_col": version}

    def get_modifier(self, attribute: str) -> int:
        """Calculate attribute modifier: (attribute - 10) / 2."""
        value = getattr(self, attribute, 10)
        return (value - 10) // 2

    def get_spellcasting(self) -> SpellcastingInfo | None:
        if self.spellcasting is None:
            return None
        return SpellcastingInfo.model_validate(self.spellcasting)

    def set_spellcasting(self, info: SpellcastingInfo | None):
        # Always assign a new dict; in-place JSON mutation is not tracked
        self.spellcasting = info.model_dump(mode="json") if info is not None else None

    def set_spell_slots(self, slots: SpellSlots):
        info = self.get_spellcasting()
        self.set_spellcasting(info.model_copy(update={"spell_slots": slots}))

    def set_hp(self, current_hp: int):
        """Store HP clamped to [0, max_hp]."""
        self.current_hp = min(max(current_hp, 0), self.max_hp)
