from sqlalchemy import Column, Integer, String, Text, Enum

from ..database import Base
from ..core.enums import CastingTime


class Spell(Base):
    __tablename__ = "spells"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    level = Column(Integer, nullable=False, default=0)  # 0 = cantrip
    casting_time = Column(Enum(CastingTime), nullable=False, default=CastingTime.ACTION)
    school = Column(String(50), nullable=True)
    description = Column(Text, nullable=True)
