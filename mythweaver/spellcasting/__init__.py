from .schemas import SpellSlot, SpellSlots, SpellcastingInfo

__all__ = ["SpellSlot", "SpellSlots", "SpellcastingInfo"]
