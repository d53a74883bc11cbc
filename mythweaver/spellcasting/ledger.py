"""
Spell slot bookkeeping.

Every function takes a SpellSlots value and returns a new one; the input is
never modified, so a rejected operation leaves the caller's state intact.
"""

from ..core.exceptions import ResourceExhaustedError, ValidationError
from .schemas import SpellSlot, SpellSlots

MIN_SLOT_LEVEL = 1
MAX_SLOT_LEVEL = 9


def _slot_name(level: int) -> str:
    if not MIN_SLOT_LEVEL <= level <= MAX_SLOT_LEVEL:
        raise ValidationError(f"Spell slot level must be between {MIN_SLOT_LEVEL} and {MAX_SLOT_LEVEL}, got {level}")
    return f"level{level}"


def get_slot(slots: SpellSlots, level: int) -> SpellSlot:
    return getattr(slots, _slot_name(level))


def _with_slot(slots: SpellSlots, level: int, slot: SpellSlot) -> SpellSlots:
    return slots.model_copy(update={_slot_name(level): slot})


def use_slot(slots: SpellSlots, level: int) -> SpellSlots:
    """Spend one slot of exactly this level. There is no upcast fallback."""
    slot = get_slot(slots, level)
    if slot.used >= slot.max:
        raise ResourceExhaustedError(f"No level {level} spell slots available")
    return _with_slot(slots, level, SpellSlot(used=slot.used + 1, max=slot.max))


def restore_slot(slots: SpellSlots, level: int) -> SpellSlots:
    slot = get_slot(slots, level)
    return _with_slot(slots, level, SpellSlot(used=max(slot.used - 1, 0), max=slot.max))


def restore_all(slots: SpellSlots) -> SpellSlots:
    """Long rest: every pool back to zero used."""
    return SpellSlots(**{
        name: SpellSlot(used=0, max=getattr(slots, name).max)
        for name in SpellSlots.model_fields
    })


def set_slot(slots: SpellSlots, level: int, used: int | None = None, maximum: int | None = None) -> SpellSlots:
    """Manual correction: maximum is floored at 0 and used clamped into [0, maximum]."""
    slot = get_slot(slots, level)
    new_max = slot.max if maximum is None else max(maximum, 0)
    new_used = slot.used if used is None else used
    return _with_slot(slots, level, SpellSlot(used=min(max(new_used, 0), new_max), max=new_max))

