from ..core.enums import CharacterClass, SpellcastingAbility
from .schemas import SpellSlot, SpellSlots, SpellcastingInfo

# Slots per spell level 1-9, indexed by character level
FULL_CASTER_SLOTS = {
    1: [2, 0, 0, 0, 0, 0, 0, 0, 0],
    2: [3, 0, 0, 0, 0, 0, 0, 0, 0],
    3: [4, 2, 0, 0, 0, 0, 0, 0, 0],
    4: [4, 3, 0, 0, 0, 0, 0, 0, 0],
    5: [4, 3, 2, 0, 0, 0, 0, 0, 0],
    6: [4, 3, 3, 0, 0, 0, 0, 0, 0],
    7: [4, 3, 3, 1, 0, 0, 0, 0, 0],
    8: [4, 3, 3, 2, 0, 0, 0, 0, 0],
    9: [4, 3, 3, 3, 1, 0, 0, 0, 0],
    10: [4, 3, 3, 3, 2, 0, 0, 0, 0],
    11: [4, 3, 3, 3, 2, 1, 0, 0, 0],
    12: [4, 3, 3, 3, 2, 1, 0, 0, 0],
    13: [4, 3, 3, 3, 2, 1, 1, 0, 0],
    14: [4, 3, 3, 3, 2, 1, 1, 0, 0],
    15: [4, 3, 3, 3, 2, 1, 1, 1, 0],
    16: [4, 3, 3, 3, 2, 1, 1, 1, 0],
    17: [4, 3, 3, 3, 2, 1, 1, 1, 1],
    18: [4, 3, 3, 3, 3, 1, 1, 1, 1],
    19: [4, 3, 3, 3, 3, 2, 1, 1, 1],
    20: [4, 3, 3, 3, 3, 2, 2, 1, 1],
}

# Half casters get their first slots at level 2
HALF_CASTER_SLOTS = {
    1: [0, 0, 0, 0, 0, 0, 0, 0, 0],
    2: [2, 0, 0, 0, 0, 0, 0, 0, 0],
    3: [3, 0, 0, 0, 0, 0, 0, 0, 0],
    4: [3, 0, 0, 0, 0, 0, 0, 0, 0],
    5: [4, 2, 0, 0, 0, 0, 0, 0, 0],
    6: [4, 2, 0, 0, 0, 0, 0, 0, 0],
    7: [4, 3, 0, 0, 0, 0, 0, 0, 0],
    8: [4, 3, 0, 0, 0, 0, 0, 0, 0],
    9: [4, 3, 2, 0, 0, 0, 0, 0, 0],
    10: [4, 3, 2, 0, 0, 0, 0, 0, 0],
    11: [4, 3, 3, 0, 0, 0, 0, 0, 0],
    12: [4, 3, 3, 0, 0, 0, 0, 0, 0],
    13: [4, 3, 3, 1, 0, 0, 0, 0, 0],
    14: [4, 3, 3, 1, 0, 0, 0, 0, 0],
    15: [4, 3, 3, 2, 0, 0, 0, 0, 0],
    16: [4, 3, 3, 2, 0, 0, 0, 0, 0],
    17: [4, 3, 3, 3, 1, 0, 0, 0, 0],
    18: [4, 3, 3, 3, 1, 0, 0, 0, 0],
    19: [4, 3, 3, 3, 2, 0, 0, 0, 0],
    20: [4, 3, 3, 3, 2, 0, 0, 0, 0],
}

SPELL_SLOTS_BY_CLASS = {
    CharacterClass.BARD: FULL_CASTER_SLOTS,
    CharacterClass.CLERIC: FULL_CASTER_SLOTS,
    CharacterClass.DRUID: FULL_CASTER_SLOTS,
    CharacterClass.SORCERER: FULL_CASTER_SLOTS,
    CharacterClass.WIZARD: FULL_CASTER_SLOTS,
    CharacterClass.PALADIN: HALF_CASTER_SLOTS,
    CharacterClass.RANGER: HALF_CASTER_SLOTS,
}

CASTING_ABILITY_BY_CLASS = {
    CharacterClass.WIZARD: SpellcastingAbility.INTELLIGENCE,
    CharacterClass.CLERIC: SpellcastingAbility.WISDOM,
    CharacterClass.DRUID: SpellcastingAbility.WISDOM,
    CharacterClass.RANGER: SpellcastingAbility.WISDOM,
    CharacterClass.BARD: SpellcastingAbility.CHARISMA,
    CharacterClass.SORCERER: SpellcastingAbility.CHARISMA,
    CharacterClass.PALADIN: SpellcastingAbility.CHARISMA,
    # Pact magic has no shared table; its pools start empty and are set by hand
    CharacterClass.WARLOCK: SpellcastingAbility.CHARISMA,
}


def is_spellcaster(character_class: CharacterClass) -> bool:
    return character_class in CASTING_ABILITY_BY_CLASS


def slots_for_class_level(character_class: CharacterClass, level: int) -> SpellSlots:
    """Fresh (all unused) slot pools for a class at a character level."""
    table = SPELL_SLOTS_BY_CLASS.get(character_class)
    counts = table.get(min(max(level, 1), 20)) if table else None
    if not counts:
        return SpellSlots()
    return SpellSlots(**{
        f"level{spell_level}": SpellSlot(used=0, max=count)
        for spell_level, count in enumerate(counts, start=1)
    })


def derive_spellcasting(character_class: CharacterClass, level: int) -> SpellcastingInfo | None:
    if not is_spellcaster(character_class):
        return None
    return SpellcastingInfo(
        ability=CASTING_ABILITY_BY_CLASS.get(character_class),
        spell_slots=slots_for_class_level(character_class, level),
    )


def enable_spellcasting(
    current: SpellcastingInfo | None, ability: SpellcastingAbility
) -> SpellcastingInfo:
    """Turn on spellcasting with the given ability, keeping any existing pools."""
    if current is None:
        return SpellcastingInfo(ability=ability)
    return current.model_copy(update={"ability": ability})


def rescale_spellcasting(
    current: SpellcastingInfo | None,
    character_class: CharacterClass,
    level: int,
) -> SpellcastingInfo | None:
    """Recompute slot maximums after a class or level change, keeping usage.

    Pools of classes without a slot table are managed by hand and left alone.
    """
    fresh = derive_spellcasting(character_class, level)
    if current is None:
        return fresh
    if character_class not in SPELL_SLOTS_BY_CLASS:
        return current

    slots = {}
    for name in SpellSlots.model_fields:
        new_max = getattr(fresh.spell_slots, name).max
        used = getattr(current.spell_slots, name).used
        slots[name] = SpellSlot(used=min(used, new_max), max=new_max)
    return SpellcastingInfo(ability=fresh.ability, spell_slots=SpellSlots(**slots))
