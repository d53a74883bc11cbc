from enum import Enum


class ActionCategory(str, Enum):
    ACTION = "action"
    BONUS_ACTION = "bonus_action"
    REACTION = "reaction"
    MOVEMENT = "movement"
    FREE = "free"


class CombatantType(str, Enum):
    CHARACTER = "character"
    ENEMY = "enemy"


class SpellcastingAbility(str, Enum):
    INTELLIGENCE = "int"
    WISDOM = "wis"
    CHARISMA = "cha"


class CastingTime(str, Enum):
    ACTION = "action"
    BONUS_ACTION = "bonus_action"
    REACTION = "reaction"


class SlotAction(str, Enum):
    USE = "use"
    RESTORE = "restore"
    RESTORE_ALL = "restore_all"
    SET = "set"


class RestType(str, Enum):
    SHORT = "short"
    LONG = "long"


class SessionEventType(str, Enum):
    PARTICIPANT_JOINED = "participant_joined"
    COMBATANT_ADDED = "combatant_added"
    COMBATANT_UPDATED = "combatant_updated"
    COMBATANT_REMOVED = "combatant_removed"
    COMBAT_STARTED = "combat_started"
    COMBAT_ENDED = "combat_ended"
    TURN_ADVANCED = "turn_advanced"
    ACTION_TAKEN = "action_taken"
    REST_COMPLETED = "rest_completed"


class CharacterClass(str, Enum):
    BARBARIAN = "barbarian"
    BARD = "bard"
    CLERIC = "cleric"
    DRUID = "druid"
    FIGHTER = "fighter"
    MONK = "monk"
    PALADIN = "paladin"
    RANGER = "ranger"
    ROGUE = "rogue"
    SORCERER = "sorcerer"
    WARLOCK = "warlock"
    WIZARD = "wizard"
