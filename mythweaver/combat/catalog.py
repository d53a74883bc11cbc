"""
The fixed list of 5e combat actions, grouped by the part of a combatant's
turn they consume.
"""

from pydantic import BaseModel

from .economy import ActionEconomy
from ..core.enums import ActionCategory
from ..core.exceptions import NotFoundError


class CombatAction(BaseModel):
    id: str
    name: str
    category: ActionCategory
    description: str


def _action(id: str, name: str, category: ActionCategory, description: str) -> CombatAction:
    return CombatAction(id=id, name=name, category=category, description=description)


COMBAT_ACTIONS: list[CombatAction] = [
    # Standard actions
    _action("attack", "Attack", ActionCategory.ACTION,
            "Make a melee or ranged attack against a target. You can make multiple attacks if you have Extra Attack."),
    _action("cast-spell", "Cast a Spell", ActionCategory.ACTION,
            "Cast a spell with a casting time of 1 action. Some spells require concentration."),
    _action("dash", "Dash", ActionCategory.ACTION,
            "Gain extra movement equal to your speed for the current turn."),
    _action("disengage", "Disengage", ActionCategory.ACTION,
            "Your movement does not provoke opportunity attacks for the rest of the turn."),
    _action("dodge", "Dodge", ActionCategory.ACTION,
            "Until your next turn, attack rolls against you have disadvantage and you have advantage on DEX saving throws."),
    _action("help", "Help", ActionCategory.ACTION,
            "Give an ally advantage on their next ability check, or on their next attack against a creature within 5 feet of you."),
    _action("hide", "Hide", ActionCategory.ACTION,
            "Make a Dexterity (Stealth) check to hide. You must be heavily obscured or behind cover."),
    _action("ready", "Ready", ActionCategory.ACTION,
            "Prepare an action to trigger on a condition you choose. Executing it uses your reaction."),
    _action("search", "Search", ActionCategory.ACTION,
            "Make a Wisdom (Perception) or Intelligence (Investigation) check to find something hidden."),
    _action("use-object", "Use an Object", ActionCategory.ACTION,
            "Interact with an object that needs your action, such as drinking a potion."),
    _action("grapple", "Grapple", ActionCategory.ACTION,
            "Grab a creature with a Strength (Athletics) check contested by its Athletics or Acrobatics."),
    _action("shove", "Shove", ActionCategory.ACTION,
            "Push a creature 5 feet or knock it prone with a contested Strength (Athletics) check."),
    _action("improvise", "Improvise", ActionCategory.ACTION,
            "Describe something not covered by the other options and let the DM decide the outcome."),

    # Bonus actions
    _action("bonus-attack", "Bonus Attack", ActionCategory.BONUS_ACTION,
            "Make an off-hand attack with a light weapon."),
    _action("bonus-spell", "Bonus Action Spell", ActionCategory.BONUS_ACTION,
            "Cast a spell with a casting time of 1 bonus action, such as Healing Word or Misty Step."),
    _action("other-bonus", "Other Bonus Action", ActionCategory.BONUS_ACTION,
            "Use a class feature or item that takes a bonus action, such as Cunning Action or Second Wind."),

    # Reactions
    _action("opportunity-attack", "Opportunity Attack", ActionCategory.REACTION,
            "Make a melee attack against a creature that moves out of your reach."),
    _action("reaction-spell", "Reaction Spell", ActionCategory.REACTION,
            "Cast a reaction spell like Shield, Counterspell or Feather Fall."),
    _action("other-reaction", "Other Reaction", ActionCategory.REACTION,
            "Use a reaction granted by a class feature, feat or item, such as Uncanny Dodge."),

    # Movement
    _action("move", "Move", ActionCategory.MOVEMENT,
            "Move up to your speed. Movement can be split before and after actions."),

    # Free actions, unlimited
    _action("free-interact", "Object Interaction", ActionCategory.FREE,
            "Draw or sheathe a weapon, open a door or pick up an item during your turn."),
    _action("communicate", "Communicate", ActionCategory.FREE,
            "Speak briefly, gesture or give a short command to allies."),
    _action("drop", "Drop Item", ActionCategory.FREE,
            "Drop something you are holding."),
]

_ACTIONS_BY_ID = {action.id: action for action in COMBAT_ACTIONS}


def actions_by_category() -> dict[ActionCategory, list[CombatAction]]:
    """Every category, in catalog order. Categories without actions map to []."""
    grouped = {category: [] for category in ActionCategory}
    for action in COMBAT_ACTIONS:
        grouped[action.category].append(action)
    return grouped


def get_action(action_id: str) -> CombatAction:
    action = _ACTIONS_BY_ID.get(action_id)
    if not action:
        raise NotFoundError("CombatAction", action_id)
    return action


def is_action_available(category: ActionCategory, economy: ActionEconomy) -> bool:
    if category == ActionCategory.ACTION:
        return not economy.used_action
    if category == ActionCategory.BONUS_ACTION:
        return not economy.used_bonus_action
    if category == ActionCategory.REACTION:
        return not economy.used_reaction
    if category == ActionCategory.MOVEMENT:
        return not economy.used_movement
    return True
