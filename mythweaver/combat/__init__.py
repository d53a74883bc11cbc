from .models import Combatant
from .catalog import CombatAction, COMBAT_ACTIONS, actions_by_category, get_action, is_action_available
from .economy import ActionEconomy, TakenAction, default_economy, consume_action

__all__ = [
    "Combatant",
    "CombatAction",
    "COMBAT_ACTIONS",
    "actions_by_category",
    "get_action",
    "is_action_available",
    "ActionEconomy",
    "TakenAction",
    "default_economy",
    "consume_action",
]
