"""
Per-turn action economy of a combatant.

All functions are pure: they take an ActionEconomy and return a new one.
Flags only go back to False through ``default_economy()`` on turn reset.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from ..core.enums import ActionCategory
from ..core.exceptions import ResourceExhaustedError

_FLAG_BY_CATEGORY = {
    ActionCategory.ACTION: "used_action",
    ActionCategory.BONUS_ACTION: "used_bonus_action",
    ActionCategory.REACTION: "used_reaction",
    ActionCategory.MOVEMENT: "used_movement",
}


class TakenAction(BaseModel):
    action_id: str
    action_name: str
    category: ActionCategory
    timestamp: datetime
    details: str | None = None


class ActionEconomy(BaseModel):
    used_action: bool = False
    used_bonus_action: bool = False
    used_reaction: bool = False
    used_movement: bool = False
    actions_taken: list[TakenAction] = Field(default_factory=list)


def default_economy() -> ActionEconomy:
    return ActionEconomy()


def consume_action(
    category: ActionCategory,
    economy: ActionEconomy,
    action_id: str,
    action_name: str,
    details: str | None = None,
    timestamp: datetime | None = None,
) -> ActionEconomy:
    """Mark the category used and append one log entry.

    Consuming an already used category leaves the flag set and still logs;
    callers that must refuse reuse check ``ensure_available`` first.
    """
    entry = TakenAction(
        action_id=action_id,
        action_name=action_name,
        category=category,
        timestamp=timestamp or datetime.now(timezone.utc),
        details=details,
    )
    update = {"actions_taken": [*economy.actions_taken, entry]}
    flag = _FLAG_BY_CATEGORY.get(category)
    if flag:
        update[flag] = True
    return economy.model_copy(update=update)


def ensure_available(category: ActionCategory, economy: ActionEconomy):
    flag = _FLAG_BY_CATEGORY.get(category)
    if flag and getattr(economy, flag):
        raise ResourceExhaustedError(f"You have already used your {category.value.replace('_', ' ')} this turn")
