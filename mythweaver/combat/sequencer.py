"""
Initiative order and turn pointer.

Order is by descending position (initiative); equal positions keep creation
order, so the combatant added first acts first.
"""

from dataclasses import dataclass

from ..core.exceptions import CombatError


@dataclass(frozen=True)
class TurnState:
    active: bool = False
    round: int = 1
    current_turn: int | None = None


def initiative_order(combatants) -> list[int]:
    """Ids of the given combatants (anything with ``id`` and ``position``) in turn order."""
    return [c.id for c in sorted(combatants, key=lambda c: (-c.position, c.id))]


def start(order: list[int]) -> TurnState:
    if not order:
        raise CombatError("Cannot start combat with no combatants")
    return TurnState(active=True, round=1, current_turn=order[0])


def next_in_order(order: list[int], current: int | None) -> tuple[int, bool]:
    """Return the id after ``current`` and whether the order wrapped around."""
    if current not in order:
        return order[0], False
    index = order.index(current) + 1
    if index >= len(order):
        return order[0], True
    return order[index], False


def advance(state: TurnState, order: list[int]) -> TurnState:
    if not state.active:
        raise CombatError("No active combat")
    if not order:
        return end()
    next_id, wrapped = next_in_order(order, state.current_turn)
    return TurnState(active=True, round=state.round + 1 if wrapped else state.round, current_turn=next_id)


def after_removal(state: TurnState, order: list[int], removed_id: int) -> TurnState:
    """Recompute the pointer once ``removed_id`` has left.

    ``order`` is the order before removal. When the removed combatant held
    the turn, it passes to whoever followed it, and the round stays the same.
    """
    remaining = [i for i in order if i != removed_id]
    if not state.active:
        return state
    if not remaining:
        return end()
    if state.current_turn != removed_id:
        return state
    next_id, _ = next_in_order(order, removed_id)
    return TurnState(active=True, round=state.round, current_turn=next_id)


def end() -> TurnState:
    return TurnState(active=False, round=1, current_turn=None)
