import logging
import random
from typing import Any

from sqlalchemy.orm import Session

from . import sequencer
from .catalog import get_action
from .economy import consume_action, default_economy, ensure_available
from .models import Combatant
from .schemas import (
    AddCombatantsRequest,
    CombatantSelection,
    CharacterSource,
    CombatantResponse,
    UpdateCombatantRequest,
    TakeActionRequest,
    CatalogSelection,
)
from ..character.models import Character
from ..core.enums import ActionCategory, CombatantType, SessionEventType
from ..core.exceptions import NotFoundError, CombatError, ValidationError
from ..database import commit, flush
from ..enemy.models import EnemyTemplate
from ..event.models import SessionEvent
from ..event.service import (
    record_event,
    get_session_events,
    log_combat_started,
    log_combat_ended,
    log_turn_advanced,
)
from ..session.access import resolve_access
from ..session.models import GameSession
from ..session.service import get_game_session
from ..spellcasting import ledger
from ..spellcasting.service import get_spell, get_spell_slots
from ..user.models import User

logger = logging.getLogger("mythweaver")

# These need the combatant to hold the turn; reactions and free actions do not
ON_TURN_CATEGORIES = {ActionCategory.ACTION, ActionCategory.BONUS_ACTION, ActionCategory.MOVEMENT}


def roll_d20() -> int:
    return random.randint(1, 20)


def roll_initiative(dexterity: int) -> int:
    """d20 + DEX modifier, never below 1."""
    return max(1, roll_d20() + (dexterity - 10) // 2)


# =============================================================================
# Reads
# =============================================================================

def get_combatants(db: Session, session_id: int) -> list[Combatant]:
    """All combatants of a session in initiative order."""
    combatants = db.query(Combatant).filter(Combatant.session_id == session_id).all()
    by_id = {c.id: c for c in combatants}
    return [by_id[i] for i in sequencer.initiative_order(combatants)]


def get_combatant(db: Session, session_id: int, combatant_id: int) -> Combatant:
    combatant = db.query(Combatant).filter(
        Combatant.id == combatant_id,
        Combatant.session_id == session_id,
    ).first()
    if not combatant:
        raise NotFoundError("Combatant", combatant_id)
    return combatant


def turn_state(game_session: GameSession) -> sequencer.TurnState:
    return sequencer.TurnState(
        active=bool(game_session.combat_active),
        round=game_session.combat_round or 1,
        current_turn=game_session.current_turn_id,
    )


def _store_turn_state(game_session: GameSession, state: sequencer.TurnState):
    game_session.combat_active = state.active
    game_session.combat_round = state.round
    game_session.current_turn_id = state.current_turn


def hp_visible(combatant: Combatant, is_dm: bool) -> bool:
    if is_dm or combatant.combatant_type != CombatantType.ENEMY:
        return True
    return bool(combatant.show_hp_to_players)


def combatant_view(combatant: Combatant, is_dm: bool) -> dict[str, Any]:
    """Combatant as seen by a viewer. Hidden enemy HP comes back as None."""
    visible = hp_visible(combatant, is_dm)
    return {
        "id": combatant.id,
        "combatant_type": combatant.combatant_type,
        "character_id": combatant.character_id,
        "template_id": combatant.template_id,
        "name": combatant.name,
        "current_hp": combatant.current_hp if visible else None,
        "max_hp": combatant.max_hp if visible else None,
        "armor_class": combatant.armor_class,
        "position": combatant.position,
        "is_companion": bool(combatant.is_companion),
        "show_hp_to_players": bool(combatant.show_hp_to_players),
        "status_effects": combatant.status_effects or [],
        "action_economy": combatant.get_economy(),
        "version": combatant.version,
    }


def public_snapshot(combatant: Combatant) -> dict[str, Any]:
    """JSON-ready player view, used for event payloads and broadcasts."""
    return CombatantResponse.model_validate(combatant_view(combatant, is_dm=False)).model_dump(mode="json")


def _state(game_session: GameSession, combatants: list[Combatant], is_dm: bool) -> dict[str, Any]:
    return {
        "session_id": game_session.id,
        "combat_active": bool(game_session.combat_active),
        "round": game_session.combat_round or 1,
        "current_turn": game_session.current_turn_id,
        "combatants": [combatant_view(c, is_dm) for c in combatants],
    }


def get_combat_state(db: Session, session_id: int, user: User) -> dict[str, Any]:
    game_session = get_game_session(db, session_id)
    access = resolve_access(db, game_session, user)
    return _state(game_session, get_combatants(db, session_id), access.is_dm)


def get_action_log(
    db: Session, session_id: int, user: User, after_id: int | None = None, limit: int = 100
) -> list[SessionEvent]:
    game_session = get_game_session(db, session_id)
    resolve_access(db, game_session, user)
    return get_session_events(db, session_id, after_id, limit, SessionEventType.ACTION_TAKEN)


# =============================================================================
# Roster
# =============================================================================

def _build_combatant(
    db: Session, game_session: GameSession, selection: CombatantSelection, seen_characters: set[int]
) -> Combatant:
    source = selection.source

    if isinstance(source, CharacterSource):
        character = db.query(Character).filter(Character.id == source.character_id).first()
        if not character:
            raise NotFoundError("Character", source.character_id)
        if character.world_id != game_session.world_id:
            raise ValidationError(f"{character.name} is not part of this world")
        if character.id in seen_characters:
            raise ValidationError(f"{character.name} is already in this combat")
        seen_characters.add(character.id)

        return Combatant(
            session_id=game_session.id,
            combatant_type=CombatantType.CHARACTER,
            character_id=character.id,
            name=character.name,
            current_hp=character.current_hp,
            max_hp=character.max_hp,
            armor_class=character.armor_class,
            position=selection.initiative or roll_initiative(character.dexterity),
            is_companion=selection.is_companion,
            show_hp_to_players=selection.show_hp_to_players,
            status_effects=[],
        )

    template = db.query(EnemyTemplate).filter(EnemyTemplate.id == source.template_id).first()
    if not template:
        raise NotFoundError("EnemyTemplate", source.template_id)

    return Combatant(
        session_id=game_session.id,
        combatant_type=CombatantType.ENEMY,
        template_id=template.id,
        name=source.custom_name or template.name,
        current_hp=template.max_hp,
        max_hp=template.max_hp,
        armor_class=template.armor_class,
        position=selection.initiative or roll_initiative(template.dexterity),
        is_companion=selection.is_companion,
        show_hp_to_players=selection.show_hp_to_players,
        status_effects=[],
    )


def add_combatants(
    db: Session, session_id: int, request: AddCombatantsRequest, user: User
) -> tuple[list[dict[str, Any]], list[SessionEvent]]:
    """Insert a batch of combatants. Any bad selection rejects the whole batch.

    Adding during combat never moves the turn pointer.
    """
    game_session = get_game_session(db, session_id)
    resolve_access(db, game_session, user).require_dm("add combatants")
    if not game_session.is_active:
        raise ValidationError("This session has ended")

    seen = {c.character_id for c in get_combatants(db, session_id) if c.character_id is not None}
    added = [_build_combatant(db, game_session, selection, seen) for selection in request.combatants]

    db.add_all(added)
    flush(db)

    events = [
        record_event(
            db, session_id, SessionEventType.COMBATANT_ADDED,
            f"{c.name} joined the fight",
            combatant_id=c.id,
            user_id=user.id,
            data={"combatant": public_snapshot(c)},
        )
        for c in added
    ]
    commit(db)

    logger.info(f"Session {session_id}: added {', '.join(c.name for c in added)}")
    return [combatant_view(c, is_dm=True) for c in added], events


def _hp_description(combatant: Combatant, request: UpdateCombatantRequest, before: int) -> str:
    if request.hp_delta is not None and request.hp_delta < 0:
        return f"{combatant.name} took {-request.hp_delta} damage"
    if request.hp_delta is not None and request.hp_delta > 0:
        return f"{combatant.name} was healed for {request.hp_delta}"
    if combatant.current_hp == 0 and before > 0:
        return f"{combatant.name} is down"
    return f"{combatant.name} was updated"


def update_combatant(
    db: Session, session_id: int, combatant_id: int, request: UpdateCombatantRequest, user: User
) -> tuple[dict[str, Any], list[SessionEvent]]:
    game_session = get_game_session(db, session_id)
    access = resolve_access(db, game_session, user)
    combatant = get_combatant(db, session_id, combatant_id)

    dm_fields = [
        name for name in ("status_effects", "show_hp_to_players", "is_companion", "position")
        if getattr(request, name) is not None
    ]
    changes_hp = request.hp_delta is not None or request.current_hp is not None

    if not dm_fields and not changes_hp:
        raise ValidationError("Nothing to update")
    if dm_fields:
        access.require_dm(f"change {', '.join(dm_fields)}")
    if changes_hp:
        access.require_control(combatant, "change the HP of")

    before = combatant.current_hp
    if changes_hp:
        target = before + request.hp_delta if request.hp_delta is not None else request.current_hp
        combatant.set_hp(target)
        if combatant.character_id is not None:
            character = db.query(Character).filter(Character.id == combatant.character_id).first()
            if character:
                character.set_hp(combatant.current_hp)

    if request.status_effects is not None:
        combatant.status_effects = [effect.model_dump() for effect in request.status_effects]
    if request.show_hp_to_players is not None:
        combatant.show_hp_to_players = request.show_hp_to_players
    if request.is_companion is not None:
        combatant.is_companion = request.is_companion
    if request.position is not None:
        combatant.position = request.position

    flush(db)
    event = record_event(
        db, session_id, SessionEventType.COMBATANT_UPDATED,
        _hp_description(combatant, request, before),
        combatant_id=combatant.id,
        user_id=user.id,
        data={
            "combatant": public_snapshot(combatant),
            "changed": dm_fields + (["current_hp"] if changes_hp else []),
        },
    )
    commit(db)

    return combatant_view(combatant, access.is_dm), [event]


def remove_combatant(
    db: Session, session_id: int, combatant_id: int, user: User
) -> tuple[dict[str, Any], list[SessionEvent]]:
    """Remove one combatant. If it held the turn, the turn passes on in the same round."""
    game_session = get_game_session(db, session_id)
    resolve_access(db, game_session, user).require_dm("remove combatants")
    combatant = get_combatant(db, session_id, combatant_id)

    combatants = get_combatants(db, session_id)
    remaining = [c for c in combatants if c.id != combatant.id]
    before = turn_state(game_session)
    after = sequencer.after_removal(before, sequencer.initiative_order(combatants), combatant.id)

    name = combatant.name
    db.delete(combatant)
    _store_turn_state(game_session, after)

    events = [record_event(
        db, session_id, SessionEventType.COMBATANT_REMOVED,
        f"{name} left the fight",
        combatant_id=combatant_id,
        user_id=user.id,
    )]
    if before.active and not after.active:
        events.append(log_combat_ended(db, session_id, user.id, before.round))
    elif after.active and after.current_turn != before.current_turn:
        current = next(c for c in remaining if c.id == after.current_turn)
        current.set_economy(default_economy())
        events.append(log_turn_advanced(db, session_id, user.id, current.id, after.round, current.name))
    commit(db)

    logger.info(f"Session {session_id}: removed {name}")
    return _state(game_session, remaining, True), events


# =============================================================================
# Turn sequencing
# =============================================================================

def start_combat(db: Session, session_id: int, user: User) -> tuple[dict[str, Any], list[SessionEvent]]:
    game_session = get_game_session(db, session_id)
    resolve_access(db, game_session, user).require_dm("start combat")
    if not game_session.is_active:
        raise ValidationError("This session has ended")
    if game_session.combat_active:
        raise CombatError("Combat is already active")

    combatants = get_combatants(db, session_id)
    order = sequencer.initiative_order(combatants)
    state = sequencer.start(order)
    _store_turn_state(game_session, state)

    event = log_combat_started(db, session_id, user.id, state.current_turn, order)
    commit(db)

    logger.info(f"Session {session_id}: combat started with {len(order)} combatant(s)")
    return _state(game_session, combatants, True), [event]


def advance_turn(db: Session, session_id: int, user: User) -> tuple[dict[str, Any], list[SessionEvent]]:
    """Move to the next combatant and reset their action economy."""
    game_session = get_game_session(db, session_id)
    resolve_access(db, game_session, user).require_dm("advance the turn")
    if not game_session.is_active:
        raise ValidationError("This session has ended")

    combatants = get_combatants(db, session_id)
    state = sequencer.advance(turn_state(game_session), sequencer.initiative_order(combatants))
    _store_turn_state(game_session, state)

    current = next(c for c in combatants if c.id == state.current_turn)
    current.set_economy(default_economy())

    event = log_turn_advanced(db, session_id, user.id, current.id, state.round, current.name)
    commit(db)

    logger.info(f"Session {session_id}: round {state.round}, {current.name}'s turn")
    return _state(game_session, combatants, True), [event]


def end_combat(db: Session, session_id: int, user: User) -> tuple[dict[str, Any], list[SessionEvent]]:
    """Clear every combatant and reset the sequencer."""
    game_session = get_game_session(db, session_id)
    resolve_access(db, game_session, user).require_dm("end combat")

    combatants = get_combatants(db, session_id)
    if not game_session.combat_active and not combatants:
        raise CombatError("No active combat")

    rounds = game_session.combat_round or 1
    for combatant in combatants:
        db.delete(combatant)
    _store_turn_state(game_session, sequencer.end())

    event = log_combat_ended(db, session_id, user.id, rounds)
    commit(db)

    logger.info(f"Session {session_id}: combat ended after {rounds} round(s)")
    return _state(game_session, [], True), [event]


# =============================================================================
# Actions
# =============================================================================

def take_turn_action(
    db: Session, session_id: int, request: TakeActionRequest, user: User
) -> tuple[dict[str, Any], list[SessionEvent]]:
    """
    Spend part of a combatant's turn on a catalog action or a spell.

    Everything is checked before anything is written. A levelled spell cast
    by a character spends a slot of ``slot_level`` in the same transaction
    as the economy update; cantrips and enemy spells spend nothing.
    """
    game_session = get_game_session(db, session_id)
    access = resolve_access(db, game_session, user)
    combatant = get_combatant(db, session_id, request.combatant_id)
    access.require_control(combatant, "take actions for")

    if not game_session.combat_active:
        raise CombatError("No active combat")

    selection = request.selection
    spell = None
    slot_level = None
    if isinstance(selection, CatalogSelection):
        action = get_action(selection.action_id)
        category, action_id, action_name = action.category, action.id, action.name
    else:
        spell = get_spell(db, selection.spell_id)
        category = ActionCategory(spell.casting_time.value)
        action_id, action_name = f"spell-{spell.id}", f"Cast {spell.name}"
        if spell.level > 0:
            slot_level = selection.slot_level or spell.level
            if slot_level < spell.level:
                raise ValidationError(f"{spell.name} needs at least a level {spell.level} slot")

    if category in ON_TURN_CATEGORIES and game_session.current_turn_id != combatant.id:
        raise CombatError(f"It is not {combatant.name}'s turn")

    economy = combatant.get_economy()
    ensure_available(category, economy)

    slots = None
    if slot_level is not None and combatant.character_id is not None:
        character = db.query(Character).filter(Character.id == combatant.character_id).first()
        if not character:
            raise NotFoundError("Character", combatant.character_id)
        slots = ledger.use_slot(get_spell_slots(character), slot_level)
        character.set_spell_slots(slots)

    economy = consume_action(category, economy, action_id, action_name, selection.details)
    combatant.set_economy(economy)
    taken = economy.actions_taken[-1]

    flush(db)
    description = f"{combatant.name} used {action_name}"
    if selection.details:
        description += f": {selection.details}"
    event = record_event(
        db, session_id, SessionEventType.ACTION_TAKEN,
        description,
        combatant_id=combatant.id,
        user_id=user.id,
        data={
            "action": taken.model_dump(mode="json"),
            "spell_id": spell.id if spell else None,
            "spell_level": spell.level if spell else None,
            "slot_level": slot_level,
            "action_economy": economy.model_dump(mode="json"),
        },
    )
    commit(db)

    logger.info(f"Session {session_id}: {description}")
    return {
        "combatant_id": combatant.id,
        "action": taken,
        "action_economy": economy,
        "spell_slots": slots,
    }, [event]
