from datetime import datetime, timezone

import pytest

from mythweaver.combat.catalog import COMBAT_ACTIONS, actions_by_category, get_action, is_action_available
from mythweaver.combat.economy import ActionEconomy, consume_action, default_economy, ensure_available
from mythweaver.core.enums import ActionCategory
from mythweaver.core.exceptions import NotFoundError, ResourceExhaustedError


class TestCatalog:
    def test_every_category_is_present(self):
        grouped = actions_by_category()
        assert set(grouped) == set(ActionCategory)
        assert sum(len(actions) for actions in grouped.values()) == len(COMBAT_ACTIONS)

    def test_catalog_order_is_preserved(self):
        grouped = actions_by_category()
        assert [a.id for a in grouped[ActionCategory.ACTION]][:3] == ["attack", "cast-spell", "dash"]
        assert [a.id for a in grouped[ActionCategory.MOVEMENT]] == ["move"]
        assert [a.id for a in grouped[ActionCategory.REACTION]] == [
            "opportunity-attack", "reaction-spell", "other-reaction",
        ]

    def test_get_action(self):
        action = get_action("dodge")
        assert action.name == "Dodge"
        assert action.category == ActionCategory.ACTION

    def test_unknown_action(self):
        with pytest.raises(NotFoundError):
            get_action("fireball-everything")

    def test_ids_are_unique(self):
        ids = [a.id for a in COMBAT_ACTIONS]
        assert len(ids) == len(set(ids))


class TestAvailability:
    def test_fresh_economy_has_everything(self):
        economy = default_economy()
        for category in ActionCategory:
            assert is_action_available(category, economy)

    def test_used_flags_block_their_category(self):
        economy = ActionEconomy(used_action=True, used_reaction=True)
        assert not is_action_available(ActionCategory.ACTION, economy)
        assert not is_action_available(ActionCategory.REACTION, economy)
        assert is_action_available(ActionCategory.BONUS_ACTION, economy)
        assert is_action_available(ActionCategory.MOVEMENT, economy)

    def test_free_is_always_available(self):
        economy = ActionEconomy(used_action=True, used_bonus_action=True, used_reaction=True, used_movement=True)
        assert is_action_available(ActionCategory.FREE, economy)


class TestConsumeAction:
    def test_sets_flag_and_logs(self):
        economy = consume_action(ActionCategory.BONUS_ACTION, default_economy(), "bonus-attack", "Bonus Attack")
        assert economy.used_bonus_action
        assert not economy.used_action
        assert len(economy.actions_taken) == 1
        assert economy.actions_taken[0].action_id == "bonus-attack"
        assert economy.actions_taken[0].category == ActionCategory.BONUS_ACTION

    def test_input_is_not_mutated(self):
        original = default_economy()
        consume_action(ActionCategory.ACTION, original, "attack", "Attack")
        assert not original.used_action
        assert original.actions_taken == []

    def test_consuming_twice_keeps_flag_and_logs_both(self):
        once = consume_action(ActionCategory.ACTION, default_economy(), "attack", "Attack")
        twice = consume_action(ActionCategory.ACTION, once, "dodge", "Dodge")
        assert twice.used_action
        assert [t.action_id for t in twice.actions_taken] == ["attack", "dodge"]

    def test_free_sets_no_flag(self):
        economy = consume_action(ActionCategory.FREE, default_economy(), "communicate", "Communicate", details="Run!")
        assert not any([economy.used_action, economy.used_bonus_action, economy.used_reaction, economy.used_movement])
        assert economy.actions_taken[0].details == "Run!"

    def test_timestamp_can_be_given(self):
        when = datetime(2024, 1, 1, tzinfo=timezone.utc)
        economy = consume_action(ActionCategory.MOVEMENT, default_economy(), "move", "Move", timestamp=when)
        assert economy.actions_taken[0].timestamp == when


class TestEnsureAvailable:
    def test_passes_when_unused(self):
        ensure_available(ActionCategory.ACTION, default_economy())

    def test_rejects_used_bonus_action(self):
        economy = ActionEconomy(used_bonus_action=True)
        with pytest.raises(ResourceExhaustedError) as exc:
            ensure_available(ActionCategory.BONUS_ACTION, economy)
        assert exc.value.detail == "You have already used your bonus action this turn"

    def test_free_never_rejected(self):
        ensure_available(ActionCategory.FREE, ActionEconomy(used_action=True))
