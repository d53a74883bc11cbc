import pytest


@pytest.fixture
def combat_url(game_session):
    return f"/sessions/{game_session['id']}/combat"


@pytest.fixture
def party(player, other_player, make_character):
    """A fighter for each player."""
    return (
        make_character(player, name="Bruenor", max_hp=30),
        make_character(other_player, name="Catti-brie", max_hp=24),
    )


@pytest.fixture
def encounter(party, make_template, add_combatants, sources):
    """Bruenor (20), Goblin (15), Catti-brie (5)."""
    goblin = make_template()
    return add_combatants(
        (sources.character(party[0]), 20),
        (sources.enemy(goblin), 15),
        (sources.character(party[1]), 5),
    )


@pytest.fixture
def started(client, dm, combat_url, encounter):
    response = client.post(f"{combat_url}/start", headers=dm["headers"])
    assert response.status_code == 200
    return encounter


def act(client, url, user, combatant, **selection):
    selection.setdefault("type", "catalog")
    return client.post(f"{url}/actions", json={
        "combatant_id": combatant["id"],
        "selection": selection,
    }, headers=user["headers"])


class TestActionCatalogEndpoint:
    def test_list_actions(self, client):
        response = client.get("/combat/actions")
        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"action", "bonus_action", "reaction", "movement", "free"}
        assert data["movement"][0]["id"] == "move"


class TestAddCombatants:
    def test_add_character_and_enemy(self, client, dm, combat_url, encounter):
        assert [c["name"] for c in encounter] == ["Bruenor", "Goblin", "Catti-brie"]
        goblin = encounter[1]
        assert goblin["combatant_type"] == "enemy"
        assert goblin["current_hp"] == 7
        assert goblin["armor_class"] == 15

        state = client.get(combat_url, headers=dm["headers"]).json()
        assert state["combat_active"] is False
        assert [c["position"] for c in state["combatants"]] == [20, 15, 5]

    def test_custom_name(self, make_template, add_combatants, sources):
        ogre = make_template(name="Ogre", max_hp=59)
        added = add_combatants((sources.enemy(ogre, custom_name="Grug"), 8))
        assert added[0]["name"] == "Grug"
        assert added[0]["max_hp"] == 59

    def test_initiative_rolled_when_omitted(self, client, dm, combat_url, make_template):
        template = make_template(dexterity=30)  # +10
        response = client.post(combat_url, json={
            "combatants": [{"source": {"kind": "enemy", "template_id": template["id"]}}],
        }, headers=dm["headers"])
        assert response.status_code == 201
        assert 11 <= response.json()[0]["position"] <= 30

    def test_initiative_out_of_range(self, client, dm, combat_url, make_template):
        template = make_template()
        response = client.post(combat_url, json={
            "combatants": [{"source": {"kind": "enemy", "template_id": template["id"]}, "initiative": 31}],
        }, headers=dm["headers"])
        assert response.status_code == 422

    def test_batch_is_all_or_nothing(self, client, dm, combat_url, make_template):
        template = make_template()
        response = client.post(combat_url, json={
            "combatants": [
                {"source": {"kind": "enemy", "template_id": template["id"]}, "initiative": 10},
                {"source": {"kind": "enemy", "template_id": 9999}, "initiative": 12},
            ],
        }, headers=dm["headers"])
        assert response.status_code == 404
        assert client.get(combat_url, headers=dm["headers"]).json()["combatants"] == []

    def test_same_character_twice_rejected(self, client, dm, combat_url, party, add_combatants, sources):
        add_combatants((sources.character(party[0]), 10))
        response = client.post(combat_url, json={
            "combatants": [{"source": sources.character(party[0]), "initiative": 12}],
        }, headers=dm["headers"])
        assert response.status_code == 422

    def test_player_cannot_add(self, client, player, combat_url, make_template):
        template = make_template()
        response = client.post(combat_url, json={
            "combatants": [{"source": {"kind": "enemy", "template_id": template["id"]}, "initiative": 10}],
        }, headers=player["headers"])
        assert response.status_code == 403

    def test_empty_batch_rejected(self, client, dm, combat_url):
        response = client.post(combat_url, json={"combatants": []}, headers=dm["headers"])
        assert response.status_code == 422

    def test_adding_mid_combat_keeps_pointer(self, client, dm, combat_url, started, make_template, add_combatants, sources):
        add_combatants((sources.enemy(make_template(name="Wolf")), 25))
        state = client.get(combat_url, headers=dm["headers"]).json()
        assert state["current_turn"] == started[0]["id"]
        assert state["combatants"][0]["name"] == "Wolf"


class TestTurnSequencing:
    def test_start_combat(self, client, dm, combat_url, encounter):
        response = client.post(f"{combat_url}/start", headers=dm["headers"])
        data = response.json()
        assert data["combat_active"] is True
        assert data["round"] == 1
        assert data["current_turn"] == encounter[0]["id"]

    def test_cannot_start_empty(self, client, dm, combat_url):
        response = client.post(f"{combat_url}/start", headers=dm["headers"])
        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot start combat with no combatants"

    def test_cannot_start_twice(self, client, dm, combat_url, started):
        response = client.post(f"{combat_url}/start", headers=dm["headers"])
        assert response.status_code == 400

    def test_wraparound(self, client, dm, combat_url, started):
        turns = []
        for _ in range(4):
            data = client.post(f"{combat_url}/turn", headers=dm["headers"]).json()
            turns.append((data["current_turn"], data["round"]))
        ids = [c["id"] for c in started]
        assert turns == [(ids[1], 1), (ids[2], 1), (ids[0], 2), (ids[1], 2)]

    def test_advance_without_combat(self, client, dm, combat_url, encounter):
        response = client.post(f"{combat_url}/turn", headers=dm["headers"])
        assert response.status_code == 400
        assert response.json()["detail"] == "No active combat"

    def test_closed_session_cannot_start(self, client, dm, combat_url, game_session, encounter):
        client.put(f"/sessions/{game_session['id']}", json={"is_active": False}, headers=dm["headers"])
        response = client.post(f"{combat_url}/start", headers=dm["headers"])
        assert response.status_code == 422
        assert response.json()["detail"] == "This session has ended"

    def test_closed_session_cannot_advance(self, client, dm, combat_url, game_session, started):
        client.put(f"/sessions/{game_session['id']}", json={"is_active": False}, headers=dm["headers"])
        response = client.post(f"{combat_url}/turn", headers=dm["headers"])
        assert response.status_code == 422
        assert response.json()["detail"] == "This session has ended"

    def test_player_cannot_advance(self, client, player, combat_url, started):
        response = client.post(f"{combat_url}/turn", headers=player["headers"])
        assert response.status_code == 403

    def test_turn_reset(self, client, dm, player, combat_url, started):
        bruenor = started[0]
        act(client, combat_url, player, bruenor, action_id="attack")
        act(client, combat_url, player, bruenor, action_id="move")

        for _ in range(3):
            client.post(f"{combat_url}/turn", headers=dm["headers"])

        state = client.get(combat_url, headers=dm["headers"]).json()
        economy = state["combatants"][0]["action_economy"]
        assert state["current_turn"] == bruenor["id"]
        assert economy["used_action"] is False
        assert economy["used_movement"] is False
        assert economy["actions_taken"] == []

    def test_end_combat_clears_everything(self, client, dm, combat_url, started):
        client.post(f"{combat_url}/turn", headers=dm["headers"])
        response = client.delete(combat_url, headers=dm["headers"])
        assert response.status_code == 200
        state = client.get(combat_url, headers=dm["headers"]).json()
        assert state == {
            "session_id": state["session_id"],
            "combat_active": False,
            "round": 1,
            "current_turn": None,
            "combatants": [],
        }

    def test_end_without_combat(self, client, dm, combat_url):
        response = client.delete(combat_url, headers=dm["headers"])
        assert response.status_code == 400


class TestRemoveCombatant:
    def test_remove_current_passes_turn(self, client, dm, combat_url, started):
        client.post(f"{combat_url}/turn", headers=dm["headers"])  # goblin's turn
        response = client.delete(f"{combat_url}/{started[1]['id']}", headers=dm["headers"])
        data = response.json()
        assert data["current_turn"] == started[2]["id"]
        assert data["round"] == 1
        assert len(data["combatants"]) == 2

    def test_remove_last_in_order_wraps_without_new_round(self, client, dm, combat_url, started):
        client.post(f"{combat_url}/turn", headers=dm["headers"])
        client.post(f"{combat_url}/turn", headers=dm["headers"])  # Catti-brie
        data = client.delete(f"{combat_url}/{started[2]['id']}", headers=dm["headers"]).json()
        assert data["current_turn"] == started[0]["id"]
        assert data["round"] == 1

    def test_remove_other_keeps_pointer(self, client, dm, combat_url, started):
        data = client.delete(f"{combat_url}/{started[2]['id']}", headers=dm["headers"]).json()
        assert data["current_turn"] == started[0]["id"]

    def test_remove_everyone_ends_combat(self, client, dm, combat_url, started):
        for combatant in started:
            data = client.delete(f"{combat_url}/{combatant['id']}", headers=dm["headers"]).json()
        assert data["combat_active"] is False
        assert data["current_turn"] is None

    def test_remove_unknown(self, client, dm, combat_url, started):
        response = client.delete(f"{combat_url}/9999", headers=dm["headers"])
        assert response.status_code == 404


class TestUpdateCombatant:
    def test_damage_is_clamped_at_zero(self, client, dm, combat_url, started):
        goblin = started[1]
        response = client.patch(f"{combat_url}/{goblin['id']}", json={"hp_delta": -1000}, headers=dm["headers"])
        assert response.status_code == 200
        assert response.json()["current_hp"] == 0

        state = client.get(combat_url, headers=dm["headers"]).json()
        assert len(state["combatants"]) == 3

    def test_healing_is_clamped_at_max(self, client, dm, combat_url, started):
        goblin = started[1]
        client.patch(f"{combat_url}/{goblin['id']}", json={"hp_delta": -5}, headers=dm["headers"])
        response = client.patch(f"{combat_url}/{goblin['id']}", json={"hp_delta": 50}, headers=dm["headers"])
        assert response.json()["current_hp"] == 7

    def test_negative_absolute_hp_rejected(self, client, dm, combat_url, started):
        response = client.patch(f"{combat_url}/{started[1]['id']}", json={"current_hp": -1}, headers=dm["headers"])
        assert response.status_code == 422

    def test_delta_and_absolute_together_rejected(self, client, dm, combat_url, started):
        response = client.patch(
            f"{combat_url}/{started[1]['id']}", json={"current_hp": 3, "hp_delta": -1}, headers=dm["headers"]
        )
        assert response.status_code == 422

    def test_character_hp_syncs_back(self, client, player, combat_url, party, started):
        response = client.patch(f"{combat_url}/{started[0]['id']}", json={"current_hp": 12}, headers=player["headers"])
        assert response.status_code == 200
        assert client.get(f"/characters/{party[0]['id']}").json()["current_hp"] == 12

    def test_player_cannot_change_enemy_hp(self, client, player, combat_url, started):
        response = client.patch(f"{combat_url}/{started[1]['id']}", json={"hp_delta": -3}, headers=player["headers"])
        assert response.status_code == 403

    def test_player_cannot_change_other_players_hp(self, client, player, combat_url, started):
        response = client.patch(f"{combat_url}/{started[2]['id']}", json={"hp_delta": -3}, headers=player["headers"])
        assert response.status_code == 403

    def test_status_effects_are_dm_only(self, client, dm, player, combat_url, started):
        effects = [{"name": "Poisoned", "duration": 3}]
        response = client.patch(
            f"{combat_url}/{started[0]['id']}", json={"status_effects": effects}, headers=player["headers"]
        )
        assert response.status_code == 403

        response = client.patch(f"{combat_url}/{started[0]['id']}", json={"status_effects": effects}, headers=dm["headers"])
        assert response.json()["status_effects"] == [{"name": "Poisoned", "duration": 3, "description": None}]

    def test_empty_update_rejected(self, client, dm, combat_url, started):
        response = client.patch(f"{combat_url}/{started[0]['id']}", json={}, headers=dm["headers"])
        assert response.status_code == 422

    def test_reposition_reorders(self, client, dm, combat_url, started):
        client.patch(f"{combat_url}/{started[2]['id']}", json={"position": 30}, headers=dm["headers"])
        state = client.get(combat_url, headers=dm["headers"]).json()
        assert [c["name"] for c in state["combatants"]] == ["Catti-brie", "Bruenor", "Goblin"]
        assert state["current_turn"] == started[0]["id"]


class TestHiddenEnemyHp:
    def test_players_do_not_see_enemy_hp(self, client, dm, player, combat_url, started):
        player_view = client.get(combat_url, headers=player["headers"]).json()["combatants"]
        assert player_view[1]["current_hp"] is None
        assert player_view[1]["max_hp"] is None
        assert player_view[0]["current_hp"] == 30

        dm_view = client.get(combat_url, headers=dm["headers"]).json()["combatants"]
        assert dm_view[1]["current_hp"] == 7

    def test_revealed_enemy_hp(self, client, dm, player, combat_url, started):
        client.patch(f"{combat_url}/{started[1]['id']}", json={"show_hp_to_players": True}, headers=dm["headers"])
        player_view = client.get(combat_url, headers=player["headers"]).json()["combatants"]
        assert player_view[1]["current_hp"] == 7

    def test_outsider_cannot_view(self, client, outsider, combat_url, started):
        response = client.get(combat_url, headers=outsider["headers"])
        assert response.status_code == 403


class TestTakeAction:
    def test_take_action_on_turn(self, client, player, combat_url, started):
        response = act(client, combat_url, player, started[0], action_id="attack", details="Axe vs goblin")
        assert response.status_code == 200
        data = response.json()
        assert data["action"]["action_name"] == "Attack"
        assert data["action"]["details"] == "Axe vs goblin"
        assert data["action_economy"]["used_action"] is True
        assert data["spell_slots"] is None

    def test_second_action_rejected(self, client, player, combat_url, started):
        act(client, combat_url, player, started[0], action_id="attack")
        response = act(client, combat_url, player, started[0], action_id="dodge")
        assert response.status_code == 400
        assert response.json()["detail"] == "You have already used your action this turn"

        state = client.get(combat_url, headers=player["headers"]).json()
        assert len(state["combatants"][0]["action_economy"]["actions_taken"]) == 1

    def test_free_actions_are_unlimited(self, client, player, combat_url, started):
        for _ in range(3):
            assert act(client, combat_url, player, started[0], action_id="communicate").status_code == 200

    def test_off_turn_action_rejected(self, client, other_player, combat_url, started):
        response = act(client, combat_url, other_player, started[2], action_id="attack")
        assert response.status_code == 400
        assert response.json()["detail"] == "It is not Catti-brie's turn"

    def test_reaction_off_turn(self, client, other_player, combat_url, started):
        response = act(client, combat_url, other_player, started[2], action_id="opportunity-attack")
        assert response.status_code == 200
        assert response.json()["action_economy"]["used_reaction"] is True

        again = act(client, combat_url, other_player, started[2], action_id="other-reaction")
        assert again.status_code == 400

    def test_action_needs_active_combat(self, client, player, combat_url, encounter):
        response = act(client, combat_url, player, encounter[0], action_id="opportunity-attack")
        assert response.status_code == 400
        assert response.json()["detail"] == "No active combat"

    def test_cannot_act_for_someone_else(self, client, player, combat_url, started):
        assert act(client, combat_url, player, started[1], action_id="opportunity-attack").status_code == 403
        assert act(client, combat_url, player, started[2], action_id="opportunity-attack").status_code == 403

    def test_dm_acts_for_enemies(self, client, dm, combat_url, started):
        client.post(f"{combat_url}/turn", headers=dm["headers"])
        assert act(client, combat_url, dm, started[1], action_id="attack").status_code == 200

    def test_unknown_action(self, client, player, combat_url, started):
        assert act(client, combat_url, player, started[0], action_id="teleport").status_code == 404

    def test_action_log(self, client, player, other_player, combat_url, started):
        act(client, combat_url, player, started[0], action_id="attack")
        act(client, combat_url, other_player, started[2], action_id="opportunity-attack")

        log = client.get(f"{combat_url}/log", headers=player["headers"]).json()
        assert [e["event_type"] for e in log] == ["action_taken", "action_taken"]
        assert log[0]["data"]["action"]["action_id"] == "attack"
        assert log[1]["combatant_id"] == started[2]["id"]


class TestSpellcasting:
    @pytest.fixture
    def wizard_fight(self, client, dm, player, make_character, make_template, add_combatants, sources, combat_url):
        wizard = make_character(player, name="Elminster", character_class="wizard", level=1)
        added = add_combatants(
            (sources.character(wizard), 20),
            (sources.enemy(make_template()), 10),
        )
        client.post(f"{combat_url}/start", headers=dm["headers"])
        return wizard, added[0]

    def test_spell_spends_slot(self, client, player, combat_url, make_spell, wizard_fight):
        wizard, combatant = wizard_fight
        spell = make_spell()
        response = act(client, combat_url, player, combatant, type="spell", spell_id=spell["id"])
        assert response.status_code == 200
        data = response.json()
        assert data["action"]["action_name"] == "Cast Magic Missile"
        assert data["spell_slots"]["level1"] == {"used": 1, "max": 2}
        slots = client.get(f"/characters/{wizard['id']}/spell-slots").json()["spell_slots"]
        assert slots["level1"] == {"used": 1, "max": 2}

    def test_exhausted_slots_reject_without_spending_action(self, client, dm, player, combat_url, make_spell, wizard_fight):
        wizard, combatant = wizard_fight
        url = f"/characters/{wizard['id']}/spell-slots"
        client.patch(url, json={"action": "set", "level": 1, "used": 2}, headers=player["headers"])

        response = act(client, combat_url, player, combatant, type="spell", spell_id=make_spell()["id"])
        assert response.status_code == 400
        assert response.json()["detail"] == "No level 1 spell slots available"

        state = client.get(combat_url, headers=dm["headers"]).json()
        assert state["combatants"][0]["action_economy"]["used_action"] is False
        assert client.get(url).json()["spell_slots"]["level1"] == {"used": 2, "max": 2}

    def test_cantrip_spends_no_slot(self, client, player, combat_url, make_spell, wizard_fight):
        _, combatant = wizard_fight
        cantrip = make_spell(name="Fire Bolt", level=0)
        response = act(client, combat_url, player, combatant, type="spell", spell_id=cantrip["id"])
        assert response.status_code == 200
        assert response.json()["spell_slots"] is None

    def test_bonus_action_spell_uses_bonus_action(self, client, player, combat_url, make_spell, wizard_fight):
        _, combatant = wizard_fight
        spell = make_spell(name="Healing Word", casting_time="bonus_action")
        economy = act(client, combat_url, player, combatant, type="spell", spell_id=spell["id"]).json()["action_economy"]
        assert economy["used_bonus_action"] is True
        assert economy["used_action"] is False

    def test_slot_below_spell_level_rejected(self, client, player, combat_url, make_spell, wizard_fight):
        _, combatant = wizard_fight
        spell = make_spell(name="Scorching Ray", level=2)
        response = act(client, combat_url, player, combatant, type="spell", spell_id=spell["id"], slot_level=1)
        assert response.status_code == 422

    def test_upcast_without_slots(self, client, player, combat_url, make_spell, wizard_fight):
        _, combatant = wizard_fight
        response = act(client, combat_url, player, combatant, type="spell", spell_id=make_spell()["id"], slot_level=3)
        assert response.status_code == 400
        assert response.json()["detail"] == "No level 3 spell slots available"

    def test_warlock_casts_from_hand_set_slots(self, client, dm, player, combat_url, make_character, make_spell, add_combatants, sources):
        warlock = make_character(player, name="Hex", character_class="warlock", level=5)
        client.patch(
            f"/characters/{warlock['id']}/spell-slots",
            json={"action": "set", "level": 3, "max": 2},
            headers=player["headers"],
        )
        combatant = add_combatants((sources.character(warlock), 20))[0]
        client.post(f"{combat_url}/start", headers=dm["headers"])

        spell = make_spell(name="Hunger of Hadar", level=3)
        response = act(client, combat_url, player, combatant, type="spell", spell_id=spell["id"])
        assert response.status_code == 200
        assert response.json()["spell_slots"]["level3"] == {"used": 1, "max": 2}
