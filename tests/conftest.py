import os

# Must be set before the app (and its engine) is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REALTIME_ENABLED"] = "true"

import pytest
from fastapi.testclient import TestClient

from mythweaver.database import Base, engine
from mythweaver.main import app


@pytest.fixture(autouse=True)
def fresh_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user(client):
    def _make(name: str) -> dict:
        user = client.post("/users/", json={"name": name}).json()
        user["headers"] = {"X-User-Id": str(user["id"])}
        return user
    return _make


@pytest.fixture
def dm(make_user):
    return make_user("Dungeon Master")


@pytest.fixture
def player(make_user):
    return make_user("Player One")


@pytest.fixture
def other_player(make_user):
    return make_user("Player Two")


@pytest.fixture
def outsider(make_user):
    return make_user("Stranger")


@pytest.fixture
def world(client, dm):
    return client.post("/worlds/", json={"name": "Sword Coast"}, headers=dm["headers"]).json()


@pytest.fixture
def make_character(client, world):
    """Create a character for `owner` and bring it into the world."""
    def _make(owner: dict, name: str = "Aria", character_class: str = "fighter", join: bool = True, **fields) -> dict:
        payload = {"name": name, "character_class": character_class, **fields}
        character = client.post("/characters/", json=payload, headers=owner["headers"]).json()
        if join:
            client.post(
                f"/worlds/{world['id']}/join",
                json={"character_id": character["id"]},
                headers=owner["headers"],
            )
        return client.get(f"/characters/{character['id']}").json()
    return _make


@pytest.fixture
def game_session(client, dm, world):
    return client.post(
        "/sessions/", json={"world_id": world["id"], "name": "Session One"}, headers=dm["headers"]
    ).json()


@pytest.fixture
def make_template(client, dm):
    def _make(name: str = "Goblin", max_hp: int = 7, armor_class: int = 15, dexterity: int = 14) -> dict:
        return client.post("/enemies/", json={
            "name": name,
            "max_hp": max_hp,
            "armor_class": armor_class,
            "dexterity": dexterity,
        }, headers=dm["headers"]).json()
    return _make


@pytest.fixture
def make_spell(client, dm):
    def _make(name: str = "Magic Missile", level: int = 1, casting_time: str = "action") -> dict:
        return client.post("/spells/", json={
            "name": name,
            "level": level,
            "casting_time": casting_time,
        }, headers=dm["headers"]).json()
    return _make


@pytest.fixture
def add_combatants(client, dm, game_session):
    """Add combatants as the DM. Entries are (source, initiative) pairs."""
    def _add(*entries) -> list[dict]:
        response = client.post(f"/sessions/{game_session['id']}/combat", json={
            "combatants": [{"source": source, "initiative": initiative} for source, initiative in entries],
        }, headers=dm["headers"])
        assert response.status_code == 201, response.text
        return response.json()
    return _add


def character_source(character: dict) -> dict:
    return {"kind": "character", "character_id": character["id"]}


def enemy_source(template: dict, custom_name: str | None = None) -> dict:
    source = {"kind": "enemy", "template_id": template["id"]}
    if custom_name:
        source["custom_name"] = custom_name
    return source


@pytest.fixture
def sources():
    """Builders for combatant source payloads."""
    class Sources:
        character = staticmethod(character_source)
        enemy = staticmethod(enemy_source)
    return Sources
