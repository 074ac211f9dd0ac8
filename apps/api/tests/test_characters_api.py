"""End-to-end tests for the /api/characters endpoints."""
import pytest

from conftest import full_body


def _count(client):
    return len(client.get("/api/characters").json())


class TestCreateCharacter:

    def test_create_aria(self, client, aria, catalog_ids):
        assert aria["id"] is not None
        assert aria["name"] == "Aria"
        assert aria["species"]["name"] == "Dwarf"
        assert aria["species"]["traits"]
        assert aria["background"]["name"] == "Acolyte"
        assert aria["characterClass"]["name"] == "Fighter"
        assert aria["characterClass"]["hitDie"] == "d10"
        assert aria["strength"] == 16
        assert aria["strengthModifier"] == 3
        assert aria["level"] == 1
        assert aria["dexterity"] == 0
        assert aria["coins"] == '{"platinum":0,"gold":0,"electrum":0,"silver":0,"copper":0}'
        assert aria["items"] == "[]"
        assert aria["details"] == "{}"
        assert aria["skills"] == "[]"
        assert aria["createdAt"]

        fetched = client.get(f"/api/characters/{aria['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["species"]["id"] == catalog_ids["Dwarf"]

    def test_numeric_values_are_accepted(self, client, catalog_ids):
        resp = client.post("/api/characters", json={
            "name": "Bram",
            "speciesId": catalog_ids["Human"],
            "backgroundId": catalog_ids["Criminal"],
            "classId": catalog_ids["Wizard"],
            "intelligence": 17,
        })
        assert resp.status_code == 200
        assert resp.json()["intelligence"] == 17
        assert resp.json()["intelligenceModifier"] == 3

    def test_unknown_species_creates_nothing(self, client, catalog_ids):
        before = _count(client)
        missing = "00000000-0000-0000-0000-000000000000"
        resp = client.post("/api/characters", json={
            "name": "Ghost",
            "speciesId": missing,
            "backgroundId": catalog_ids["Acolyte"],
            "classId": catalog_ids["Fighter"],
        })
        assert resp.status_code == 400
        assert resp.text == f"Species not found with ID: {missing}"
        assert _count(client) == before

    def test_malformed_id_is_a_format_error(self, client, catalog_ids):
        resp = client.post("/api/characters", json={
            "name": "Ghost",
            "speciesId": "not-a-uuid",
            "backgroundId": catalog_ids["Acolyte"],
            "classId": catalog_ids["Fighter"],
        })
        assert resp.status_code == 400
        assert resp.text == "Invalid UUID format"

    @pytest.mark.parametrize("body,message", [
        ({}, "Character name cannot be empty"),
        ({"name": "   "}, "Character name cannot be empty"),
        ({"name": "Nia"}, "Species ID cannot be null"),
        ({"name": "Nia", "speciesId": "x"}, "Background ID cannot be null"),
        ({"name": "Nia", "speciesId": "x", "backgroundId": "y"}, "Class ID cannot be null"),
    ])
    def test_required_fields(self, client, body, message):
        resp = client.post("/api/characters", json=body)
        assert resp.status_code == 400
        assert resp.text == message
        assert resp.headers["content-type"].startswith("text/plain")

    def test_negative_ability_rejected(self, client, catalog_ids):
        before = _count(client)
        resp = client.post("/api/characters", json={
            "name": "Nia",
            "speciesId": catalog_ids["Human"],
            "backgroundId": catalog_ids["Acolyte"],
            "classId": catalog_ids["Fighter"],
            "wisdom": "-2",
        })
        assert resp.status_code == 400
        assert resp.text == "Wisdom cannot be negative"
        assert _count(client) == before


class TestReadCharacters:

    def test_list_contains_sample_and_created(self, client, aria):
        names = [c["name"] for c in client.get("/api/characters").json()]
        assert "Tom(Debug Character)" in names
        assert "Aria" in names

    def test_unknown_id(self, client):
        resp = client.get("/api/characters/999999")
        assert resp.status_code == 404
        assert resp.text == "Character not found"

    def test_non_integer_id(self, client):
        resp = client.get("/api/characters/abc")
        assert resp.status_code == 400

    @pytest.mark.parametrize("method", ["get", "delete"])
    def test_id_wider_than_int64_is_bad_request(self, client, method):
        before = _count(client)
        resp = getattr(client, method)("/api/characters/99999999999999999999")
        assert resp.status_code == 400
        assert resp.headers["content-type"].startswith("text/plain")
        assert _count(client) == before

    def test_id_wider_than_int64_on_patch(self, client):
        resp = client.put("/api/characters/99999999999999999999/skills", json={"skills": "[]"})
        assert resp.status_code == 400

    @pytest.mark.parametrize("character_id", ["0", "-5", str(2**63 - 1)])
    def test_in_range_unknown_id_is_not_found(self, client, character_id):
        resp = client.get(f"/api/characters/{character_id}")
        assert resp.status_code == 404
        assert resp.text == "Character not found"


class TestUpdateCharacter:

    def test_full_update(self, client, aria, catalog_ids):
        body = full_body(
            aria,
            name="Aria the Bold",
            classId=catalog_ids["Wizard"],
            level="5",
            currentHp="30",
            maxHp="40",
            temporaryHp="2",
            speed="25",
            dexterity="14",
            coins='{"gold":10}',
            details='{"alignment":"LG"}',
        )
        resp = client.put(f"/api/characters/{aria['id']}", json=body)
        assert resp.status_code == 200, resp.text
        data = resp.json()
        assert data["name"] == "Aria the Bold"
        assert data["characterClass"]["name"] == "Wizard"
        assert (data["level"], data["currentHp"], data["maxHp"], data["temporaryHp"], data["speed"]) == (5, 30, 40, 2, 25)
        assert data["dexterity"] == 14
        assert data["dexterityModifier"] == 2
        assert data["strength"] == 16
        assert data["coins"] == '{"gold":10}'
        assert data["details"] == '{"alignment":"LG"}'

    def test_negative_strength_leaves_row_unchanged(self, client, aria):
        resp = client.put(f"/api/characters/{aria['id']}", json=full_body(aria, strength="-1", level="7"))
        assert resp.status_code == 400
        assert resp.text == "Strength cannot be negative"

        stored = client.get(f"/api/characters/{aria['id']}").json()
        assert stored["strength"] == 16
        assert stored["level"] == 1

    @pytest.mark.parametrize("level", ["0", "21", "-3"])
    def test_level_out_of_range(self, client, aria, level):
        resp = client.put(f"/api/characters/{aria['id']}", json=full_body(aria, level=level))
        assert resp.status_code == 400
        assert resp.text == "Level must be between 1 and 20"

    def test_level_not_a_number(self, client, aria):
        resp = client.put(f"/api/characters/{aria['id']}", json=full_body(aria, level="five"))
        assert resp.status_code == 400
        assert resp.text == "Invalid level format"

    def test_malformed_hp(self, client, aria):
        resp = client.put(f"/api/characters/{aria['id']}", json=full_body(aria, maxHp="lots"))
        assert resp.status_code == 400
        assert resp.text == "Invalid maximum HP format"

    def test_unknown_class_on_update(self, client, aria):
        missing = "11111111-1111-1111-1111-111111111111"
        resp = client.put(f"/api/characters/{aria['id']}", json=full_body(aria, classId=missing, level="4"))
        assert resp.status_code == 400
        assert resp.text == f"Class not found with ID: {missing}"
        assert client.get(f"/api/characters/{aria['id']}").json()["level"] == 1

    def test_unknown_character(self, client, aria):
        resp = client.put("/api/characters/999999", json=full_body(aria))
        assert resp.status_code == 404


class TestPatchEndpoints:

    def test_inventory(self, client, aria):
        resp = client.put(f"/api/characters/{aria['id']}/inventory", json={
            "coins": '{"platinum":1,"gold":2,"electrum":0,"silver":0,"copper":0}',
            "items": '[{"name":"Rope"}]',
        })
        assert resp.status_code == 200
        assert resp.json()["coins"] == '{"platinum":1,"gold":2,"electrum":0,"silver":0,"copper":0}'
        assert resp.json()["items"] == '[{"name":"Rope"}]'

    def test_inventory_absent_fields_unchanged(self, client, aria):
        resp = client.put(f"/api/characters/{aria['id']}/inventory", json={"items": "[1]"})
        assert resp.json()["coins"] == aria["coins"]
        assert resp.json()["items"] == "[1]"

    def test_details(self, client, aria):
        resp = client.put(f"/api/characters/{aria['id']}/details", json={"details": '{"age":120}'})
        assert resp.status_code == 200
        assert resp.json()["details"] == '{"age":120}'

    @pytest.mark.parametrize("path,key", [
        ("skills", "skills"),
        ("class-actions", "classActions"),
        ("spell-slots", "spellSlots"),
        ("spells", "spells"),
        ("weapons", "weapons"),
    ])
    def test_json_field_replaced(self, client, aria, path, key):
        value = '[{"name":"x","level":1}]'
        resp = client.put(f"/api/characters/{aria['id']}/{path}", json={key: value})
        assert resp.status_code == 200, resp.text
        assert resp.json()[key] == value
        assert client.get(f"/api/characters/{aria['id']}").json()[key] == value

    def test_structured_value_is_stored_as_json_text(self, client, aria):
        resp = client.put(f"/api/characters/{aria['id']}/weapons", json={"weapons": [{"name": "Axe"}]})
        assert resp.status_code == 200
        assert resp.json()["weapons"] == '[{"name": "Axe"}]'

    def test_invalid_skills_left_unchanged(self, client, aria):
        resp = client.put(f"/api/characters/{aria['id']}/skills", json={"skills": "not json"})
        assert resp.status_code == 400
        assert resp.text.startswith("Invalid skills JSON format")
        assert client.get(f"/api/characters/{aria['id']}").json()["skills"] == "[]"

    def test_deeply_nested_skills_left_unchanged(self, client, aria):
        resp = client.put(f"/api/characters/{aria['id']}/skills", json={"skills": "[" * 100000})
        assert resp.status_code == 400
        assert resp.text.startswith("Invalid skills JSON format")
        assert client.get(f"/api/characters/{aria['id']}").json()["skills"] == "[]"

    @pytest.mark.parametrize("path", ["inventory", "details", "skills", "spells"])
    def test_unknown_character(self, client, path):
        resp = client.put(f"/api/characters/999999/{path}", json={})
        assert resp.status_code == 404


class TestDeleteCharacter:

    def test_delete(self, client, aria):
        resp = client.delete(f"/api/characters/{aria['id']}")
        assert resp.status_code == 200
        assert resp.content == b""
        assert client.get(f"/api/characters/{aria['id']}").status_code == 404
        # catalog rows are references only
        assert len(client.get("/api/species").json()) == 5

    def test_unknown_id_leaves_count(self, client, aria):
        before = _count(client)
        resp = client.delete("/api/characters/999999")
        assert resp.status_code == 404
        assert _count(client) == before


class TestDebugCharacter:

    def test_creates_named_debug_character(self, client):
        before = _count(client)
        resp = client.post("/api/debug/character")
        assert resp.status_code == 200
        data = resp.json()
        assert data["name"].startswith("Debug Character ")
        assert data["name"][len("Debug Character "):].isdigit()
        assert data["level"] == 3
        assert (data["currentHp"], data["maxHp"], data["speed"]) == (25, 25, 30)
        assert data["strengthModifier"] == 3
        assert data["species"] is not None
        assert data["background"] is not None
        assert data["characterClass"] is not None
        assert "Athletics" in data["skills"]
        assert _count(client) == before + 1
