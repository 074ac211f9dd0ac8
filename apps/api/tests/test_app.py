"""Tests for app wiring: catalog endpoints, CORS, request ids, error rendering, health."""
from charsheet.modules.catalog import definitions


class TestCatalogEndpoints:

    def test_species_with_nested_traits(self, client):
        resp = client.get("/api/species")
        assert resp.status_code == 200
        by_name = {s["name"]: s for s in resp.json()}
        assert set(by_name) == set(definitions.list_names("species"))

        dwarf = by_name["Dwarf"]
        assert [t["title"] for t in dwarf["traits"]] == [t for t, _ in definitions.SPECIES_TRAITS["Dwarf"]]
        assert all(t["speciesId"] == dwarf["id"] for t in dwarf["traits"])

    def test_backgrounds_with_nested_features(self, client):
        by_name = {b["name"]: b for b in client.get("/api/backgrounds").json()}
        assert set(by_name) == {"Acolyte", "Criminal"}
        acolyte = by_name["Acolyte"]
        assert "description" in acolyte
        assert all(f["backgroundId"] == acolyte["id"] for f in acolyte["features"])

    def test_classes_with_levelled_features(self, client):
        by_name = {c["name"]: c for c in client.get("/api/classes").json()}
        fighter = by_name["Fighter"]
        assert fighter["hitDie"] == "d10"
        assert by_name["Wizard"]["hitDie"] == "d6"
        expected = [(t, lvl) for t, _, lvl in definitions.CLASS_FEATURES["Fighter"]]
        assert [(f["title"], f["level"]) for f in fighter["features"]] == expected
        assert all(f["classId"] == fighter["id"] for f in fighter["features"])

    def test_restart_does_not_reseed(self, database_url):
        from fastapi.testclient import TestClient
        from charsheet.core.db import dispose_engine
        from charsheet.main import app

        with TestClient(app) as c:
            first = c.get("/api/species").json()
        dispose_engine()
        with TestClient(app) as c:
            second = c.get("/api/species").json()
            characters = c.get("/api/characters").json()

        assert sorted(s["id"] for s in first) == sorted(s["id"] for s in second)
        assert len(characters) == 1


class TestCors:

    def test_simple_request_allows_any_origin(self, client):
        resp = client.get("/api/species", headers={"Origin": "http://localhost:3000"})
        assert resp.headers["access-control-allow-origin"] == "*"

    def test_preflight(self, client):
        resp = client.options(
            "/api/characters",
            headers={
                "Origin": "http://example.com",
                "Access-Control-Request-Method": "PUT",
                "Access-Control-Request-Headers": "content-type",
            },
        )
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == "*"
        assert "PUT" in resp.headers["access-control-allow-methods"]


class TestRequestId:

    def test_generated_when_missing(self, client):
        resp = client.get("/api/classes")
        assert resp.headers.get("X-Request-Id")

    def test_echoed_back(self, client):
        resp = client.get("/api/classes", headers={"X-Request-Id": "abc-123"})
        assert resp.headers["X-Request-Id"] == "abc-123"

    def test_present_on_errors(self, client):
        resp = client.get("/api/characters/999999", headers={"X-Request-Id": "err-1"})
        assert resp.status_code == 404
        assert resp.headers["X-Request-Id"] == "err-1"

    def test_logged_on_service_events(self, client, capsys):
        client.get("/api/characters/999999", headers={"X-Request-Id": "trace-me"})
        out = capsys.readouterr().out
        assert '"event": "character.rejected"' in out
        assert '"request_id": "trace-me"' in out


class TestErrorRendering:

    def test_non_object_body_is_bad_request(self, client):
        resp = client.post("/api/characters", json=["not", "an", "object"])
        assert resp.status_code == 400
        assert resp.headers["content-type"].startswith("text/plain")

    def test_unknown_route_is_plain_text_404(self, client):
        resp = client.get("/api/nowhere")
        assert resp.status_code == 404
        assert resp.headers["content-type"].startswith("text/plain")

    def test_store_failure_is_500_with_action(self, client, aria, monkeypatch):
        from charsheet.core.repository import Repository

        def broken(self, entity):
            raise RuntimeError("disk full")

        monkeypatch.setattr(Repository, "save", broken)
        resp = client.put(f"/api/characters/{aria['id']}/details", json={"details": "{}"})
        assert resp.status_code == 500
        assert resp.text == "Error updating character details: disk full"


class TestHealth:

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["version"]
        assert data["db"]["status"] == "ok"
        assert data["db"]["kind"] == "sqlite"
        assert data["last_error_summary"] is None
