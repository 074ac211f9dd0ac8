"""Shared fixtures: every test gets its own sqlite file."""
import pytest
from fastapi.testclient import TestClient

from charsheet.core.db import dispose_engine, init_db, new_session


@pytest.fixture
def database_url(tmp_path, monkeypatch):
    """Point DATABASE_URL at a throwaway sqlite file and reset the cached engine."""
    url = "sqlite:///" + (tmp_path / "test.db").as_posix()
    monkeypatch.setenv("DATABASE_URL", url)
    dispose_engine()
    yield url
    dispose_engine()


@pytest.fixture
def session(database_url):
    """A session on an empty schema (nothing seeded)."""
    init_db()
    with new_session() as s:
        yield s


@pytest.fixture
def client(database_url):
    """App client; startup creates the schema and seeds the catalogs."""
    from charsheet.main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def catalog_ids(client):
    """name -> id for every seeded species, background and class."""
    ids = {}
    for path in ("/api/species", "/api/backgrounds", "/api/classes"):
        for entry in client.get(path).json():
            ids[entry["name"]] = entry["id"]
    return ids


@pytest.fixture
def aria(client, catalog_ids):
    """A created Dwarf / Acolyte / Fighter character."""
    resp = client.post(
        "/api/characters",
        json={
            "name": "Aria",
            "speciesId": catalog_ids["Dwarf"],
            "backgroundId": catalog_ids["Acolyte"],
            "classId": catalog_ids["Fighter"],
            "strength": "16",
        },
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


def full_body(character, **overrides):
    """PUT body carrying the required fields of an existing character."""
    body = {
        "name": character["name"],
        "speciesId": character["species"]["id"],
        "backgroundId": character["background"]["id"],
        "classId": character["characterClass"]["id"],
    }
    body.update(overrides)
    return body
