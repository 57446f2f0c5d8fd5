from __future__ import annotations

import uuid
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from chirpy.api import create_app
from chirpy.config import Platform, Settings
from chirpy.database import Database


@pytest.fixture()
def database(tmp_path: Path) -> Database:
    db = Database(tmp_path / "chirpy.sqlite3")
    db.initialize()
    return db


@pytest.fixture()
def client(tmp_path: Path, database: Database):
    settings = Settings(database_path=database.path, platform=Platform.DEV, static_dir=tmp_path)
    with TestClient(create_app(database=database, settings=settings)) as test_client:
        yield test_client


@pytest.fixture()
def user_id(client: TestClient) -> str:
    response = client.post("/api/users", json={"email": "author@example.com", "password": "pw"})
    assert response.status_code == 201, response.text
    return response.json()["id"]


def test_create_chirp_masks_banned_words(client: TestClient, user_id: str) -> None:
    response = client.post(
        "/api/chirps",
        json={"body": "This is a kerfuffle opinion I need to share with the world", "user_id": user_id},
    )

    assert response.status_code == 201, response.text
    payload = response.json()
    assert payload["body"] == "This is a **** opinion I need to share with the world"
    assert payload["user_id"] == user_id
    assert uuid.UUID(payload["id"])


def test_overlong_chirp_is_rejected_and_not_saved(client: TestClient, user_id: str) -> None:
    response = client.post("/api/chirps", json={"body": "a" * 141, "user_id": user_id})

    assert response.status_code == 400
    assert response.json() == {"error": "Chirp is too long"}
    assert client.get("/api/chirps").json() == []


def test_length_limit_applies_after_masking(client: TestClient, user_id: str) -> None:
    body = "kerfuffle " + "b" * 132
    assert len(body) == 142

    response = client.post("/api/chirps", json={"body": body, "user_id": user_id})

    assert response.status_code == 201, response.text
    assert response.json()["body"] == "**** " + "b" * 132


def test_list_chirps_empty(client: TestClient) -> None:
    response = client.get("/api/chirps")
    assert response.status_code == 200
    assert response.json() == []


def test_list_chirps_in_creation_order(client: TestClient, user_id: str) -> None:
    bodies = ["first", "second", "third"]
    for body in bodies:
        assert client.post("/api/chirps", json={"body": body, "user_id": user_id}).status_code == 201

    listed = client.get("/api/chirps").json()
    assert [chirp["body"] for chirp in listed] == bodies


def test_get_chirp_by_id(client: TestClient, user_id: str) -> None:
    created = client.post("/api/chirps", json={"body": "hello", "user_id": user_id}).json()

    response = client.get(f"/api/chirps/{created['id']}")

    assert response.status_code == 200
    assert response.json() == created


def test_get_chirp_with_invalid_id(client: TestClient) -> None:
    response = client.get("/api/chirps/not-a-uuid")
    assert response.status_code == 400
    assert response.json() == {"error": "Bad value for UUID"}


def test_get_missing_chirp(client: TestClient) -> None:
    response = client.get(f"/api/chirps/{uuid.uuid4()}")
    assert response.status_code == 404
    assert response.json() == {"error": "No record has been found"}


def test_chirp_for_unknown_user_is_server_error(client: TestClient) -> None:
    response = client.post("/api/chirps", json={"body": "hi", "user_id": str(uuid.uuid4())})

    assert response.status_code == 500
    assert response.json() == {"error": "Database save failed"}


def test_chirp_with_malformed_user_id(client: TestClient) -> None:
    response = client.post("/api/chirps", json={"body": "hi", "user_id": "nope"})
    assert response.status_code == 400
