from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from woodblock.game import Block, GameConfig, GameSession
from woodblock.server import ServerConfig, create_app
from woodblock.storage import LocalStore, Preferences, SessionStore


DOT = [[1]]


@pytest.fixture
def store(tmp_path) -> LocalStore:
    return LocalStore(tmp_path / "data")


@pytest.fixture
def session_store(store) -> SessionStore:
    return SessionStore(store)


@pytest.fixture
def preferences(store) -> Preferences:
    return Preferences(store)


@pytest.fixture
def session() -> GameSession:
    s = GameSession(GameConfig(random_seed=1234))
    s.active = Block.from_shape(DOT)
    s.pending = Block.from_shape(DOT)
    return s


@pytest.fixture
def server_config(tmp_path) -> ServerConfig:
    return ServerConfig(db_path=str(tmp_path / "users.db"), jwt_secret="test-secret", bcrypt_rounds=4)


@pytest.fixture
def api(server_config):
    with TestClient(create_app(server_config)) as client:
        yield client


def register(api, name: str, email: str, password: str = "pw123456") -> dict:
    res = api.post("/api/auth/register", json={"name": name, "email": email, "password": password})
    assert res.status_code == 200, res.text
    return res.json()
