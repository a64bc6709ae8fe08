import pytest

from woodblock.server.security import hash_password, issue_token, read_token, verify_password

from conftest import register


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def test_register_returns_user_and_token(api):
    data = register(api, "ada", "ada@example.com")
    assert data["user"]["name"] == "ada"
    assert data["user"]["email"] == "ada@example.com"
    assert data["user"]["highScore"] == 0
    assert data["token"]
    assert "password_hash" not in data["user"] and "passwordHash" not in data["user"]


@pytest.mark.parametrize(
    "body",
    [
        {"name": "ada", "email": "ada@example.com"},
        {"name": "", "email": "ada@example.com", "password": "pw"},
        {"email": "ada@example.com", "password": "pw"},
    ],
)
def test_register_missing_fields(api, body):
    res = api.post("/api/auth/register", json=body)
    assert res.status_code == 400
    assert res.json()["message"] == "Missing fields"


def test_register_duplicate_email(api):
    register(api, "ada", "ada@example.com")
    res = api.post("/api/auth/register", json={"name": "eve", "email": "ada@example.com", "password": "x"})
    assert res.status_code == 400
    assert res.json()["message"] == "Email already exists"


def test_login_success(api):
    register(api, "ada", "ada@example.com", "secret-pw")
    res = api.post("/api/auth/login", json={"email": "ada@example.com", "password": "secret-pw"})
    assert res.status_code == 200
    assert res.json()["user"]["name"] == "ada"
    assert res.json()["token"]


def test_login_failures_look_identical(api):
    register(api, "ada", "ada@example.com", "secret-pw")
    wrong_pw = api.post("/api/auth/login", json={"email": "ada@example.com", "password": "nope"})
    unknown = api.post("/api/auth/login", json={"email": "who@example.com", "password": "nope"})
    assert wrong_pw.status_code == unknown.status_code == 400
    assert wrong_pw.json() == unknown.json() == {"message": "Invalid credentials"}


def test_score_update_requires_token(api):
    res = api.post("/api/score/update", json={"score": 10})
    assert res.status_code == 401
    res = api.post("/api/score/update", json={"score": 10}, headers=_auth("not-a-jwt"))
    assert res.status_code == 401


def test_score_update_rejects_expired_token(api, server_config):
    user = register(api, "ada", "ada@example.com")["user"]
    expired = issue_token(user["id"], server_config.jwt_secret, ttl_seconds=-60)
    res = api.post("/api/score/update", json={"score": 10}, headers=_auth(expired))
    assert res.status_code == 401
    assert res.json()["message"] == "Invalid or expired token"


def test_score_update_only_raises(api):
    token = register(api, "ada", "ada@example.com")["token"]
    assert api.post("/api/score/update", json={"score": 120}, headers=_auth(token)).json() == {"highScore": 120}
    assert api.post("/api/score/update", json={"score": 80}, headers=_auth(token)).json() == {"highScore": 120}
    assert api.post("/api/score/update", json={"score": 130}, headers=_auth(token)).json() == {"highScore": 130}


def test_score_update_rejects_non_numbers(api):
    token = register(api, "ada", "ada@example.com")["token"]
    res = api.post("/api/score/update", json={"score": "lots"}, headers=_auth(token))
    assert res.status_code == 400


def test_score_update_for_deleted_user(api, server_config):
    token = issue_token("missing-user", server_config.jwt_secret, ttl_seconds=60)
    res = api.post("/api/score/update", json={"score": 10}, headers=_auth(token))
    assert res.status_code == 404


def test_leaderboard_excludes_zero_and_sorts(api):
    for name, score in [("a", 50), ("b", 0), ("c", 30)]:
        token = register(api, name, f"{name}@example.com")["token"]
        if score:
            api.post("/api/score/update", json={"score": score}, headers=_auth(token))
    res = api.get("/api/leaderboard")
    assert res.status_code == 200
    assert res.json() == [{"name": "a", "highScore": 50}, {"name": "c", "highScore": 30}]


def test_leaderboard_ties_favour_older_accounts_and_caps_at_ten(api):
    for i in range(12):
        token = register(api, f"p{i}", f"p{i}@example.com")["token"]
        api.post("/api/score/update", json={"score": 100}, headers=_auth(token))
    board = api.get("/api/leaderboard").json()
    assert [p["name"] for p in board] == [f"p{i}" for i in range(10)]


def test_users_lists_without_password_hash(api):
    register(api, "ada", "ada@example.com")
    register(api, "bob", "bob@example.com")
    users = api.get("/api/users").json()
    assert [u["name"] for u in users] == ["ada", "bob"]
    for u in users:
        assert set(u) == {"id", "name", "email", "highScore", "createdAt"}


def test_unknown_route_uses_message_body(api):
    res = api.get("/api/nothing-here")
    assert res.status_code == 404
    assert "message" in res.json()


def test_healthz(api):
    assert api.get("/healthz").json() == {"ok": True}


def test_password_hashing_and_tokens():
    hashed = hash_password("hunter2", rounds=4)
    assert verify_password("hunter2", hashed)
    assert not verify_password("hunter3", hashed)
    assert not verify_password("hunter2", "not-a-hash")
    token = issue_token("user-1", "s3cret", 60)
    assert read_token(token, "s3cret") == "user-1"
    assert read_token(token, "other") is None
