import json

import pytest

from woodblock.game import GameConfig, GameSession, SessionState
from woodblock.game.shapes import PLUS
from woodblock.storage import LocalStore, SessionStore
from woodblock.storage.persistence import STATE_KEY


def _valid_state(**overrides):
    state = {
        "grid": [[0] * 10 for _ in range(10)],
        "score": 40,
        "level": 1,
        "difficulty": "hard",
        "active": {"shape": [[1, 1]], "height": 1, "width": 2},
        "pending": {"shape": [[1], [1]], "height": 2, "width": 1},
    }
    state.update(overrides)
    return state


def test_save_then_load(session, session_store):
    session.place(2, 3)
    assert session_store.save(session.snapshot())
    loaded = session_store.load()
    assert loaded == session.snapshot()
    assert loaded.grid[2][3] == 1


def test_load_without_saved_state(session_store):
    assert session_store.load() is None


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        json.dumps([1, 2, 3]),
        json.dumps(_valid_state(grid=[[0] * 10 for _ in range(9)])),
        json.dumps(_valid_state(grid=[[0] * 9 for _ in range(10)])),
        json.dumps(_valid_state(grid=[[2] * 10 for _ in range(10)])),
        json.dumps(_valid_state(score=-5)),
        json.dumps(_valid_state(active={"shape": [[1, 1]], "height": 2, "width": 2})),
        json.dumps(_valid_state(active={"shape": [[0, 0]], "height": 1, "width": 2})),
        json.dumps(_valid_state(pending={"shape": [[1, 1], [1]], "height": 2, "width": 2})),
        json.dumps({k: v for k, v in _valid_state().items() if k != "pending"}),
    ],
)
def test_malformed_state_loads_as_none(store, session_store, raw):
    store.set(STATE_KEY, raw)
    assert session_store.load() is None


def test_unknown_difficulty_loads_as_normal(store, session_store):
    store.set(STATE_KEY, json.dumps(_valid_state(difficulty="nightmare")))
    assert session_store.load().difficulty == "normal"


def test_save_failure_is_swallowed(session, session_store, monkeypatch):
    def broken(key, value):
        raise OSError("disk full")

    monkeypatch.setattr(session_store.store, "set", broken)
    assert session_store.save(session.snapshot()) is False
    session.store = session_store
    # gameplay carries on
    assert session.place(0, 0).placed


def test_restore_rebuilds_session(store, session_store):
    store.set(STATE_KEY, json.dumps(_valid_state(score=240, level=1)))
    session = GameSession.restore(session_store.load(), config=GameConfig(), high_score=100)
    assert session.score == 240
    assert session.level == 3
    assert session.difficulty.value == "hard"
    assert session.active.shape.tolist() == [[1, 1]]
    assert session.pending.height == 2
    assert session.high_score == 240
    assert session.undo_stack == []
    assert session.state is SessionState.PLAYING


def test_restore_dead_position_is_game_over(store, session_store):
    grid = [[0 if (r + c) % 2 == 0 else 1 for c in range(10)] for r in range(10)]
    plus = {"shape": PLUS.tolist(), "height": 3, "width": 3}
    store.set(STATE_KEY, json.dumps(_valid_state(grid=grid, active=plus, pending=plus)))
    reported = []
    session = GameSession.restore(session_store.load(), on_game_over=reported.append)
    assert session.state is SessionState.GAME_OVER
    assert reported == []


def test_local_store_rejects_odd_keys(tmp_path):
    store = LocalStore(tmp_path)
    with pytest.raises(ValueError):
        store.set("../escape", "x")


def test_local_store_roundtrip_and_remove(tmp_path):
    store = LocalStore(tmp_path / "nested")
    store.set("thing", "value")
    assert store.get("thing") == "value"
    store.remove("thing")
    assert store.get("thing") is None
    store.remove("thing")


def test_preferences_defaults_and_corruption(store, preferences):
    assert preferences.high_score() == 0
    assert preferences.difficulty() == "normal"
    assert preferences.sound_enabled() is True
    assert preferences.token() is None
    store.set("high_score", "garbage")
    store.set("sound_enabled", "\"yes\"")
    assert preferences.high_score() == 0
    assert preferences.sound_enabled() is True


def test_preferences_roundtrip(preferences):
    preferences.set_high_score(420)
    preferences.set_difficulty("hard")
    preferences.set_sound_enabled(False)
    preferences.set_token("abc")
    preferences.set_current_user({"name": "ada", "highScore": 3})
    assert preferences.high_score() == 420
    assert preferences.difficulty() == "hard"
    assert preferences.sound_enabled() is False
    assert preferences.token() == "abc"
    assert preferences.current_user()["name"] == "ada"
    preferences.set_token(None)
    assert preferences.token() is None
