import pytest

from woodblock.game import Block
from woodblock.game.input import (
    BoardGeometry,
    DragState,
    Drop,
    Restart,
    Rotate,
    SelectDifficulty,
    Tap,
    ToggleSound,
    Undo,
    dispatch,
)


GEOMETRY = BoardGeometry(left=20, top=20, cell_size=30)


def test_cell_at_maps_pixels_to_cells():
    assert GEOMETRY.cell_at(20, 20) == (0, 0)
    assert GEOMETRY.cell_at(49, 49) == (0, 0)
    assert GEOMETRY.cell_at(50, 80) == (2, 1)
    assert GEOMETRY.cell_at(319, 319) == (9, 9)
    assert GEOMETRY.cell_at(10, 30) is None
    assert GEOMETRY.cell_at(320, 30) is None


def test_drop_target_uses_grab_offset_and_clamps():
    # pointer at cell (3, 3) holding the block 35px right of its left edge
    assert GEOMETRY.drop_target(20 + 3 * 30 + 5, 20 + 3 * 30 + 5, grab_dx=35, grab_dy=5) == (3, 2)
    assert GEOMETRY.drop_target(0, 0) == (0, 0)
    assert GEOMETRY.drop_target(1000, 1000) == (9, 9)


def test_ghost_preview_is_read_only(session):
    session.active = Block.from_shape([[1, 1]])
    drag = DragState()
    assert drag.ghost(session, GEOMETRY, 100, 100) is None
    drag.start(0, 0)
    inside = drag.ghost(session, GEOMETRY, 20 + 5, 20 + 5)
    edge = drag.ghost(session, GEOMETRY, 20 + 9 * 30 + 5, 20 + 5)
    assert (inside.row, inside.col, inside.valid) == (0, 0, True)
    assert (edge.row, edge.col, edge.valid) == (0, 9, False)
    assert not session.grid.cells.any()
    assert session.undo_stack == []


def test_tap_places_active_block(session):
    result = dispatch(session, Tap(20 + 4 * 30 + 1, 20 + 2 * 30 + 1), GEOMETRY)
    assert result.placed
    assert session.grid.cells[2, 4] == 1


def test_tap_outside_board_does_nothing(session):
    assert dispatch(session, Tap(5, 5), GEOMETRY) is None
    assert session.score == 0


def test_drop_places_at_block_origin(session):
    result = dispatch(session, Drop(20 + 6 * 30 + 10, 20 + 1 * 30 + 10, grab_dx=10, grab_dy=10), GEOMETRY)
    assert result.placed
    assert session.grid.cells[1, 6] == 1


def test_rotate_undo_restart_events(session):
    session.active = Block.from_shape([[1, 1]])
    assert dispatch(session, Rotate())
    assert session.active.width == 1
    dispatch(session, Tap(25, 25), GEOMETRY)
    assert dispatch(session, Undo())
    assert not session.grid.cells.any()
    dispatch(session, Restart())
    assert session.score == 0


def test_select_difficulty_restarts_and_persists(session, preferences):
    session.place(0, 0)
    dispatch(session, SelectDifficulty("easy"), preferences=preferences)
    assert session.score == 0
    assert session.difficulty.value == "easy"
    assert preferences.difficulty() == "easy"


def test_toggle_sound_flips_preference(session, preferences):
    assert preferences.sound_enabled()
    assert dispatch(session, ToggleSound(), preferences=preferences) is False
    assert not preferences.sound_enabled()
    assert dispatch(session, ToggleSound(), preferences=preferences) is True


def test_unknown_event_is_rejected(session):
    with pytest.raises(TypeError):
        dispatch(session, object())
