"""Pointer-to-grid mapping and the input event dispatch table.

Pointer coordinates are screen pixels. Mapping and ghost previews are
read-only; only `dispatch` runs session transitions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, Optional, Tuple, Type

from .session import GameSession, PlacementResult

if TYPE_CHECKING:
    from woodblock.storage.persistence import Preferences


@dataclass(frozen=True)
class BoardGeometry:
    left: int
    top: int
    cell_size: int
    rows: int = 10
    cols: int = 10

    def cell_at(self, x: float, y: float) -> Optional[Tuple[int, int]]:
        """Cell under the pointer, or None when outside the board."""
        col = int((x - self.left) // self.cell_size)
        row = int((y - self.top) // self.cell_size)
        if 0 <= row < self.rows and 0 <= col < self.cols:
            return row, col
        return None

    def drop_target(self, x: float, y: float, grab_dx: float = 0, grab_dy: float = 0) -> Tuple[int, int]:
        """Origin cell for a dragged block whose top-left sits at pointer minus grab offset."""
        col = int((x - self.left - grab_dx) // self.cell_size)
        row = int((y - self.top - grab_dy) // self.cell_size)
        row = min(max(row, 0), self.rows - 1)
        col = min(max(col, 0), self.cols - 1)
        return row, col

    def cell_rect(self, row: int, col: int) -> Tuple[int, int, int, int]:
        return (self.left + col * self.cell_size, self.top + row * self.cell_size, self.cell_size, self.cell_size)


@dataclass(frozen=True)
class Ghost:
    row: int
    col: int
    valid: bool


@dataclass
class DragState:
    grab_dx: float = 0.0
    grab_dy: float = 0.0
    active: bool = False

    def start(self, grab_dx: float, grab_dy: float) -> None:
        self.grab_dx = grab_dx
        self.grab_dy = grab_dy
        self.active = True

    def stop(self) -> None:
        self.active = False

    def ghost(self, session: GameSession, geometry: BoardGeometry, x: float, y: float) -> Optional[Ghost]:
        if not self.active:
            return None
        row, col = geometry.drop_target(x, y, self.grab_dx, self.grab_dy)
        return Ghost(row=row, col=col, valid=session.preview(row, col))


# ---------- Events ----------
@dataclass(frozen=True)
class Tap:
    x: float
    y: float


@dataclass(frozen=True)
class Drop:
    x: float
    y: float
    grab_dx: float = 0.0
    grab_dy: float = 0.0


@dataclass(frozen=True)
class Rotate:
    pass


@dataclass(frozen=True)
class Undo:
    pass


@dataclass(frozen=True)
class Restart:
    pass


@dataclass(frozen=True)
class SelectDifficulty:
    tier: str


@dataclass(frozen=True)
class ToggleSound:
    pass


@dataclass
class InputContext:
    session: GameSession
    geometry: Optional[BoardGeometry] = None
    preferences: Optional["Preferences"] = None


def _on_tap(ctx: InputContext, event: Tap) -> Optional[PlacementResult]:
    if ctx.geometry is None:
        return None
    cell = ctx.geometry.cell_at(event.x, event.y)
    if cell is None:
        return None
    return ctx.session.place(*cell)


def _on_drop(ctx: InputContext, event: Drop) -> Optional[PlacementResult]:
    if ctx.geometry is None:
        return None
    row, col = ctx.geometry.drop_target(event.x, event.y, event.grab_dx, event.grab_dy)
    return ctx.session.place(row, col)


def _on_rotate(ctx: InputContext, event: Rotate) -> bool:
    return ctx.session.rotate_active()


def _on_undo(ctx: InputContext, event: Undo) -> bool:
    return ctx.session.undo()


def _on_restart(ctx: InputContext, event: Restart) -> None:
    ctx.session.restart()


def _on_select_difficulty(ctx: InputContext, event: SelectDifficulty) -> None:
    ctx.session.restart(event.tier)
    if ctx.preferences is not None:
        ctx.preferences.set_difficulty(ctx.session.difficulty.value)


def _on_toggle_sound(ctx: InputContext, event: ToggleSound) -> Optional[bool]:
    if ctx.preferences is None:
        return None
    enabled = not ctx.preferences.sound_enabled()
    ctx.preferences.set_sound_enabled(enabled)
    return enabled


HANDLERS: Dict[Type, Callable] = {
    Tap: _on_tap,
    Drop: _on_drop,
    Rotate: _on_rotate,
    Undo: _on_undo,
    Restart: _on_restart,
    SelectDifficulty: _on_select_difficulty,
    ToggleSound: _on_toggle_sound,
}


def dispatch(
    session: GameSession,
    event: object,
    geometry: Optional[BoardGeometry] = None,
    preferences: Optional["Preferences"] = None,
):
    """Run the transition registered for `event` and return its result."""
    handler = HANDLERS.get(type(event))
    if handler is None:
        raise TypeError(f"No handler for input event {type(event).__name__}")
    return handler(InputContext(session, geometry, preferences), event)
