from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import pygame

from woodblock.game import Block, GameSession
from woodblock.game.input import BoardGeometry, Ghost


EMPTY = (60, 44, 30)
FILLED = (196, 142, 84)
BLOCK = (222, 178, 112)
PREVIEW = (150, 120, 90)
GHOST_VALID = (120, 220, 140)
GHOST_INVALID = (220, 120, 120)
BACKGROUND = (28, 20, 14)
TEXT = (235, 225, 210)


def draw_board(screen: pygame.Surface, cells: np.ndarray, geometry: BoardGeometry) -> None:
    h, w = cells.shape
    for r in range(h):
        for c in range(w):
            x, y, size, _ = geometry.cell_rect(r, c)
            rect = pygame.Rect(x, y, size - 1, size - 1)
            pygame.draw.rect(screen, FILLED if cells[r, c] else EMPTY, rect)


def draw_block(
    screen: pygame.Surface,
    block: Optional[Block],
    x0: int,
    y0: int,
    cell_size: int,
    color: Tuple[int, int, int] = BLOCK,
) -> Optional[pygame.Rect]:
    """Draw `block` with its top-left at (x0, y0); returns its bounding rect."""
    if block is None:
        return None
    for r in range(block.height):
        for c in range(block.width):
            if block.shape[r, c]:
                rect = pygame.Rect(x0 + c * cell_size, y0 + r * cell_size, cell_size - 1, cell_size - 1)
                pygame.draw.rect(screen, color, rect)
    return pygame.Rect(x0, y0, block.width * cell_size, block.height * cell_size)


def draw_ghost(screen: pygame.Surface, block: Optional[Block], ghost: Optional[Ghost], geometry: BoardGeometry) -> None:
    if block is None or ghost is None:
        return
    color = GHOST_VALID if ghost.valid else GHOST_INVALID
    for r in range(block.height):
        for c in range(block.width):
            if not block.shape[r, c]:
                continue
            row, col = ghost.row + r, ghost.col + c
            if not (0 <= row < geometry.rows and 0 <= col < geometry.cols):
                continue
            x, y, size, _ = geometry.cell_rect(row, col)
            pygame.draw.rect(screen, color, pygame.Rect(x, y, size - 1, size - 1), 2)


def draw_text(screen: pygame.Surface, font: pygame.font.Font, lines: List[str], x: int, y: int, spacing: int = 20) -> None:
    for i, txt in enumerate(lines):
        img = font.render(txt, True, TEXT)
        screen.blit(img, (x, y + i * spacing))


def hud_lines(session: GameSession, sound_enabled: bool, user_name: Optional[str]) -> List[str]:
    return [
        f"Score: {session.score}",
        f"Level: {session.level}",
        f"High score: {session.high_score}",
        f"Difficulty: {session.difficulty.value}",
        f"Sound: {'On' if sound_enabled else 'Off'}",
        f"Player: {user_name or 'not logged in'}",
        "",
        "Drag or click to place",
        "R rotate  U undo  N restart",
        "1/2/3 easy/normal/hard",
        "S sound  L leaderboard  Esc quit",
    ]


def leaderboard_lines(entries: List[Dict[str, Any]], limit: int = 10) -> List[str]:
    lines = ["Leaderboard"]
    if not entries:
        lines.append("No scores yet")
    for idx, entry in enumerate(entries[:limit], start=1):
        lines.append(f"{idx}. {entry.get('name') or 'Anonymous'} - {entry.get('highScore', 0)}")
    return lines
