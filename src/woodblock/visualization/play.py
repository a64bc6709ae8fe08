from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

import pygame

from woodblock.bootstrap import GameApp, open_game
from woodblock.client import ApiError, LeaderboardClient, ScoreReporter
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
)
from woodblock.storage import LocalStore, Preferences

from .renderer import (
    BACKGROUND,
    PREVIEW,
    draw_block,
    draw_board,
    draw_ghost,
    draw_text,
    hud_lines,
    leaderboard_lines,
)


logger = logging.getLogger(__name__)

CELL_SIZE = 36
MARGIN = 20
SIDE_PANEL_W = 9 * CELL_SIZE
LEADERBOARD_W = 8 * CELL_SIZE
LINE_H = 20
# Drags shorter than this are treated as taps on the board
DRAG_THRESHOLD = 4

KEY_TO_EVENT = {
    pygame.K_r: Rotate(),
    pygame.K_u: Undo(),
    pygame.K_n: Restart(),
    pygame.K_1: SelectDifficulty("easy"),
    pygame.K_2: SelectDifficulty("normal"),
    pygame.K_3: SelectDifficulty("hard"),
    pygame.K_s: ToggleSound(),
}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Wood Block")
    p.add_argument("--data-dir", type=Path, default=Path("~/.woodblock"))
    p.add_argument("--api", type=str, default=None, help="Leaderboard service URL; enables score reporting")
    p.add_argument("--email", type=str, default=None)
    p.add_argument("--password", type=str, default=None)
    return p


def _connect(args: argparse.Namespace) -> Optional[ScoreReporter]:
    if not args.api:
        return None
    preferences = Preferences(LocalStore(args.data_dir))
    client = LeaderboardClient(args.api, preferences=preferences)
    if args.email and args.password:
        try:
            user = client.login(args.email, args.password)
            preferences.set_high_score(int(user.get("highScore", 0)))
            logger.info("Logged in as %s", user.get("name"))
        except ApiError as exc:
            logger.error("Login failed: %s", exc.message)
    return ScoreReporter(client)


def run(app: GameApp) -> None:
    pygame.init()
    try:
        session = app.session
        geometry = BoardGeometry(MARGIN, MARGIN, CELL_SIZE, session.grid.rows, session.grid.cols)
        board_w = session.grid.cols * CELL_SIZE
        board_h = session.grid.rows * CELL_SIZE
        width = MARGIN * 4 + board_w + SIDE_PANEL_W + LEADERBOARD_W
        height = MARGIN * 2 + max(board_h, 5 * CELL_SIZE + 12 * LINE_H)
        screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption("Wood Block")
        font = pygame.font.SysFont(None, 24)
        clock = pygame.time.Clock()

        panel_x = MARGIN * 2 + board_w
        active_origin = (panel_x, MARGIN)
        pending_origin = (panel_x + 5 * CELL_SIZE, MARGIN)
        small = CELL_SIZE // 2
        leaderboard_x = panel_x + SIDE_PANEL_W + MARGIN

        drag = DragState()
        press_pos: Optional[tuple] = None
        user = app.reporter.client.current_user if app.reporter else None
        app.refresh_leaderboard()

        running = True
        while running:
            active_rect = None
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_l:
                        app.refresh_leaderboard()
                    elif event.key in KEY_TO_EVENT:
                        app.handle(KEY_TO_EVENT[event.key], geometry)
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    press_pos = event.pos
                    block = session.active
                    if block is not None:
                        x0, y0 = active_origin
                        bounds = pygame.Rect(x0, y0, block.width * CELL_SIZE, block.height * CELL_SIZE)
                        if bounds.collidepoint(event.pos):
                            drag.start(event.pos[0] - x0, event.pos[1] - y0)
                elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                    if drag.active:
                        drag.stop()
                        if _board_rect(geometry).collidepoint(event.pos):
                            app.handle(Drop(event.pos[0], event.pos[1], drag.grab_dx, drag.grab_dy), geometry)
                    elif press_pos is not None and _distance(press_pos, event.pos) <= DRAG_THRESHOLD:
                        app.handle(Tap(*event.pos), geometry)
                    press_pos = None

            app.sync_high_score()

            # Draw
            screen.fill(BACKGROUND)
            draw_board(screen, session.grid.cells, geometry)
            mx, my = pygame.mouse.get_pos()
            ghost = drag.ghost(session, geometry, mx, my)
            draw_ghost(screen, session.active, ghost, geometry)
            if drag.active:
                draw_block(screen, session.active, mx - int(drag.grab_dx), my - int(drag.grab_dy), CELL_SIZE)
            else:
                active_rect = draw_block(screen, session.active, *active_origin, CELL_SIZE)
            draw_block(screen, session.pending, *pending_origin, small, PREVIEW)
            name = user.get("name") if user else None
            draw_text(
                screen,
                font,
                hud_lines(session, app.sound_enabled, name),
                panel_x,
                MARGIN + 5 * CELL_SIZE,
            )
            if app.reporter is not None:
                draw_text(screen, font, leaderboard_lines(app.leaderboard), leaderboard_x, MARGIN, LINE_H)
            if active_rect is not None and not session.game_over:
                pygame.draw.rect(screen, (255, 255, 255), active_rect, 1)
            if session.game_over:
                over = font.render(f"Game Over - score {session.score} - press N to restart", True, (255, 100, 100))
                screen.blit(over, (MARGIN, 2))

            pygame.display.flip()
            clock.tick(60)
    finally:
        pygame.quit()


def _board_rect(geometry: BoardGeometry) -> pygame.Rect:
    return pygame.Rect(geometry.left, geometry.top, geometry.cols * geometry.cell_size, geometry.rows * geometry.cell_size)


def _distance(a: tuple, b: tuple) -> float:
    return ((a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2) ** 0.5


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    reporter = _connect(args)
    app = open_game(args.data_dir, reporter=reporter)
    try:
        run(app)
    finally:
        if reporter is not None:
            reporter.close()


if __name__ == "__main__":  # pragma: no cover
    main()
