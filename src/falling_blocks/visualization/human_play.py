from __future__ import annotations

import argparse
import logging
from typing import Dict, List, Optional

import pygame

from falling_blocks.game import (
    Action,
    BestScoreStore,
    GameConfig,
    GameSnapshot,
    GameStatus,
    JsonBestScoreStore,
    TetrisGame,
)
from .renderer import Renderer

logger = logging.getLogger(__name__)


KEY_TO_ACTION: Dict[int, Action] = {
    pygame.K_LEFT: Action.LEFT,
    pygame.K_RIGHT: Action.RIGHT,
    pygame.K_UP: Action.ROTATE,
    pygame.K_DOWN: Action.SOFT_DROP,
    pygame.K_SPACE: Action.HARD_DROP,
}

STATUS_BANNERS = {
    GameStatus.IDLE: "Press Enter to start",
    GameStatus.PAUSED: "Paused - P to resume",
    GameStatus.GAME_OVER: "Game Over - Enter to play again",
}


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def handle_key(game: TetrisGame, key: int) -> None:
    action = KEY_TO_ACTION.get(key)
    if action is not None:
        game.step(action)
    elif key in (pygame.K_RETURN, pygame.K_KP_ENTER):
        game.start()
    elif key == pygame.K_p:
        game.pause()
    elif key == pygame.K_r:
        game.reset()
    elif key == pygame.K_h:
        game.reset_high_score()


def hud_lines(snapshot: GameSnapshot) -> List[str]:
    lines = [
        f"Score {snapshot.score}",
        f"Best {snapshot.best_score}",
        f"Lines {snapshot.lines_cleared}",
    ]
    if snapshot.elapsed_ms:
        lines.append(f"Time {snapshot.elapsed_ms // 1000}s")
    return lines


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Falling Blocks with the keyboard")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--bag", action="store_true", help="Deal pieces from a shuffled 7-bag")
    p.add_argument("--timed", action="store_true",
                   help="Speed up over time and end the session after the time cap")
    p.add_argument("--best-score-file", type=str, default=None)
    p.add_argument("--cell-size", type=int, default=28)
    p.add_argument("--verbose", action="store_true")
    return p


def build_game(args: argparse.Namespace) -> TetrisGame:
    config = GameConfig(
        random_seed=args.seed,
        randomizer="bag" if args.bag else "uniform",
        progression=args.timed,
    )
    store: Optional[BestScoreStore] = None
    if args.best_score_file:
        store = JsonBestScoreStore(args.best_score_file)
    return TetrisGame(config, store=store)


def run(game: TetrisGame, cell_size: int = 28) -> None:
    pygame.init()
    try:
        clock = pygame.time.Clock()
        renderer = Renderer(cell_size=cell_size)
        screen = pygame.display.set_mode(renderer.window_size(game.grid.height, game.grid.width))
        pygame.display.set_caption("Falling Blocks")
        font = pygame.font.SysFont(None, 28)

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    else:
                        handle_key(game, event.key)

            # Gravity and difficulty ramp
            game.advance(clock.tick(60))

            snapshot = game.snapshot()
            renderer.draw(screen, snapshot)
            panel_x = renderer.margin * 2 + game.grid.width * cell_size
            y = screen.get_height() - renderer.margin
            for line in reversed(hud_lines(snapshot)):
                text = font.render(line, True, (230, 230, 230))
                y -= text.get_height() + 4
                screen.blit(text, (panel_x, y))
            banner = STATUS_BANNERS.get(snapshot.status)
            if banner:
                text = font.render(banner, True, (255, 255, 255))
                rect = text.get_rect(center=(screen.get_width() // 2, screen.get_height() // 2))
                screen.blit(text, rect)
            pygame.display.flip()
    finally:
        pygame.quit()


def main() -> None:
    args = build_parser().parse_args()
    setup_logging(args.verbose)
    game = build_game(args)
    logger.info("Loaded best score %d", game.best_score)
    run(game, cell_size=args.cell_size)


if __name__ == "__main__":  # pragma: no cover
    main()
