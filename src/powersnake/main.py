# main.py
from __future__ import annotations
import argparse
import logging
import random
from typing import Optional

import pygame  # type: ignore

from .config import CFG, Config, DIFFICULTIES
from .game import GameEngine, Phase, tile_count_for
from .render import draw_game, draw_game_over, draw_start_screen
from .storage import HighScoreStore, record_high_score

log = logging.getLogger(__name__)

ARROW_KEYS = {
    pygame.K_UP: "up",
    pygame.K_DOWN: "down",
    pygame.K_LEFT: "left",
    pygame.K_RIGHT: "right",
}

LEVELS = list(DIFFICULTIES)
LEVEL_KEYS = {pygame.K_1: 0, pygame.K_2: 1, pygame.K_3: 2}


class App:
    """Routes pygame events to the engine and picks which screen to draw."""

    def __init__(
        self,
        screen: pygame.Surface,
        font: pygame.font.Font,
        store: HighScoreStore,
        cfg: Config = CFG,
        rng: Optional[random.Random] = None,
    ):
        self.screen = screen
        self.font = font
        self.store = store
        self.difficulty = cfg.difficulty
        self.high_score = store.load()
        self.running = True
        self.engine = GameEngine(
            tile_count_for(screen.get_width()),
            rng=rng or random.Random(cfg.seed),
            on_game_over=self._on_game_over,
        )

    def _on_game_over(self, score: int) -> None:
        self.high_score = record_high_score(self.store, score)

    # ----- Input -----
    def handle_event(self, event: pygame.event.Event, now_ms: int) -> None:
        if event.type == pygame.QUIT:
            self.running = False
            return
        if event.type == pygame.VIDEORESIZE:
            self.screen = pygame.display.get_surface() or self.screen
            self.engine.resize(event.w)
            return
        if event.type != pygame.KEYDOWN:
            return
        if event.key == pygame.K_ESCAPE:
            self.running = False
            return

        phase = self.engine.phase
        if phase is Phase.NOT_STARTED:
            self._handle_menu_key(event.key, now_ms)
        elif phase is Phase.RUNNING:
            name = ARROW_KEYS.get(event.key)
            if name is not None:
                self.engine.set_direction(name)
        elif phase is Phase.ENDED:
            if event.key in (pygame.K_r, pygame.K_RETURN):
                log.info("Restarting")
                self.engine.restart(now_ms)

    def _handle_menu_key(self, key: int, now_ms: int) -> None:
        idx = LEVELS.index(self.difficulty)
        if key == pygame.K_LEFT:
            self.difficulty = LEVELS[(idx - 1) % len(LEVELS)]
        elif key == pygame.K_RIGHT:
            self.difficulty = LEVELS[(idx + 1) % len(LEVELS)]
        elif key in LEVEL_KEYS:
            self.difficulty = LEVELS[LEVEL_KEYS[key]]
        elif key in (pygame.K_RETURN, pygame.K_SPACE):
            self.engine.start(self.difficulty, now_ms)

    # ----- Update / Draw -----
    def update(self, now_ms: int) -> bool:
        return self.engine.tick(now_ms)

    def draw(self, now_ms: int) -> None:
        phase = self.engine.phase
        if phase is Phase.NOT_STARTED:
            draw_start_screen(self.screen, self.font, self.difficulty, self.high_score)
            return
        draw_game(self.screen, self.font, self.engine.snapshot(now_ms))
        if phase is Phase.ENDED:
            draw_game_over(self.screen, self.font, self.engine.score, self.high_score)


def parse_args(argv=None) -> Config:
    parser = argparse.ArgumentParser(description="Snake with obstacles and power-ups")
    parser.add_argument(
        "--difficulty",
        type=str,
        default=CFG.difficulty,
        choices=LEVELS,
        help="Preselected level (tick interval: easy 150ms, medium 100ms, hard 50ms)",
    )
    parser.add_argument("--seed", type=int, default=CFG.seed, help="RNG seed for placement")
    parser.add_argument("--width", type=int, default=CFG.width)
    parser.add_argument("--height", type=int, default=CFG.height)
    parser.add_argument("--fps", type=int, default=CFG.fps)
    parser.add_argument(
        "--highscore-file",
        type=str,
        default=CFG.highscore_path,
        help="JSON file the high score is kept in",
    )
    parser.add_argument("--log-level", type=str, default="INFO")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return Config(
        seed=args.seed,
        difficulty=args.difficulty,
        width=args.width,
        height=args.height,
        fps=args.fps,
        highscore_path=args.highscore_file,
    )


def main(argv=None):
    cfg = parse_args(argv)

    pygame.init()
    font = pygame.font.SysFont(None, 24)
    screen = pygame.display.set_mode((cfg.width, cfg.height), pygame.RESIZABLE)
    pygame.display.set_caption("Snake")
    clock = pygame.time.Clock()

    app = App(screen, font, HighScoreStore(cfg.highscore_path), cfg)
    log.info("High score loaded: %d", app.high_score)

    while app.running:
        now = pygame.time.get_ticks()
        # 1) input
        for event in pygame.event.get():
            app.handle_event(event, now)
        if not app.running:
            break

        # 2) update (movement gated by the engine's interval)
        app.update(now)

        # 3) render
        app.draw(now)
        pygame.display.flip()
        clock.tick(cfg.fps)

    pygame.quit()

if __name__ == "__main__":
    main()
