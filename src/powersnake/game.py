# game.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Set, Tuple
import logging
import random

import numpy as np  # type: ignore

from .config import (
    CELL_SIZE,
    STILL, UP, DOWN, LEFT, RIGHT,
    DIFFICULTIES,
    OBSTACLE_DIVISOR, POWER_UP_CHANCE,
    SPEED_EFFECT_MS, INVINCIBLE_EFFECT_MS, GROW_SEGMENTS,
    PLACEMENT_RETRIES,
)

log = logging.getLogger(__name__)

Position = Tuple[int, int]

DIRECTIONS = {
    "up": UP,
    "down": DOWN,
    "left": LEFT,
    "right": RIGHT,
}


class Phase(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    ENDED = "ended"


class PowerUpType(Enum):
    SPEED = "speed"
    GROW = "grow"
    INVINCIBLE = "invincible"


class BoardFullError(RuntimeError):
    """No free cell is left on the grid."""


@dataclass(frozen=True)
class PowerUp:
    position: Position
    kind: PowerUpType


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of one frame, handed to the renderer."""
    snake: Tuple[Position, ...]    # head at index 0
    food: Optional[Position]
    power_up: Optional[PowerUp]
    obstacles: Tuple[Position, ...]
    score: int
    direction: Position
    tile_count: int
    phase: Phase
    speed_boost: bool
    invincible: bool
    end_reason: Optional[str]


# ---------- Helpers ----------
def tile_count_for(width_px: int) -> int:
    return width_px // CELL_SIZE

def same_axis(a: Position, b: Position) -> bool:
    return (a[0] != 0 and b[0] != 0) or (a[1] != 0 and b[1] != 0)

def _active(until: Optional[int], now_ms: int) -> bool:
    return until is not None and now_ms < until


# ---------- Engine ----------
class GameEngine:
    """
    Owns all mutable game state and advances it one grid step per tick.

    The engine never reads a clock itself: callers pass ``now_ms`` so timed
    effects (speed, invincible) are plain expiry timestamps checked on every
    tick. ``on_game_over(score)`` fires once when a game ends.
    """

    def __init__(
        self,
        tile_count: int,
        rng: Optional[random.Random] = None,
        on_game_over: Optional[Callable[[int], None]] = None,
    ):
        if tile_count < 2:
            raise ValueError(f"tile_count must be at least 2, got {tile_count}")
        self.tile_count = tile_count
        self.rng = rng or random.Random()
        self.on_game_over = on_game_over

        self.phase = Phase.NOT_STARTED
        self.difficulty = "medium"
        self.snake: List[Position] = []
        self.direction: Position = STILL   # committed by the last step
        self.pending: Position = STILL     # next step's direction
        self.food: Optional[Position] = None
        self.power_up: Optional[PowerUp] = None
        self.obstacles: List[Position] = []
        self.score = 0
        self.base_interval = DIFFICULTIES[self.difficulty]
        self.speed_until: Optional[int] = None
        self.invincible_until: Optional[int] = None
        self.last_step = 0
        self.end_reason: Optional[str] = None

        self._next_tile_count: Optional[int] = None
        self._stepping = False

    # ----- Lifecycle -----
    def init_game(self, difficulty: str, now_ms: int = 0) -> None:
        if difficulty not in DIFFICULTIES:
            raise ValueError(f"Unknown difficulty: {difficulty!r}")
        if self._next_tile_count is not None:
            self.tile_count = self._next_tile_count
            self._next_tile_count = None

        center = self.tile_count // 2
        self.difficulty = difficulty
        self.base_interval = DIFFICULTIES[difficulty]
        self.snake = [(center, center)]
        self.direction = STILL
        self.pending = STILL
        self.score = 0
        self.speed_until = None
        self.invincible_until = None
        self.power_up = None
        self.food = None
        self.obstacles = []
        self._generate_obstacles()
        self.food = self.random_position()
        self.last_step = now_ms
        self.end_reason = None
        self.phase = Phase.NOT_STARTED

    def start(self, difficulty: str, now_ms: int = 0) -> None:
        self.init_game(difficulty, now_ms)
        self.phase = Phase.RUNNING
        log.info(
            "Game started: difficulty=%s interval=%dms grid=%dx%d obstacles=%d",
            difficulty, self.base_interval, self.tile_count, self.tile_count,
            len(self.obstacles),
        )

    def restart(self, now_ms: int = 0) -> None:
        if self.phase is not Phase.ENDED:
            raise RuntimeError(f"Cannot restart from phase {self.phase.value}")
        self.start(self.difficulty, now_ms)

    def resize(self, width_px: int) -> None:
        """Recompute the grid size; a running game keeps its grid until the next one."""
        new_count = max(tile_count_for(width_px), 2)
        if self.phase is Phase.RUNNING:
            self._next_tile_count = new_count
        else:
            self.tile_count = new_count

    # ----- Input -----
    def set_direction(self, name: str) -> bool:
        """Queue a turn; reversals along the current axis are ignored."""
        cand = DIRECTIONS.get(name)
        if cand is None:
            return False
        if self.direction != STILL and same_axis(cand, self.direction):
            return False
        self.pending = cand
        return True

    # ----- Timing -----
    def speed_active(self, now_ms: int) -> bool:
        return _active(self.speed_until, now_ms)

    def invincible_active(self, now_ms: int) -> bool:
        return _active(self.invincible_until, now_ms)

    def current_interval(self, now_ms: int) -> int:
        if self.speed_active(now_ms):
            return self.base_interval // 2
        return self.base_interval

    def tick(self, now_ms: int) -> bool:
        """
        Step once if the current interval has elapsed. Returns True if a step ran.

        The schedule advances by whole intervals so frame granularity does not
        stretch them; after a stall it restarts from now instead of catching up.
        """
        if self.phase is not Phase.RUNNING:
            return False
        interval = self.current_interval(now_ms)
        behind = now_ms - self.last_step
        if behind < interval:
            return False
        if behind >= 2 * interval:
            self.last_step = now_ms
        else:
            self.last_step += interval
        self.step(now_ms)
        return True

    # ----- Update -----
    def step(self, now_ms: int = 0) -> bool:
        """
        Advance the game by one grid step.
        Returns True while the game is running, False once it has ended.
        """
        if self._stepping:
            raise RuntimeError("step() called while a step is already in progress")
        if self.phase is not Phase.RUNNING:
            return False

        self._stepping = True
        try:
            self._expire_effects(now_ms)

            # Commit direction once per step
            self.direction = self.pending
            if self.direction == STILL:
                return True

            hx, hy = self.snake[0]
            dx, dy = self.direction
            head = (hx + dx, hy + dy)
            self.snake.insert(0, head)

            # Eat / move
            if head == self.food:
                self.score += 1
                log.debug("Food eaten at %s, score=%d", head, self.score)
                try:
                    self.food = self.random_position()
                except BoardFullError:
                    self.food = None
                if self.food is not None and self.rng.random() < POWER_UP_CHANCE:
                    self._spawn_power_up()
            else:
                self.snake.pop()

            if self.power_up is not None and head == self.power_up.position:
                self.apply_power_up(self.power_up.kind, now_ms)
                self.power_up = None

            reason = self.collision(now_ms)
            if reason is None and self.food is None:
                reason = "board_full"
            if reason is not None:
                self._end(reason)
                return False
            return True
        finally:
            self._stepping = False

    def collision(self, now_ms: int = 0) -> Optional[str]:
        """Name of the fatal collision at the head, or None."""
        x, y = self.snake[0]
        if not (0 <= x < self.tile_count and 0 <= y < self.tile_count):
            return "wall"
        if self.invincible_active(now_ms):
            return None
        head = self.snake[0]
        if head in self.snake[1:]:
            return "self"
        if head in self.obstacles:
            return "obstacle"
        return None

    # ----- Power-ups -----
    def apply_power_up(self, kind: PowerUpType, now_ms: int) -> None:
        log.info("Power-up collected: %s", kind.value)
        if kind is PowerUpType.SPEED:
            # A second pickup moves the single expiry forward
            self.speed_until = now_ms + SPEED_EFFECT_MS
        elif kind is PowerUpType.GROW:
            tail = self.snake[-1]
            self.snake.extend([tail] * GROW_SEGMENTS)
        elif kind is PowerUpType.INVINCIBLE:
            self.invincible_until = now_ms + INVINCIBLE_EFFECT_MS

    def _spawn_power_up(self) -> None:
        try:
            position = self.random_position()
        except BoardFullError:
            return
        kind = self.rng.choice(list(PowerUpType))
        self.power_up = PowerUp(position, kind)
        log.debug("Spawned power-up %s at %s", kind.value, position)

    def _expire_effects(self, now_ms: int) -> None:
        if self.speed_until is not None and not self.speed_active(now_ms):
            self.speed_until = None
            log.debug("Speed boost expired")
        if self.invincible_until is not None and not self.invincible_active(now_ms):
            self.invincible_until = None
            log.debug("Invincibility expired")

    # ----- Placement -----
    def _occupied(self) -> Set[Position]:
        taken = set(self.snake)
        taken.update(self.obstacles)
        if self.food is not None:
            taken.add(self.food)
        if self.power_up is not None:
            taken.add(self.power_up.position)
        return taken

    def random_position(self) -> Position:
        """Uniform free cell: not snake, obstacle, food or power-up."""
        taken = self._occupied()
        for _ in range(PLACEMENT_RETRIES):
            pos = (self.rng.randrange(self.tile_count), self.rng.randrange(self.tile_count))
            if pos not in taken:
                return pos
        return self._scan_free_cell(taken)

    def _scan_free_cell(self, taken: Set[Position]) -> Position:
        grid = np.zeros((self.tile_count, self.tile_count), dtype=bool)
        for x, y in taken:
            if 0 <= x < self.tile_count and 0 <= y < self.tile_count:
                grid[y, x] = True
        free = np.argwhere(~grid)  # rows of (y, x)
        if len(free) == 0:
            raise BoardFullError(f"no free cell on a {self.tile_count}x{self.tile_count} grid")
        y, x = free[self.rng.randrange(len(free))]
        return (int(x), int(y))

    def _generate_obstacles(self) -> None:
        count = self.tile_count // OBSTACLE_DIVISOR
        for _ in range(count):
            try:
                self.obstacles.append(self.random_position())
            except BoardFullError:
                log.warning("Grid full, placed %d of %d obstacles", len(self.obstacles), count)
                break

    # ----- Termination & views -----
    def _end(self, reason: str) -> None:
        self.phase = Phase.ENDED
        self.end_reason = reason
        log.info("Game over (%s): score=%d length=%d", reason, self.score, len(self.snake))
        if self.on_game_over is not None:
            self.on_game_over(self.score)

    def snapshot(self, now_ms: int = 0) -> Snapshot:
        return Snapshot(
            snake=tuple(self.snake),
            food=self.food,
            power_up=self.power_up,
            obstacles=tuple(self.obstacles),
            score=self.score,
            direction=self.direction,
            tile_count=self.tile_count,
            phase=self.phase,
            speed_boost=self.speed_active(now_ms),
            invincible=self.invincible_active(now_ms),
            end_reason=self.end_reason,
        )
