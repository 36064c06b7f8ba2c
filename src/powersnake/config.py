from dataclasses import dataclass
from typing import Optional

# ----- Window & grid -----
WIDTH, HEIGHT = 600, 600
CELL_SIZE = 20

# ----- Colors -----
BG     = (240, 240, 240)
GREEN  = (0, 128, 0)
RED    = (220, 30, 30)
YELLOW = (235, 200, 0)
GRAY   = (128, 128, 128)
WHITE  = (255, 255, 255)
TEXT   = (0, 0, 0)

# ----- Directions (dx, dy) -----
STILL = (0, 0)
UP, DOWN, LEFT, RIGHT = (0, -1), (0, 1), (-1, 0), (1, 0)

# ----- Difficulty: tick interval in ms -----
DIFFICULTIES = {
    "easy": 150,
    "medium": 100,
    "hard": 50,
}

# ----- Entities & power-ups -----
OBSTACLE_DIVISOR = 5      # obstacles per game = tile_count // OBSTACLE_DIVISOR
POWER_UP_CHANCE = 0.1     # rolled each time food is eaten
SPEED_EFFECT_MS = 5000
INVINCIBLE_EFFECT_MS = 5000
GROW_SEGMENTS = 3
PLACEMENT_RETRIES = 100   # random draws before scanning for free cells

# ----- Persistence -----
HIGH_SCORE_KEY = "snakeHighScore"

# ----- Tunables (what you'd pass on the command line) -----
@dataclass
class Config:
    seed: Optional[int] = None
    difficulty: str = "medium"
    width: int = WIDTH
    height: int = HEIGHT
    fps: int = 60
    highscore_path: str = "data/highscore.json"

CFG = Config()
