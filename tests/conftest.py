import os
import random

import pytest

# pygame must not try to open a real window
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

from powersnake.game import GameEngine  # noqa: E402


@pytest.fixture
def engine():
    """Running 10x10 game with an empty board we can arrange by hand."""
    eng = GameEngine(10, rng=random.Random(0))
    eng.start("medium", now_ms=0)
    eng.obstacles = []
    eng.power_up = None
    return eng
