# src/powersnake/__init__.py
"""Grid Snake with obstacles and power-ups."""

from .game import GameEngine, Phase, PowerUp, PowerUpType, Snapshot, BoardFullError
from .storage import HighScoreStore, record_high_score

__all__ = [
    "GameEngine", "Phase", "PowerUp", "PowerUpType", "Snapshot", "BoardFullError",
    "HighScoreStore", "record_high_score",
]
