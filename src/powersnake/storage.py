# storage.py
from __future__ import annotations
import json
import logging
import os
import tempfile

from .config import HIGH_SCORE_KEY

log = logging.getLogger(__name__)


def _parse_score(raw) -> int:
    """Stored value -> non-negative int. Raises ValueError if it isn't one."""
    if isinstance(raw, bool):
        raise ValueError(f"not a score: {raw!r}")
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, float) and raw.is_integer():
        value = int(raw)
    elif isinstance(raw, str) and raw.strip().isdigit():
        value = int(raw.strip())
    else:
        raise ValueError(f"not a score: {raw!r}")
    if value < 0:
        raise ValueError(f"negative score: {value}")
    return value


class HighScoreStore:
    """
    Single integer high score kept under a fixed key in a JSON file.
    Other keys in the file are left alone.
    """

    def __init__(self, path: str, key: str = HIGH_SCORE_KEY):
        self.path = path
        self.key = key

    def _read(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            log.warning("Could not read high score file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            log.warning("Ignoring high score file %s: expected a JSON object", self.path)
            return {}
        return data

    def load(self) -> int:
        data = self._read()
        if self.key not in data:
            return 0
        try:
            return _parse_score(data[self.key])
        except ValueError as e:
            log.warning("Ignoring stored high score: %s", e)
            return 0

    def save(self, score: int) -> None:
        data = self._read()
        data[self.key] = int(score)
        parent = os.path.dirname(self.path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        # write beside the target and swap in, so a failed write keeps the old file
        fd, tmp_path = tempfile.mkstemp(dir=parent or ".", prefix=".highscore-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=4)
            os.replace(tmp_path, self.path)
        except BaseException:
            os.unlink(tmp_path)
            raise


def record_high_score(store: HighScoreStore, score: int) -> int:
    """Persist max(score, stored) and return it. Write failures are logged, not raised."""
    previous = store.load()
    best = max(score, previous)
    try:
        store.save(best)
    except OSError as e:
        log.error("Error saving high score to %s: %s", store.path, e)
        return best
    if best > previous:
        log.info("New high score: %d (was %d)", best, previous)
    return best
