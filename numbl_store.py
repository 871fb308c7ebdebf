# numbl_store.py
# Local key-value store for presentation settings: keyboard side, high score, seen-help flag.

import json
import logging
import os
from typing import Any, Dict

log = logging.getLogger(__name__)

DEFAULTS: Dict[str, Any] = {
    "keyboard_position": "right",
    "high_score": 0,
    "seen_help": False,
}
KEYBOARD_POSITIONS = ("left", "right")


class LocalStore:
    """Small JSON file; unreadable or malformed data falls back to defaults."""

    def __init__(self, path: str):
        self.path = path
        self.data = self._load()

    def _load(self) -> Dict[str, Any]:
        data = dict(DEFAULTS)
        if not os.path.exists(self.path):
            return data
        try:
            with open(self.path, "r") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            log.warning("ignoring unreadable store %s: %s", self.path, e)
            return data
        if not isinstance(raw, dict):
            log.warning("ignoring store %s: expected an object", self.path)
            return data

        if raw.get("keyboard_position") in KEYBOARD_POSITIONS:
            data["keyboard_position"] = raw["keyboard_position"]
        try:
            data["high_score"] = max(0, int(raw.get("high_score", 0)))
        except (TypeError, ValueError):
            pass
        data["seen_help"] = bool(raw.get("seen_help", False))
        return data

    def _save(self) -> None:
        try:
            with open(self.path, "w") as f:
                json.dump(self.data, f)
        except OSError as e:
            log.warning("could not write store %s: %s", self.path, e)

    # ------------------------------------------------------------------

    @property
    def keyboard_position(self) -> str:
        return self.data["keyboard_position"]

    @keyboard_position.setter
    def keyboard_position(self, side: str) -> None:
        if side not in KEYBOARD_POSITIONS:
            raise ValueError(f"keyboard position must be one of {KEYBOARD_POSITIONS}")
        self.data["keyboard_position"] = side
        self._save()

    @property
    def high_score(self) -> int:
        return self.data["high_score"]

    @property
    def seen_help(self) -> bool:
        return self.data["seen_help"]

    def mark_help_seen(self) -> None:
        if not self.data["seen_help"]:
            self.data["seen_help"] = True
            self._save()

    def record_score(self, score: int) -> bool:
        """Keep the best score; True if `score` beat it."""
        if score > self.data["high_score"]:
            self.data["high_score"] = int(score)
            self._save()
            return True
        return False
