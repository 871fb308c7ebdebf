# numbl_config.py
# Runtime configuration for numbl. Values left empty are read from the environment.

import logging
import os
from dataclasses import dataclass

ALLOWED_GIVENS = (4, 5)


@dataclass
class NumblConfig:
    """Configuration for the numbl app and puzzle generation."""

    # Local key-value store (high score, keyboard side, seen help)
    store_path: str = ""

    # Number of pre-filled cells per puzzle (0 = take from env, default 4)
    givens: int = 0

    # Logging
    log_level: str = ""

    # Sharing
    share_url: str = ""

    def __post_init__(self):
        if not self.store_path:
            self.store_path = os.getenv("NUMBL_STORE_PATH", "numbl_store.json")
        if not self.givens:
            self.givens = int(os.getenv("NUMBL_GIVENS", "4"))
        if not self.log_level:
            self.log_level = os.getenv("NUMBL_LOG_LEVEL", "WARNING")
        if not self.share_url:
            self.share_url = os.getenv("NUMBL_SHARE_URL", "https://numbl.net")

        if self.givens not in ALLOWED_GIVENS:
            raise ValueError(f"givens must be one of {ALLOWED_GIVENS}, got {self.givens}")
        self.log_level = self.log_level.upper()


def configure_logging(config: NumblConfig) -> None:
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
