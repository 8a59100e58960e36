"""
Runtime configuration from environment variables.

    BRASS_ENV                 development | production (default development)
    BRASS_LOG_LEVEL           logging level name (default INFO)
    BRASS_ALLOWED_ORIGINS     comma separated CORS origins (default *)
    BRASS_SEED                seed for new games when a request gives none
    BRASS_STALE_GAME_SECONDS  idle time before a game may be evicted (default 3600)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import os


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class Settings:
    env: str = "development"
    log_level: str = "INFO"
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])
    seed: int | None = None
    stale_game_seconds: int = 3600

    @classmethod
    def from_env(cls) -> Settings:
        seed = os.getenv("BRASS_SEED")
        return cls(
            env=os.getenv("BRASS_ENV", "development"),
            log_level=os.getenv("BRASS_LOG_LEVEL", "INFO").upper(),
            allowed_origins=[
                origin.strip()
                for origin in os.getenv("BRASS_ALLOWED_ORIGINS", "*").split(",")
                if origin.strip()
            ],
            seed=int(seed) if seed else None,
            stale_game_seconds=int(os.getenv("BRASS_STALE_GAME_SECONDS", "3600")),
        )

    @property
    def is_production(self) -> bool:
        return self.env == "production"


def configure_logging(*, level: str | None = None) -> None:
    """Configure root logging once; later calls only change the level."""
    if level is None:
        level = os.getenv("BRASS_LOG_LEVEL", "INFO").upper()

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    root_logger.setLevel(level)
    logging.getLogger("brass").setLevel(level)
