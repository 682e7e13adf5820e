# cxsynth/settings.py
from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings for cxsynth.
    """

    # --- Search defaults ---
    ALGORITHM: str = "astar"  # "bfs" | "mitm" | "astar" | "astar-stabiliser"
    DEPTH: int = 5
    TIMEOUT: float | None = None  # seconds

    # --- Files ---
    TARGET: str = "in"
    MOVES: str = "all_to_all"
    OUTPUT: str = "out"

    # --- Verification ---
    VERIFY: bool = True
    BACKEND: str = "stim"  # "stim" | "qiskit"

    # --- Runtime ---
    LOG_LEVEL: str = "INFO"
    model_config = SettingsConfigDict(
        env_prefix="CXSYNTH_",
        env_file=".env",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
