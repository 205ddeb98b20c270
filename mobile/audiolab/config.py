"""Client configuration resolved from the environment."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional, Tuple

from pydantic import BaseModel, Field


def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else None


class ClientConfig(BaseModel):
    app_name: str = Field(default="Laboratório IA")
    server_url: str = Field(default=os.getenv("AUDIOLAB_SERVER_URL", "http://localhost:8080"))
    # None disables the client timeout; training requests can take minutes.
    request_timeout: Optional[float] = Field(default_factory=lambda: _optional_float("AUDIOLAB_REQUEST_TIMEOUT"))
    sample_rate: int = 44100
    channels: int = 1
    clip_seconds: float = Field(default=float(os.getenv("AUDIOLAB_CLIP_SECONDS", "3.0")))
    strong_confidence: float = 0.8
    record_durations: Tuple[int, ...] = tuple(range(5, 61, 5))
    settings_file: str = "settings.json"
    samples_dir: str = "samples"
    log_history: int = 200
    log_level: str = Field(default=os.getenv("AUDIOLAB_LOG_LEVEL", "INFO"))


@lru_cache()
def get_config() -> ClientConfig:
    return ClientConfig()


CONFIG = get_config()
