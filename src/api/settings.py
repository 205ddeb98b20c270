"""Sandbox server settings resolved from the environment."""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, Field


class APISettings(BaseModel):
    app_name: str = Field(default="AudioLab Sandbox API")
    version: str = Field(default="1.0.0")
    data_dir: str = Field(default=os.getenv("SANDBOX_DATA_DIR", "data"))
    confidence_floor: float = Field(
        default=float(os.getenv("SANDBOX_CONFIDENCE_FLOOR", "0.0"))
    )


@lru_cache()
def get_settings() -> APISettings:
    return APISettings()
