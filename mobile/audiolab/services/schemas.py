"""Pydantic schemas for classifier responses."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ClassificationResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    class_label: int = Field(alias="class", strict=True)
    confidence: float = Field(strict=True, ge=0.0, le=1.0)
