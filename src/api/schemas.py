"""Pydantic schemas for the sandbox API contracts."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class InitRequest(BaseModel):
    name: str = ""


class ClassifyResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    class_label: int = Field(alias="class")
    confidence: float
