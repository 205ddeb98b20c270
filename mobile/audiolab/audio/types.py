"""Dataclasses shared across audio helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import soundfile as sf


@dataclass(frozen=True, slots=True)
class AudioSample:
    """A recorded clip; identity is its filename."""

    path: Path
    bucket: Optional[str] = None

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def duration_seconds(self) -> float:
        """Duration read from the WAV header on every access."""
        return float(sf.info(str(self.path)).duration)


@dataclass(slots=True)
class LabeledBatch:
    """Samples and their integer labels, paired by position."""

    samples: List[AudioSample] = field(default_factory=list)
    labels: List[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        if len(self.samples) != len(self.labels):
            raise ValueError(
                f"Batch has {len(self.samples)} sample(s) but {len(self.labels)} label(s)"
            )

    def __len__(self) -> int:
        return len(self.samples)
