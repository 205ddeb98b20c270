"""Local WAV sample storage grouped into labeled buckets."""

from __future__ import annotations

import shutil
import time
from pathlib import Path
from typing import List, Optional

from ..audio.types import AudioSample
from .settings_store import NetworkNameSlot

CLASS0 = "class0"
CLASS1 = "class1"
CLASSIFY = "classify"
TEMP = "temp"
BUCKETS = (CLASS0, CLASS1, CLASSIFY, TEMP)
LABELED_BUCKETS = (CLASS0, CLASS1)

SAMPLE_SUFFIX = ".wav"
SCRATCH_NAME = "live_classification.wav"


class SampleStore:
    """Owns everything under ``root``; bucket names are subdirectories."""

    def __init__(self, root: Path, name_slot: NetworkNameSlot | None = None) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        self.name_slot = name_slot

    def bucket_dir(self, bucket: str) -> Path:
        return self.root / bucket

    def list_samples(self, bucket: str) -> List[AudioSample]:
        directory = self.bucket_dir(bucket)
        if not directory.is_dir():
            return []
        return [
            AudioSample(path=entry, bucket=bucket)
            for entry in directory.iterdir()
            if entry.is_file() and entry.suffix == SAMPLE_SUFFIX
        ]

    def most_recent(self, bucket: str) -> Optional[AudioSample]:
        # Plain string order; timestamp names of equal digit count sort by recency.
        samples = sorted(self.list_samples(bucket), key=lambda sample: sample.name, reverse=True)
        return samples[0] if samples else None

    def new_sample_path(self, bucket: str) -> Path:
        directory = self.bucket_dir(bucket)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{time.time()}{SAMPLE_SUFFIX}"
        while path.exists():
            path = directory / f"{time.time()}{SAMPLE_SUFFIX}"
        return path

    def scratch_path(self) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root / SCRATCH_NAME

    def scratch_sample(self) -> AudioSample:
        return AudioSample(path=self.scratch_path())

    def delete_sample(self, bucket: str, index: int) -> AudioSample:
        samples = self.list_samples(bucket)
        if index < 0 or index >= len(samples):
            raise IndexError(f"No sample #{index} in {bucket}")
        sample = samples[index]
        sample.path.unlink()
        return sample

    def delete_all(self) -> None:
        """Remove every file under the root and forget the saved network name."""
        if self.root.exists():
            for entry in self.root.iterdir():
                if entry.is_dir() and not entry.is_symlink():
                    shutil.rmtree(entry)
                else:
                    entry.unlink()
        if self.name_slot is not None:
            self.name_slot.clear()

    def count(self, bucket: str) -> int:
        return len(self.list_samples(bucket))

    @staticmethod
    def duration(sample: AudioSample) -> float:
        return sample.duration_seconds


__all__ = [
    "SampleStore",
    "BUCKETS",
    "LABELED_BUCKETS",
    "CLASS0",
    "CLASS1",
    "CLASSIFY",
    "TEMP",
    "SAMPLE_SUFFIX",
    "SCRATCH_NAME",
]
