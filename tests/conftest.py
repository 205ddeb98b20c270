"""Pytest configuration helpers."""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest
import soundfile as sf


def _ensure_repo_on_path() -> None:
    """Allow tests to import from repo modules without setting PYTHONPATH."""
    repo_root = Path(__file__).resolve().parents[1]
    path_str = str(repo_root)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)


_ensure_repo_on_path()


@pytest.fixture()
def make_wav():
    """Write a short mono 16-bit WAV at ``path`` with a constant amplitude."""

    def _make(path: Path, amplitude: int = 0, seconds: float = 0.1, sample_rate: int = 44100) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        frames = int(sample_rate * seconds)
        samples = np.full(frames, amplitude, dtype=np.int16)
        sf.write(str(path), samples, sample_rate, format="WAV", subtype="PCM_16")
        return path

    return _make
