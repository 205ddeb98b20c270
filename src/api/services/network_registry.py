"""In-memory stand-in for the remote neural network service."""

from __future__ import annotations

import io
import json
import threading
import time
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple

import numpy as np
import soundfile as sf

from ..metrics import TRAINING_DURATION
from ..settings import APISettings


class RegistryError(Exception):
    """Request is well formed but cannot be served in the current state."""


class AudioDecodeError(ValueError):
    pass


class NetworkRegistry:
    """Nearest-centroid classifier over clip RMS energy, keyed by network name."""

    def __init__(self, settings: APISettings) -> None:
        self.settings = settings
        self.name: Optional[str] = None
        self.centroids: Dict[int, float] = {}
        self._lock = threading.Lock()

    @property
    def trained(self) -> bool:
        return bool(self.centroids)

    def init(self, name: str) -> None:
        with self._lock:
            self.name = name
            self.centroids = self._load(name)

    def save(self) -> Path:
        with self._lock:
            if not self.name:
                raise RegistryError("Nenhuma rede neural iniciada.")
            target = self._network_path(self.name)
            target.parent.mkdir(parents=True, exist_ok=True)
            payload = {
                "name": self.name,
                "saved_at": time.time(),
                "centroids": {str(label): value for label, value in self.centroids.items()},
            }
            target.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
            return target

    @TRAINING_DURATION.time()
    def train(self, clips: Sequence[bytes], labels: Sequence[int]) -> Dict[int, float]:
        if len(clips) != len(labels):
            raise ValueError("Quantidade de arquivos e rótulos diferente.")
        if not clips:
            raise ValueError("Nenhum arquivo de áudio recebido.")
        energies: Dict[int, list[float]] = {}
        for clip, label in zip(clips, labels):
            energies.setdefault(int(label), []).append(self.clip_energy(clip))
        with self._lock:
            if not self.name:
                raise RegistryError("Nenhuma rede neural iniciada.")
            self.centroids = {label: float(np.mean(values)) for label, values in energies.items()}
            return dict(self.centroids)

    def classify(self, clip: bytes) -> Tuple[int, float]:
        with self._lock:
            centroids = dict(self.centroids)
        if not centroids:
            raise RegistryError("Rede neural não treinada.")
        energy = self.clip_energy(clip)
        labels = sorted(centroids)
        weights = np.array([1.0 / (abs(energy - centroids[label]) + 1e-6) for label in labels])
        probabilities = weights / weights.sum()
        best = int(np.argmax(probabilities))
        confidence = max(float(probabilities[best]), self.settings.confidence_floor)
        return labels[best], min(confidence, 1.0)

    @staticmethod
    def clip_energy(clip: bytes) -> float:
        try:
            data, _rate = sf.read(io.BytesIO(clip), dtype="float32", always_2d=True)
        except Exception as exc:
            raise AudioDecodeError(f"Áudio inválido: {exc}") from exc
        if data.size == 0:
            return 0.0
        mono = data[:, 0]
        return float(np.sqrt(np.mean(mono ** 2)))

    def _network_path(self, name: str) -> Path:
        safe = "".join(ch if ch.isalnum() or ch in "-_" else "_" for ch in name)
        return Path(self.settings.data_dir) / "networks" / f"{safe}.json"

    def _load(self, name: str) -> Dict[int, float]:
        path = self._network_path(name)
        if not path.exists():
            return {}
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            return {int(label): float(value) for label, value in raw.get("centroids", {}).items()}
        except (OSError, ValueError, AttributeError):
            return {}


__all__ = ["NetworkRegistry", "RegistryError", "AudioDecodeError"]
