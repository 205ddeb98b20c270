"""Persistent settings storage for the server URL and last saved network."""

from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional


@dataclass(slots=True)
class AppSettings:
    server_url: str = ""
    last_saved_network: str = ""


class SettingsStore:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._settings = self._load()

    def _load(self) -> AppSettings:
        if not self.path.exists():
            return AppSettings()
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            raw = {}
        if not isinstance(raw, dict):
            raw = {}
        settings = AppSettings()
        settings.server_url = str(raw.get("server_url", "") or "")
        settings.last_saved_network = str(raw.get("last_saved_network", "") or "")
        return settings

    def get(self) -> AppSettings:
        return self._settings

    def update(self, **kwargs) -> AppSettings:
        for key, value in kwargs.items():
            if not hasattr(self._settings, key):
                continue
            setattr(self._settings, key, value or "")
        self._persist()
        return self._settings

    def _persist(self) -> None:
        self.path.write_text(json.dumps(asdict(self._settings), ensure_ascii=False), encoding="utf-8")


class NetworkNameSlot:
    """Single durable slot holding the last network confirmed as saved."""

    def __init__(self, settings: SettingsStore) -> None:
        self.settings = settings

    def get(self) -> Optional[str]:
        return self.settings.get().last_saved_network or None

    def set(self, name: str) -> None:
        self.settings.update(last_saved_network=name)

    def clear(self) -> None:
        self.settings.update(last_saved_network="")


__all__ = ["AppSettings", "SettingsStore", "NetworkNameSlot"]
