"""Tracks which server-side network the user is working on."""

from __future__ import annotations

from typing import Optional

from ..store.settings_store import NetworkNameSlot
from .logger import LogBuffer
from .network import ClassifierClient, is_save_success


class NetworkSession:
    def __init__(self, client: ClassifierClient, slot: NetworkNameSlot, logger: LogBuffer) -> None:
        self.client = client
        self.slot = slot
        self.logger = logger
        self.name: str = slot.get() or ""

    def initialize(self, name: str) -> str:
        self.name = name
        response = self.client.init_network(name)
        self.logger.add(f"initNN: {response}")
        return response

    def save(self) -> str:
        response = self.client.save_network()
        self.logger.add(f"saveNN: {response}")
        if self.name and is_save_success(response, self.name):
            self.slot.set(self.name)
        return response

    def last_saved(self) -> Optional[str]:
        return self.slot.get()

    def forget(self) -> None:
        self.name = ""
        self.slot.clear()


__all__ = ["NetworkSession"]
