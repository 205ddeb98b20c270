"""Bounded activity log shared by the client components."""

from __future__ import annotations

import logging
import threading
from collections import deque
from datetime import datetime
from typing import List

LOGGER_NAME = "audiolab"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


class LogBuffer:
    """Keeps the latest lines for the on-screen log and mirrors them to logging."""

    def __init__(self, max_lines: int = 200, *, logger: logging.Logger | None = None) -> None:
        self._lines: deque[str] = deque(maxlen=max(1, max_lines))
        self._lock = threading.Lock()
        self._logger = logger or logging.getLogger(LOGGER_NAME)

    def add(self, message: str, *, level: int = logging.INFO) -> None:
        stamp = datetime.now().strftime("%H:%M:%S")
        with self._lock:
            self._lines.append(f"[{stamp}] {message}")
        self._logger.log(level, message)

    def error(self, message: str) -> None:
        self.add(message, level=logging.ERROR)

    def get(self) -> List[str]:
        with self._lock:
            return list(self._lines)

    def clear(self) -> None:
        with self._lock:
            self._lines.clear()

    def __len__(self) -> int:
        return len(self._lines)


__all__ = ["LogBuffer", "configure_logging", "LOGGER_NAME"]
