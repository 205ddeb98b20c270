"""Live classification loop: record, upload, interpret, repeat."""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional

from ..config import CONFIG
from ..store.sample_store import SampleStore
from .logger import LogBuffer
from .network import ClassifierClient
from .schemas import ClassificationResult

IDLE_LABEL = "Categoria"
NEUTRAL = "neutral"
STRONG_COLORS = {0: "class0", 1: "class1"}


class LiveState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"
    UPLOADING = "uploading"
    INTERPRETING = "interpreting"
    STOPPED = "stopped"
    FAILED = "failed"


@dataclass(frozen=True)
class ResultDisplay:
    label: str
    color: str
    strong: bool


@dataclass(frozen=True)
class LiveSnapshot:
    state: LiveState = LiveState.IDLE
    label: str = IDLE_LABEL
    color: str = NEUTRAL
    error: Optional[str] = None
    cycles: int = 0

    @property
    def active(self) -> bool:
        return self.state in (LiveState.RECORDING, LiveState.UPLOADING, LiveState.INTERPRETING)


def describe_result(result: ClassificationResult, threshold: float = CONFIG.strong_confidence) -> ResultDisplay:
    label = f"Classe {result.class_label}"
    if result.confidence >= threshold:
        return ResultDisplay(label=label, color=STRONG_COLORS.get(result.class_label, NEUTRAL), strong=True)
    percent = int(result.confidence * 100)
    return ResultDisplay(label=f"{label} com {percent}% de confiança", color=NEUTRAL, strong=False)


Listener = Callable[[LiveSnapshot], None]


class LiveClassifier:
    """Runs cycles back to back on one worker thread.

    ``recorder`` needs ``record(path, duration) -> bool`` and ``stop()``;
    ``client`` needs ``classify(path) -> ClassificationResult``.
    """

    def __init__(
        self,
        recorder,
        client: ClassifierClient,
        store: SampleStore,
        logger: LogBuffer,
        *,
        clip_seconds: float = CONFIG.clip_seconds,
        strong_confidence: float = CONFIG.strong_confidence,
    ) -> None:
        self.recorder = recorder
        self.client = client
        self.store = store
        self.logger = logger
        self.clip_seconds = clip_seconds
        self.strong_confidence = strong_confidence
        self._lock = threading.RLock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._snapshot = LiveSnapshot()
        self._listeners: List[Listener] = []

    @property
    def snapshot(self) -> LiveSnapshot:
        return self._snapshot

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def start(self) -> bool:
        with self._lock:
            if self._thread and self._thread.is_alive():
                return False
            self._stop_event.clear()
            self._publish(LiveSnapshot(state=LiveState.RECORDING))
            self._thread = threading.Thread(target=self._run, daemon=True)
            self._thread.start()
        self.logger.add("Live classification started")
        return True

    def stop(self, *, join_timeout: float = 2.0) -> None:
        with self._lock:
            if self._stop_event.is_set() and not self._snapshot.active:
                return
            self._stop_event.set()
            if self._snapshot.state is not LiveState.FAILED:
                self._publish(LiveSnapshot(state=LiveState.STOPPED, cycles=self._snapshot.cycles))
        self.recorder.stop()
        self.logger.add("Live classification stopped")
        thread = self._thread
        if thread and thread is not threading.current_thread():
            thread.join(timeout=join_timeout)

    def _run(self) -> None:
        while not self._stop_event.is_set():
            if not self.run_cycle():
                break

    def run_cycle(self) -> bool:
        """Execute one cycle; returns whether another should follow."""
        if self._stop_event.is_set():
            return False
        self._update(state=LiveState.RECORDING)
        path = self.store.scratch_path()
        try:
            completed = self.recorder.record(path, self.clip_seconds)
        except Exception as exc:
            self._fail(f"Erro na gravação: {exc}")
            return False
        if self._stop_event.is_set():
            return False
        if not completed:
            self._fail("Erro na gravação: captura não concluída")
            return False

        self._update(state=LiveState.UPLOADING)
        try:
            result = self.client.classify(path)
        except Exception as exc:
            self._fail(f"Erro na classificação: {exc}")
            return False

        display = describe_result(result, self.strong_confidence)
        with self._lock:
            if self._stop_event.is_set():
                self.logger.add("Late classification result discarded")
                return False
            self._publish(
                replace(
                    self._snapshot,
                    state=LiveState.INTERPRETING,
                    label=display.label,
                    color=display.color,
                    cycles=self._snapshot.cycles + 1,
                )
            )
        self.logger.add(f"{display.label} ({result.confidence:.2f})")
        return True

    def _update(self, **changes) -> None:
        with self._lock:
            if self._stop_event.is_set():
                return
            self._publish(replace(self._snapshot, **changes))

    def _fail(self, message: str) -> None:
        with self._lock:
            if self._stop_event.is_set():
                self.logger.add(f"Discarded after stop: {message}")
                return
            self._stop_event.set()
            self._publish(
                LiveSnapshot(state=LiveState.FAILED, error=message, cycles=self._snapshot.cycles)
            )
        self.logger.error(message)

    def _publish(self, snapshot: LiveSnapshot) -> None:
        self._snapshot = snapshot
        for listener in list(self._listeners):
            listener(snapshot)


__all__ = ["LiveClassifier", "LiveSnapshot", "LiveState", "ResultDisplay", "describe_result"]
