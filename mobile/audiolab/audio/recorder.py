"""Timed WAV capture and playback on top of sounddevice."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Callable, Optional

import numpy as np
import soundfile as sf

from ..config import CONFIG
from ..services.logger import LogBuffer

# Mono 16-bit little-endian PCM at 44.1 kHz; the server assumes exactly this.
WAV_FORMAT = "WAV"
WAV_SUBTYPE = "PCM_16"
WAV_ENDIAN = "LITTLE"


class AudioRecorder:
    """One capture at a time; a second start while busy is refused."""

    def __init__(
        self,
        logger: LogBuffer,
        *,
        sample_rate: int = CONFIG.sample_rate,
        channels: int = CONFIG.channels,
    ) -> None:
        self.logger = logger
        self.sample_rate = sample_rate
        self.channels = channels
        self._busy = threading.Lock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._sd = self._try_import_sounddevice()

    def _try_import_sounddevice(self):
        try:
            import sounddevice as sd  # type: ignore

            return sd
        except Exception:
            return None

    @property
    def is_recording(self) -> bool:
        return self._busy.locked()

    def record(self, path: Path, duration: float) -> bool:
        """Capture ``duration`` seconds into ``path``; blocks until done.

        Returns False when the recorder is busy, the capture was stopped, or
        the device failed; nothing is written in those cases.
        """
        if not self._claim():
            return False
        return self._record_claimed(Path(path), duration)

    def start(
        self,
        path: Path,
        duration: float,
        on_complete: Callable[[Path, bool], None] | None = None,
    ) -> bool:
        """Run :meth:`record` on a background thread."""
        if not self._claim():
            return False

        def _worker() -> None:
            ok = self._record_claimed(Path(path), duration)
            if on_complete:
                on_complete(Path(path), ok)

        self._thread = threading.Thread(target=_worker, daemon=True)
        self._thread.start()
        return True

    def _claim(self) -> bool:
        if not self._busy.acquire(blocking=False):
            self.logger.add("Recorder busy; capture request ignored")
            return False
        self._stop.clear()
        return True

    def _record_claimed(self, path: Path, duration: float) -> bool:
        try:
            frames = max(1, int(round(self.sample_rate * duration)))
            self.logger.add(f"Recording started: {path.name}")
            pcm = self._capture_audio(frames, duration)
            if pcm is None:
                return False
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                self._write_wav(path, pcm)
            except (OSError, sf.SoundFileError) as exc:
                self.logger.error(f"Could not write {path.name}: {exc}")
                return False
            self.logger.add(f"Recording finished: {path.name}")
            return True
        finally:
            self._busy.release()

    def stop(self) -> None:
        if not self.is_recording:
            return
        self._stop.set()
        if self._sd:
            try:
                self._sd.stop()
            except Exception as exc:
                self.logger.add(f"sounddevice error: {exc}")
        self.logger.add("Recording stopped")

    def _capture_audio(self, frames: int, duration: float) -> Optional[np.ndarray]:
        if self._sd:
            try:
                data = self._sd.rec(frames, samplerate=self.sample_rate, channels=self.channels, dtype="int16")
                if self._stop.wait(timeout=duration):
                    return None
                self._sd.wait()
                if self._stop.is_set():
                    return None
                return self._to_mono_array(np.array(data, dtype=np.int16))
            except Exception as exc:
                self.logger.error(f"sounddevice error: {exc}")
                return None
        # No audio backend (CI, desktop without PortAudio): record silence.
        if self._stop.wait(timeout=duration):
            return None
        return np.zeros(frames, dtype=np.int16)

    def _write_wav(self, path: Path, samples: np.ndarray) -> None:
        sf.write(
            str(path),
            samples.astype(np.int16, copy=False),
            self.sample_rate,
            format=WAV_FORMAT,
            subtype=WAV_SUBTYPE,
            endian=WAV_ENDIAN,
        )

    def _to_mono_array(self, data: np.ndarray) -> np.ndarray:
        if data.ndim == 1:
            return data
        return data[:, 0]

    def play(self, path: Path) -> bool:
        if not self._sd:
            self.logger.add("Playback unavailable: no audio backend")
            return False
        try:
            data, rate = sf.read(str(path), dtype="int16")
            self._sd.play(data, rate)
        except Exception as exc:
            self.logger.error(f"Failed to play {Path(path).name}: {exc}")
            return False
        self.logger.add(f"Playing recording: {Path(path).name}")
        return True

    def stop_playing(self) -> None:
        if self._sd:
            self._sd.stop()


__all__ = ["AudioRecorder", "WAV_FORMAT", "WAV_SUBTYPE"]
