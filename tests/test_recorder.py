import threading

import numpy as np
import soundfile as sf

from mobile.audiolab.audio.recorder import AudioRecorder
from mobile.audiolab.services.logger import LogBuffer


def make_recorder():
    recorder = AudioRecorder(LogBuffer(20))
    recorder._sd = None
    return recorder


def test_record_writes_mono_pcm16_wav(tmp_path):
    recorder = make_recorder()
    target = tmp_path / "class0" / "1.wav"

    assert recorder.record(target, 0.05) is True

    info = sf.info(str(target))
    assert info.samplerate == 44100
    assert info.channels == 1
    assert info.subtype == "PCM_16"
    assert info.format == "WAV"
    assert info.frames == int(round(44100 * 0.05))
    assert not recorder.is_recording


def test_record_overwrites_scratch_file_in_place(tmp_path):
    recorder = make_recorder()
    target = tmp_path / "live_classification.wav"
    recorder.record(target, 0.05)
    recorder.record(target, 0.1)
    assert sf.info(str(target)).frames == int(round(44100 * 0.1))


def test_stop_abandons_capture(tmp_path):
    recorder = make_recorder()
    target = tmp_path / "abandoned.wav"
    done = threading.Event()
    outcome = {}

    def on_complete(path, ok):
        outcome["ok"] = ok
        done.set()

    assert recorder.start(target, 5.0, on_complete) is True
    assert recorder.start(tmp_path / "second.wav", 5.0) is False
    recorder.stop()

    assert done.wait(timeout=3)
    assert outcome["ok"] is False
    assert not target.exists()
    assert not (tmp_path / "second.wav").exists()


def test_capture_uses_first_channel_from_device(tmp_path):
    class FakeDevice:
        def rec(self, frames, samplerate, channels, dtype):
            return np.stack([np.full(frames, 7, dtype=np.int16), np.zeros(frames, dtype=np.int16)], axis=1)

        def wait(self):
            return None

        def stop(self):
            return None

    recorder = AudioRecorder(LogBuffer(20))
    recorder._sd = FakeDevice()
    target = tmp_path / "device.wav"

    assert recorder.record(target, 0.01) is True
    data, rate = sf.read(str(target), dtype="int16")
    assert rate == 44100
    assert data.ndim == 1
    assert np.all(data == 7)


def test_unwritable_target_reports_failure(tmp_path):
    recorder = make_recorder()
    blocker = tmp_path / "not_a_dir"
    blocker.write_bytes(b"")
    done = threading.Event()
    outcome = {}

    def on_complete(path, ok):
        outcome["ok"] = ok
        done.set()

    assert recorder.start(blocker / "sub" / "a.wav", 0.01, on_complete) is True

    assert done.wait(timeout=3)
    assert outcome["ok"] is False
    assert not recorder.is_recording
    assert recorder.record(blocker / "b.wav", 0.01) is False
    assert any("Could not write" in line for line in recorder.logger.get())
