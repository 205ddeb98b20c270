"""Client components against the sandbox server through fastapi's TestClient."""

import pytest
from fastapi.testclient import TestClient

from mobile.audiolab.services.live import LiveClassifier, LiveState
from mobile.audiolab.services.logger import LogBuffer
from mobile.audiolab.services.network import ClassifierClient, TRAINING_SUCCESS
from mobile.audiolab.services.session import NetworkSession
from mobile.audiolab.services.trainer import TrainingOrchestrator
from mobile.audiolab.store.sample_store import SampleStore
from mobile.audiolab.store.settings_store import NetworkNameSlot, SettingsStore
from src.api.app import create_app
from src.api.settings import APISettings


class WavRecorder:
    def __init__(self, make_wav, amplitude):
        self.make_wav = make_wav
        self.amplitude = amplitude

    def record(self, path, duration):
        self.make_wav(path, amplitude=self.amplitude, seconds=duration)
        return True

    def stop(self):
        pass


@pytest.fixture()
def lab(tmp_path):
    settings = SettingsStore(tmp_path / "phone" / "settings.json")
    settings.update(server_url="http://testserver")
    slot = NetworkNameSlot(settings)
    store = SampleStore(tmp_path / "phone" / "samples", slot)
    server = TestClient(create_app(APISettings(data_dir=str(tmp_path / "server"))))
    client = ClassifierClient(settings, client=server)
    logger = LogBuffer(50)
    return {
        "slot": slot,
        "store": store,
        "client": client,
        "logger": logger,
        "session": NetworkSession(client, slot, logger),
        "trainer": TrainingOrchestrator(store, client, logger),
    }


def test_full_lab_workflow(lab, make_wav):
    store = lab["store"]
    session = lab["session"]

    assert session.initialize("alfa") == "Rede neural alfa iniciada com sucesso!"
    for amplitude in (50, 80, 60):
        make_wav(store.new_sample_path("class0"), amplitude=amplitude)
    for amplitude in (9000, 9500):
        make_wav(store.new_sample_path("class1"), amplitude=amplitude)

    assert lab["trainer"].train_all() == TRAINING_SUCCESS
    assert store.list_samples("class0") == []
    assert store.list_samples("class1") == []

    assert session.save() == "Rede neural alfa salva com sucesso!"
    assert lab["slot"].get() == "alfa"

    live = LiveClassifier(WavRecorder(make_wav, 9200), lab["client"], store, lab["logger"], clip_seconds=0.1)
    assert live.run_cycle() is True
    assert live.snapshot.state is LiveState.INTERPRETING
    assert live.snapshot.label.startswith("Classe 1")


def test_training_failure_keeps_samples(lab, make_wav):
    store = lab["store"]
    make_wav(store.new_sample_path("class0"))

    # No network initialized: the server answers 409 and nothing is purged.
    response = lab["trainer"].train_all()
    assert response.startswith("Error: server returned 409")
    assert store.count("class0") == 1


def test_live_loop_fails_when_untrained(lab, make_wav):
    lab["session"].initialize("beta")
    live = LiveClassifier(WavRecorder(make_wav, 100), lab["client"], lab["store"], lab["logger"], clip_seconds=0.1)

    assert live.run_cycle() is False
    assert live.snapshot.state is LiveState.FAILED
    assert live.snapshot.error == "Erro na classificação: Classification failed: 409"
