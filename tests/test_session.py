import httpx

from mobile.audiolab.services.logger import LogBuffer
from mobile.audiolab.services.network import EMPTY_NAME_MESSAGE, ClassifierClient
from mobile.audiolab.services.session import NetworkSession
from mobile.audiolab.store.settings_store import NetworkNameSlot, SettingsStore


def make_session(tmp_path, handler):
    settings = SettingsStore(tmp_path / "settings.json")
    settings.update(server_url="http://lab.test")
    slot = NetworkNameSlot(settings)
    client = ClassifierClient(settings, client=httpx.Client(transport=httpx.MockTransport(handler)))
    return NetworkSession(client, slot, LogBuffer(20)), slot


def test_save_persists_name_on_echo_phrase(tmp_path):
    session, slot = make_session(tmp_path, lambda request: httpx.Response(200, text="Rede neural alfa salva com sucesso!"))
    session.name = "alfa"

    assert session.save() == "Rede neural alfa salva com sucesso!"
    assert slot.get() == "alfa"


def test_save_ignores_phrase_for_other_name(tmp_path):
    session, slot = make_session(tmp_path, lambda request: httpx.Response(200, text="Rede neural beta salva com sucesso!"))
    session.name = "alfa"

    session.save()
    assert slot.get() is None


def test_save_failure_does_not_persist(tmp_path):
    session, slot = make_session(tmp_path, lambda request: httpx.Response(500))
    session.name = "alfa"

    assert session.save().startswith("Error:")
    assert slot.get() is None


def test_initialize_with_empty_name_skips_network(tmp_path):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200)

    session, _ = make_session(tmp_path, handler)
    assert session.initialize("") == EMPTY_NAME_MESSAGE
    assert calls == []


def test_session_restores_last_saved_name(tmp_path):
    session, slot = make_session(tmp_path, lambda request: httpx.Response(200))
    slot.set("gama")
    restored, _ = make_session(tmp_path, lambda request: httpx.Response(200))
    assert restored.name == "gama"
    assert restored.last_saved() == "gama"

    restored.forget()
    assert restored.name == ""
    assert SettingsStore(tmp_path / "settings.json").get().last_saved_network == ""
