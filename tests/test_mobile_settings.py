from mobile.audiolab.store.settings_store import NetworkNameSlot, SettingsStore


def test_settings_store_roundtrip(tmp_path):
    path = tmp_path / "settings.json"
    store = SettingsStore(path)
    assert store.get().server_url == ""
    assert store.get().last_saved_network == ""

    store.update(server_url="http://192.168.0.93:8080", last_saved_network="rede-a", unknown="x")
    data = path.read_text()
    assert "192.168.0.93" in data
    assert "unknown" not in data

    store2 = SettingsStore(path)
    assert store2.get().server_url == "http://192.168.0.93:8080"
    assert store2.get().last_saved_network == "rede-a"


def test_settings_store_tolerates_corrupt_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    store = SettingsStore(path)
    assert store.get().server_url == ""


def test_network_name_slot_get_set_clear(tmp_path):
    settings = SettingsStore(tmp_path / "settings.json")
    slot = NetworkNameSlot(settings)
    assert slot.get() is None

    slot.set("rede-b")
    assert NetworkNameSlot(SettingsStore(tmp_path / "settings.json")).get() == "rede-b"

    slot.clear()
    assert slot.get() is None
    assert NetworkNameSlot(SettingsStore(tmp_path / "settings.json")).get() is None
