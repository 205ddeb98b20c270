import pytest

from mobile.audiolab.store.sample_store import BUCKETS, SCRATCH_NAME, SampleStore
from mobile.audiolab.store.settings_store import NetworkNameSlot, SettingsStore


@pytest.fixture()
def store(tmp_path):
    slot = NetworkNameSlot(SettingsStore(tmp_path / "settings.json"))
    return SampleStore(tmp_path / "samples", slot)


def test_list_samples_filters_wav_files(store):
    bucket = store.bucket_dir("class0")
    bucket.mkdir(parents=True)
    (bucket / "1.wav").write_bytes(b"a")
    (bucket / "2.wav").write_bytes(b"b")
    (bucket / "notes.txt").write_text("x")
    (bucket / "nested.wav").mkdir()

    names = sorted(sample.name for sample in store.list_samples("class0"))
    assert names == ["1.wav", "2.wav"]
    assert all(sample.bucket == "class0" for sample in store.list_samples("class0"))


def test_list_samples_of_missing_bucket_is_empty(store):
    assert store.list_samples("class1") == []
    assert store.most_recent("class1") is None


def test_most_recent_uses_string_order(store):
    bucket = store.bucket_dir("classify")
    bucket.mkdir(parents=True)
    for name in ("1000.wav", "1001.wav", "999.wav"):
        (bucket / name).write_bytes(b"x")

    assert store.most_recent("classify").name == "999.wav"


def test_new_sample_path_is_timestamped(store):
    first = store.new_sample_path("class1")
    assert first.parent == store.bucket_dir("class1")
    assert first.parent.is_dir()
    assert first.suffix == ".wav"
    float(first.stem)


def test_scratch_path_is_fixed(store):
    assert store.scratch_path() == store.root / SCRATCH_NAME
    assert store.scratch_path() == store.scratch_path()


def test_delete_sample_by_index(store):
    bucket = store.bucket_dir("class0")
    bucket.mkdir(parents=True)
    (bucket / "1.wav").write_bytes(b"a")
    (bucket / "2.wav").write_bytes(b"b")
    target = store.list_samples("class0")[1]

    deleted = store.delete_sample("class0", 1)

    assert deleted == target
    assert not target.path.exists()
    assert store.count("class0") == 1


def test_delete_sample_bad_index(store):
    with pytest.raises(IndexError):
        store.delete_sample("class0", 0)


def test_delete_all_clears_every_bucket_and_name_slot(store, make_wav):
    for bucket in BUCKETS:
        make_wav(store.new_sample_path(bucket))
    make_wav(store.scratch_path())
    (store.root / "stray.bin").write_bytes(b"x")
    store.name_slot.set("rede")

    store.delete_all()

    for bucket in BUCKETS:
        assert store.list_samples(bucket) == []
    assert list(store.root.iterdir()) == []
    assert store.name_slot.get() is None


def test_duration_is_read_from_file(store, make_wav):
    path = make_wav(store.new_sample_path("class0"), seconds=0.5)
    sample = store.list_samples("class0")[0]
    assert sample.path == path
    assert store.duration(sample) == pytest.approx(0.5, abs=1e-3)
