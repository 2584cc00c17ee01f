import json

import pytest

from jokelist.errors import StorageError
from jokelist.models import ShrunkRecord
from jokelist.store import CacheStore, storage_key, timestamp_key


@pytest.fixture
def store(tmp_path):
    return CacheStore(tmp_path / "storage.json")


def _records(n=2):
    return [ShrunkRecord(id=i, summary=f"joke {i}...", category="Pun", type="single") for i in range(n)]


def test_keys():
    assert storage_key("Programming") == "jokes:Programming"
    assert timestamp_key(storage_key("Programming")) == "jokes:Programming:timestamp"


def test_load_unset_key(store):
    assert store.load("jokes:Pun") is None


def test_save_then_load(store):
    result = store.save("jokes:Pun", _records())

    assert result.ok and result.error is None
    assert store.load("jokes:Pun") == _records()


def test_values_are_json_strings_on_disk(store):
    store.save("jokes:Pun", _records(1))
    store.set_item("jokes:Pun:timestamp", "1700000000000")

    on_disk = json.loads(store.path.read_text(encoding="utf-8"))
    assert json.loads(on_disk["jokes:Pun"]) == [
        {"id": 0, "summary": "joke 0...", "category": "Pun", "type": "single"}
    ]
    assert on_disk["jokes:Pun:timestamp"] == "1700000000000"


def test_unparseable_value_loads_as_absent(store, caplog):
    store.set_item("jokes:Pun", "{not json")
    assert store.load("jokes:Pun") is None
    assert "Error loading cached jokes" in caplog.text


def test_wrong_shape_loads_as_absent(store):
    store.set_item("jokes:Pun", json.dumps({"summary": "x"}))
    assert store.load("jokes:Pun") is None
    store.set_item("jokes:Pun", json.dumps([{"id": 1}]))
    assert store.load("jokes:Pun") is None


def test_quota_exceeded_is_swallowed(tmp_path):
    small = CacheStore(tmp_path / "storage.json", quota_bytes=64)

    result = small.save("jokes:Pun", _records(10))

    assert not result.ok
    assert isinstance(result.error, StorageError)
    assert small.load("jokes:Pun") is None


def test_set_item_raises_on_quota(tmp_path):
    small = CacheStore(tmp_path / "storage.json", quota_bytes=10)
    with pytest.raises(StorageError, match="quota"):
        small.set_item("jokes:Pun:timestamp", "1700000000000")


def test_write_failure_is_swallowed(tmp_path):
    # A directory where the file should be makes every write fail.
    target = tmp_path / "storage.json"
    target.mkdir()
    broken = CacheStore(target)

    result = broken.save("jokes:Pun", _records())

    assert not result.ok
    assert broken.load("jokes:Pun") is None
    assert not (tmp_path / "storage.json.tmp").exists()


def test_clear_is_idempotent(store):
    store.save("jokes:Pun", _records())

    first = store.clear("jokes:Pun")
    after_first = store.keys()
    second = store.clear("jokes:Pun")

    assert first.ok and second.ok
    assert store.keys() == after_first == []
    assert store.load("jokes:Pun") is None


def test_corrupt_backing_file_reads_as_empty(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("garbage", encoding="utf-8")
    store = CacheStore(path)

    assert store.keys() == []
    assert store.save("jokes:Dark", _records(1)).ok
    assert store.keys() == ["jokes:Dark"]


def test_two_stores_share_the_file(tmp_path):
    a = CacheStore(tmp_path / "storage.json")
    b = CacheStore(tmp_path / "storage.json")
    a.save("jokes:Pun", _records(1))
    assert b.load("jokes:Pun") == _records(1)
