import json
from datetime import datetime, timezone

import pytest

from constants import STORAGE_KEY
from errors import NotFoundError, ValidationError
from models import CodeKind, InputMode, Scenario
from scenarios import JsonFileBackend, MemoryBackend, ScenarioStore, new_scenario

RAW = {
    "city": "Mumbai", "height": "30.50", "man_v": "", "man_unit": "ms",
    "is_k1": "1.15", "is_k2": "1.0", "is_k3": "1.0", "is_k4": "1.0", "is_w": "12", "is_l": "20",
    "asce_V": "", "asce_exp": "0.85", "asce_kd": "0.85", "asce_kzt": "1.0",
}


def make(name="Tower A", **raw):
    return new_scenario(name, CodeKind.PRIMARY, InputMode.AUTO, dict(RAW, **raw))


@pytest.fixture
def store():
    return ScenarioStore(MemoryBackend())


def test_empty_storage_lists_nothing(store):
    assert store.list() == []


@pytest.mark.parametrize("blob", ["not json", "{\"a\": 1}", "[1, 2]", ""])
def test_corrupt_storage_lists_nothing(blob):
    store = ScenarioStore(MemoryBackend({STORAGE_KEY: blob}))
    assert store.list() == []


def test_save_then_load_round_trip(store):
    idx = store.save(make())
    loaded = store.load_at(idx)
    assert loaded.raw_inputs == RAW
    assert loaded.name == "Tower A"
    assert loaded.active_code is CodeKind.PRIMARY
    assert loaded.mode is InputMode.AUTO


def test_save_appends_and_returns_position(store):
    assert store.save(make("one")) == 0
    assert store.save(make("two")) == 1
    assert [s.name for s in store.list()] == ["one", "two"]


def test_duplicate_names_allowed(store):
    store.save(make("same"))
    store.save(make("same"))
    assert len(store.list()) == 2


@pytest.mark.parametrize("name", ["", "   "])
def test_save_rejects_blank_name(store, name):
    with pytest.raises(ValidationError):
        store.save(Scenario(name=name, active_code=CodeKind.PRIMARY, mode=InputMode.AUTO))
    assert store.list() == []


def test_delete_first_keeps_order(store):
    for name in ("a", "b", "c"):
        store.save(make(name))
    removed = store.delete_at(0)
    assert removed.name == "a"
    assert [s.name for s in store.list()] == ["b", "c"]


@pytest.mark.parametrize("index", [-1, 3, 10])
def test_out_of_bounds_index(store, index):
    for name in ("a", "b", "c"):
        store.save(make(name))
    with pytest.raises(NotFoundError):
        store.load_at(index)
    with pytest.raises(NotFoundError):
        store.delete_at(index)
    assert len(store.list()) == 3


def test_persisted_blob_format(store):
    ts = datetime(2025, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)
    store.save(Scenario(name="x", active_code=CodeKind.SECONDARY, mode=InputMode.MANUAL,
                        raw_inputs={"height": "10"}, created_at=ts))
    data = json.loads(store.backend.get(STORAGE_KEY))
    assert data == [{
        "name": "x",
        "time": "2025-01-02T03:04:05.678Z",
        "mode": "manual",
        "tab": "asce",
        "inputs": {"height": "10"},
    }]
    assert store.load_at(0).created_at == ts


def test_reads_blob_written_elsewhere():
    blob = json.dumps([{"name": "old", "time": "2024-05-06T07:08:09.000Z", "mode": "auto", "tab": "is",
                        "inputs": {"height": "12"}}])
    store = ScenarioStore(MemoryBackend({STORAGE_KEY: blob}))
    case = store.load_at(0)
    assert case.raw_inputs == {"height": "12"}
    assert case.created_at == datetime(2024, 5, 6, 7, 8, 9, tzinfo=timezone.utc)


def test_corrupt_storage_is_replaced_on_save():
    store = ScenarioStore(MemoryBackend({STORAGE_KEY: "garbage"}))
    assert store.save(make()) == 0
    assert len(store.list()) == 1


def test_json_file_backend(tmp_path):
    store = ScenarioStore(JsonFileBackend(tmp_path / "cases"))
    assert store.list() == []
    store.save(make("a"))
    store.save(make("b"))

    reopened = ScenarioStore(JsonFileBackend(tmp_path / "cases"))
    assert [s.name for s in reopened.list()] == ["a", "b"]
    assert reopened.load_at(1).raw_inputs == RAW
    assert (tmp_path / "cases" / f"{STORAGE_KEY}.json").exists()
    assert not list((tmp_path / "cases").glob("*.tmp"))


def test_label_contains_name():
    assert make("Tower A").label().startswith("Tower A • ")


def _entry(name, **extra):
    return dict({"name": name, "time": "2024-05-06T07:08:09.000Z", "mode": "auto", "tab": "is",
                 "inputs": {"height": "12"}}, **extra)


@pytest.fixture
def mixed_store():
    bad = {"name": "no time", "mode": "auto", "tab": "is", "inputs": {}}
    blob = json.dumps([_entry("a"), bad, _entry("b"), _entry("c", tab="wind-tunnel")])
    return ScenarioStore(MemoryBackend({STORAGE_KEY: blob})), bad


def test_malformed_entries_are_skipped_not_lost(mixed_store):
    store, bad = mixed_store
    assert [s.name for s in store.list()] == ["a", "b"]

    assert store.save(make("new")) == 2
    assert [s.name for s in store.list()] == ["a", "b", "new"]
    data = json.loads(store.backend.get(STORAGE_KEY))
    assert len(data) == 5
    assert data[1] == bad
    assert data[3]["tab"] == "wind-tunnel"


def test_delete_counts_readable_entries_only(mixed_store):
    store, bad = mixed_store
    assert store.delete_at(1).name == "b"
    assert [s.name for s in store.list()] == ["a"]
    data = json.loads(store.backend.get(STORAGE_KEY))
    assert [d["name"] for d in data] == ["a", "no time", "c"]
    with pytest.raises(NotFoundError):
        store.load_at(1)


def test_undecodable_file_reads_as_empty(tmp_path):
    (tmp_path / f"{STORAGE_KEY}.json").write_bytes(b"\xff\xfe\x00garbage")
    store = ScenarioStore(JsonFileBackend(tmp_path))
    assert store.list() == []
    with pytest.raises(NotFoundError):
        store.load_at(0)
    assert store.save(make("fresh")) == 0
    assert [s.name for s in store.list()] == ["fresh"]
