import pytest

from eintsofia.infrastructure.persistence.key_value_store import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
)


def test_in_memory_store():
    store = InMemoryKeyValueStore({"a": "1"})

    store.set("b", "2")
    store.delete("a")
    store.delete("missing")

    assert store.get("a") is None
    assert store.get("b") == "2"
    assert "b" in store


def test_json_file_store_persists_across_instances(tmp_path):
    directory = tmp_path / "prompts"
    JsonFileKeyValueStore(directory).set("customPrompts_family", '{"version": 31}')

    reopened = JsonFileKeyValueStore(directory)

    assert reopened.get("customPrompts_family") == '{"version": 31}'
    assert (directory / "customPrompts_family.json").exists()
    assert not list(directory.glob("*.tmp"))


def test_json_file_store_delete(tmp_path):
    store = JsonFileKeyValueStore(tmp_path)
    store.set("k", "v")

    store.delete("k")
    store.delete("k")

    assert store.get("k") is None


@pytest.mark.parametrize("key", ["../escape", "a/b", ""])
def test_json_file_store_rejects_unsafe_keys(tmp_path, key):
    with pytest.raises(ValueError):
        JsonFileKeyValueStore(tmp_path).get(key)
