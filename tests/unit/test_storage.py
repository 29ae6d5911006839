"""Тесты key-value хранилищ (in-memory и JSON-файл)."""

import asyncio

import pytest

from papersim.persistence import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    atomic_write_text,
)


class TestInMemoryStore:
    """Тесты InMemoryKeyValueStore"""

    def test_roundtrip(self) -> None:
        store = InMemoryKeyValueStore()

        async def scenario():
            assert await store.get_item("k") is None
            await store.set_item("k", '{"a": 1}')
            return await store.get_item("k")

        assert asyncio.run(scenario()) == '{"a": 1}'

    def test_snapshot_is_copy(self) -> None:
        store = InMemoryKeyValueStore({"k": "v"})
        snap = store.snapshot()
        snap["k"] = "changed"
        assert store.snapshot() == {"k": "v"}

    def test_protocol(self) -> None:
        assert isinstance(InMemoryKeyValueStore(), KeyValueStore)
        assert isinstance(JsonFileKeyValueStore("x.json"), KeyValueStore)


class TestJsonFileStore:
    """Тесты JsonFileKeyValueStore"""

    def test_missing_file(self, tmp_path) -> None:
        store = JsonFileKeyValueStore(tmp_path / "state.json")
        assert asyncio.run(store.get_item("paper.state.v3")) is None

    def test_survives_new_instance(self, tmp_path) -> None:
        path = tmp_path / "nested" / "state.json"

        async def write():
            store = JsonFileKeyValueStore(path)
            await store.set_item("paper.state.v3", '{"cash": 1}')
            await store.set_item("watchlist.v1", '["AAPL"]')

        asyncio.run(write())
        reopened = JsonFileKeyValueStore(path)
        assert asyncio.run(reopened.get_item("paper.state.v3")) == '{"cash": 1}'
        assert asyncio.run(reopened.get_item("watchlist.v1")) == '["AAPL"]'
        assert not path.with_suffix(".json.tmp").exists()

    def test_concurrent_writes_keep_every_key(self, tmp_path) -> None:
        """Параллельные set_item не теряют ключи и не оставляют временных файлов"""
        path = tmp_path / "state.json"
        store = JsonFileKeyValueStore(path)

        async def write_all():
            await asyncio.gather(*(store.set_item(f"k{i}", str(i)) for i in range(20)))

        asyncio.run(write_all())
        reopened = JsonFileKeyValueStore(path)
        for i in range(20):
            assert asyncio.run(reopened.get_item(f"k{i}")) == str(i)
        assert list(tmp_path.iterdir()) == [path]

    def test_non_object_file(self, tmp_path) -> None:
        path = tmp_path / "state.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError):
            asyncio.run(JsonFileKeyValueStore(path).get_item("k"))


def test_atomic_write_text(tmp_path) -> None:
    path = tmp_path / "a" / "b.txt"
    atomic_write_text(path, "first")
    atomic_write_text(path, "second")
    assert path.read_text(encoding="utf-8") == "second"
    assert [p.name for p in path.parent.iterdir()] == ["b.txt"]
