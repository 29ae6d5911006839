"""
Storage — Контракт key-value хранилища и реализации

Движок вызывает только два асинхронных метода: get_item(key) и
set_item(key, value); значения — JSON-строки. Любой сбой хранилища
оборачивается в PersistenceFailure и подавляется движком: in-memory состояние
остаётся источником истины до конца жизни процесса.
"""

import asyncio
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable


class PersistenceFailure(Exception):
    """Ошибка чтения/записи/разбора сохранённого состояния"""

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(f"{key}: {message}")


@runtime_checkable
class KeyValueStore(Protocol):
    """Асинхронное строковое key-value хранилище (per-device)"""

    async def get_item(self, key: str) -> Optional[str]: ...

    async def set_item(self, key: str, value: str) -> None: ...


class InMemoryKeyValueStore:
    """Хранилище в памяти процесса (тесты, эфемерные хосты)"""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def snapshot(self) -> dict[str, str]:
        """Копия содержимого"""
        return dict(self._data)


def atomic_write_text(path: Path, text: str, encoding: str = "utf-8") -> None:
    """
    Запись через временный файл и replace (файл не бывает наполовину записан).

    Временный файл уникален для каждого вызова и создаётся рядом с целевым,
    чтобы replace оставался в пределах одной файловой системы.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        "w",
        encoding=encoding,
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    ) as tmp:
        tmp.write(text)
        tmp_path = Path(tmp.name)
    try:
        os.replace(tmp_path, path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


class JsonFileKeyValueStore:
    """
    Хранилище в одном JSON-документе на диске.

    Файловый I/O выполняется в thread pool, чтобы не блокировать event loop.
    Чтение-изменение-запись документа идёт под блокировкой экземпляра.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not contain a JSON object")
        return data

    def _get(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def _write_key(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = value
            atomic_write_text(self.path, json.dumps(data, ensure_ascii=False, indent=2))

    async def get_item(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._get, key)

    async def set_item(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write_key, key, value)
