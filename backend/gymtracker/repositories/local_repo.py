# gymtracker/repositories/local_repo.py
from __future__ import annotations
import json
import os
from pathlib import Path

from gymtracker.repositories.base import KeyValueBackend

ROUTINES_KEY = "gym_routines"
HISTORY_KEY = "gym_history"


def dumps(value) -> str:
    """Compact JSON, the same text ``JSON.stringify`` would produce."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


class JsonFileKeyValue:
    """Key-value store persisted as one JSON object on disk."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        with self.path.open(encoding="utf-8") as fh:
            return json.load(fh)

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as fh:
            json.dump(data, fh, ensure_ascii=False)
        os.replace(tmp, self.path)

    def check(self) -> None:
        """Raise if the file is unreadable or its directory cannot be written."""
        self._read()
        directory = self.path.parent
        while not directory.exists():
            directory = directory.parent
        if not os.access(directory, os.W_OK):
            raise PermissionError(f"{directory} is not writable")

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)


class KeyValueStoreBackend:
    """Stores each collection as a JSON string under its own key."""

    def __init__(self, kv: KeyValueBackend):
        self.kv = kv

    def load(self) -> tuple[list[dict], list[dict]]:
        routines = self.kv.get(ROUTINES_KEY)
        history = self.kv.get(HISTORY_KEY)
        return (
            json.loads(routines) if routines else [],
            json.loads(history) if history else [],
        )

    def save(self, routines: list[dict], history: list[dict]) -> None:
        self.kv.set(ROUTINES_KEY, dumps(routines))
        self.kv.set(HISTORY_KEY, dumps(history))
