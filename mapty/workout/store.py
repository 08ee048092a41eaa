"""Local persistence for the workout list."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol

STORAGE_KEY = "workouts"


def _default_store_path() -> Path:
    return Path.home() / ".mapty" / "workouts.json"


class WorkoutStore(Protocol):
    def read_all(self) -> list[Any] | None: ...

    def write_all(self, records: list[dict[str, Any]]) -> bool: ...


class JsonFileStore:
    """Keeps the serialized workouts under one key of a JSON file."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or _default_store_path()

    def read_all(self) -> list[Any] | None:
        if not self.path.exists():
            return None
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            print(f"[STORE] ignoring unreadable {self.path}: {exc}")
            return None
        if not isinstance(payload, dict):
            return None
        records = payload.get(STORAGE_KEY)
        return records if isinstance(records, list) else None

    def write_all(self, records: list[dict[str, Any]]) -> bool:
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(
                json.dumps({STORAGE_KEY: records}, ensure_ascii=True, indent=2),
                encoding="utf-8",
            )
            tmp.replace(self.path)
        except OSError as exc:
            print(f"[STORE] write failed for {self.path}: {exc}")
            return False
        return True


class MemoryStore:
    def __init__(self, records: list[Any] | None = None) -> None:
        self.records = records
        self.writes = 0
        self.fail_writes = False

    def read_all(self) -> list[Any] | None:
        return self.records

    def write_all(self, records: list[dict[str, Any]]) -> bool:
        if self.fail_writes:
            return False
        self.records = json.loads(json.dumps(records))
        self.writes += 1
        return True
