# leethub/store.py
import json
import os
from typing import Any, Dict, Optional, Protocol

from .config import STATS_KEY, STORE_PATH


class KeyValueStore(Protocol):
    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...


class MemoryStore:
    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self.data: Dict[str, Any] = dict(data or {})

    def get(self, key: str) -> Any:
        return self.data.get(key)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value


class JsonFileStore:
    """Key-value store kept in a single JSON file.

    The file is re-read on every get, so edits made by hand (e.g. pasting a
    token in) are picked up without a restart. A missing file reads as empty.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path or STORE_PATH

    def _load(self) -> Dict[str, Any]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            return {}

    def get(self, key: str) -> Any:
        return self._load().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        tmp = f"{self.path}.tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp, self.path)


def get_and_initialize_stats(store: KeyValueStore, problem_name: str) -> Dict[str, Any]:
    """Whole stats object, with an (empty) record for `problem_name` guaranteed."""
    stats = store.get(STATS_KEY) or {}
    stats.setdefault(problem_name, {})
    return stats
