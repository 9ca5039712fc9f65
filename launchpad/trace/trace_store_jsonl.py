from __future__ import annotations

import json
from pathlib import Path
from typing import Any


class TraceStoreJSONL:
    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def append(self, event: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(event, ensure_ascii=False) + "\n")


class NullTraceStore:
    """
    Store used when no trace path is configured: events are dropped.
    """

    path = None

    def append(self, event: dict[str, Any]) -> None:
        return None
