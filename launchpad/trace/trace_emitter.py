from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Union

from .trace_store_jsonl import NullTraceStore, TraceStoreJSONL

TraceStore = Union[TraceStoreJSONL, NullTraceStore]


class TraceEmitter:
    def __init__(self, store: TraceStore, run_id: str):
        self._store = store
        self._run_id = run_id

    @classmethod
    def for_path(cls, path: Path | None, run_id: str) -> "TraceEmitter":
        store: TraceStore = TraceStoreJSONL(path) if path is not None else NullTraceStore()
        return cls(store=store, run_id=run_id)

    @property
    def run_id(self) -> str:
        return self._run_id

    def emit(
        self,
        event_type: str,
        *,
        message: str | None = None,
        data: dict[str, Any] | None = None,
    ) -> None:
        event: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "run_id": self._run_id,
            "event_type": event_type,
        }
        if message is not None:
            event["message"] = message
        if data is not None:
            event["data"] = data

        self._store.append(event)
