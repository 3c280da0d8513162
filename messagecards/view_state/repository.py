"""Device-local storage for the per-card "reveal already shown" flag."""
from __future__ import annotations

import json
import os
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from messagecards.config import runtime_config
from messagecards.view_state.models import VIEW_STATE_NAMESPACE, ViewStateResult

VIEW_STATE_FILENAME = "view_state.json"


class ViewStateRepository(Protocol):
    def read(self, card_id: str) -> ViewStateResult: ...
    def write(self, card_id: str) -> ViewStateResult: ...


class InMemoryViewStateRepository:
    def __init__(self) -> None:
        self._viewed: Dict[str, bool] = {}

    def read(self, card_id: str) -> ViewStateResult:
        return ViewStateResult.success(self._viewed.get(card_id, False))

    def write(self, card_id: str) -> ViewStateResult:
        self._viewed[card_id] = True
        return ViewStateResult.success(True)


class FileViewStateRepository:
    """JSON file holding {"card_viewed": {<card_id>: true}}; survives restarts."""

    def __init__(self, path: Optional[str | Path] = None) -> None:
        self._path = Path(path) if path else runtime_config.get_view_state_dir() / VIEW_STATE_FILENAME
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        with self._path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, dict):
            raise ValueError("view state file is not a JSON object")
        return data

    def read(self, card_id: str) -> ViewStateResult:
        with self._lock:
            try:
                data = self._load()
            except (OSError, ValueError) as exc:
                return ViewStateResult.failure(f"read failed: {exc}")
        namespace = data.get(VIEW_STATE_NAMESPACE)
        if not isinstance(namespace, dict):
            return ViewStateResult.success(False)
        return ViewStateResult.success(namespace.get(card_id) is True)

    def write(self, card_id: str) -> ViewStateResult:
        with self._lock:
            try:
                try:
                    data = self._load()
                except ValueError:
                    data = {}
                namespace = data.get(VIEW_STATE_NAMESPACE)
                if not isinstance(namespace, dict):
                    namespace = {}
                namespace[card_id] = True
                data[VIEW_STATE_NAMESPACE] = namespace
                self._path.parent.mkdir(parents=True, exist_ok=True)
                tmp = self._path.with_suffix(".tmp")
                with tmp.open("w", encoding="utf-8") as fh:
                    json.dump(data, fh, ensure_ascii=False)
                os.replace(tmp, self._path)
            except OSError as exc:
                return ViewStateResult.failure(f"write failed: {exc}")
        return ViewStateResult.success(True)
