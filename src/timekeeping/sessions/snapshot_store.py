from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional, Protocol

from ..core.exceptions import StoreError

logger = logging.getLogger(__name__)


class SnapshotStore(Protocol):
    """Key-value store for in-progress session state, keyed by actor.

    Only a crash-recovery hint: the durable record store wins on conflict.
    """

    def save(self, actor_id: int, snapshot: dict[str, Any]) -> None:
        raise NotImplementedError

    def load(self, actor_id: int) -> Optional[dict[str, Any]]:
        raise NotImplementedError

    def clear(self, actor_id: int) -> None:
        raise NotImplementedError


class JsonFileSnapshotStore(SnapshotStore):
    """One JSON file per actor under ``directory``; writes are atomic (tmp + replace)."""

    def __init__(self, directory: str | Path):
        self._directory = Path(directory)

    def _path(self, actor_id: int) -> Path:
        return self._directory / f"session-{int(actor_id)}.json"

    def save(self, actor_id: int, snapshot: dict[str, Any]) -> None:
        path = self._path(actor_id)
        tmp = path.with_suffix(".json.tmp")
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(snapshot, sort_keys=True), encoding="utf-8")
            os.replace(tmp, path)
        except OSError as exc:
            raise StoreError(f"Could not write session snapshot {path}: {exc}") from exc

    def load(self, actor_id: int) -> Optional[dict[str, Any]]:
        path = self._path(actor_id)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StoreError(f"Could not read session snapshot {path}: {exc}") from exc

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable session snapshot %s", path)
            return None
        return data if isinstance(data, dict) else None

    def clear(self, actor_id: int) -> None:
        try:
            self._path(actor_id).unlink(missing_ok=True)
        except OSError as exc:
            raise StoreError(f"Could not remove session snapshot for actor {actor_id}: {exc}") from exc
