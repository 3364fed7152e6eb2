import asyncio
import copy
import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict

from npm_buttons.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class WorkspaceState(ABC):
    """Key-value state scoped to one workspace."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        pass

    @abstractmethod
    async def update(self, key: str, value: Any) -> None:
        pass


class MemoryWorkspaceState(WorkspaceState):
    def __init__(self, initial: Dict[str, Any] = None):
        self._values: Dict[str, Any] = copy.deepcopy(dict(initial or {}))

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._values:
            return default
        return copy.deepcopy(self._values[key])

    async def update(self, key: str, value: Any) -> None:
        self._values[key] = copy.deepcopy(value)


class JsonWorkspaceState(WorkspaceState):
    """Workspace state persisted as a single JSON object.

    Writes go to a temporary file in the same directory which then replaces
    the target, so readers only ever see complete snapshots.
    """
    def __init__(self, path: str):
        self._path = path
        self._lock = threading.Lock()
        self._values = self._read()

    @property
    def path(self) -> str:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            if key not in self._values:
                return default
            return copy.deepcopy(self._values[key])

    async def update(self, key: str, value: Any) -> None:
        with self._lock:
            values = dict(self._values)
        values[key] = copy.deepcopy(value)
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._write, key, values)
        with self._lock:
            self._values = values

    def _read(self) -> Dict[str, Any]:
        try:
            with open(self._path, "r", encoding="utf-8") as fp:
                data = json.load(fp)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable workspace state %s: %s", self._path, exc)
            return {}
        if not isinstance(data, dict):
            return {}
        return data

    def _write(self, key: str, values: Dict[str, Any]) -> None:
        directory = os.path.dirname(os.path.abspath(self._path))
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".state-", suffix=".json", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as fp:
                json.dump(values, fp, indent=2)
            os.replace(tmp_path, self._path)
            tmp_path = None
        except (OSError, TypeError, ValueError) as exc:
            raise PersistenceError(key, str(exc)) from exc
        finally:
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
