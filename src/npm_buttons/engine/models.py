import time
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Optional

from npm_buttons.exceptions import InvalidTaskDefinitionError


@dataclass(frozen=True)
class TaskDefinition:
    """Identity of an engine task: its kind plus the script and directory it runs."""
    kind: str
    script: Optional[str] = None
    path: Optional[str] = None

    @classmethod
    def from_raw(cls, raw) -> "TaskDefinition":
        """Validate a loosely shaped definition (mapping or object).

        Accepts either ``kind`` or the ``type`` field used by editor task
        definitions.
        """
        if isinstance(raw, TaskDefinition):
            return raw
        if raw is None:
            raise InvalidTaskDefinitionError("Task definition is missing")
        if isinstance(raw, Mapping):
            getter = raw.get
        else:
            getter = lambda name, default=None: getattr(raw, name, default)
        kind = getter("kind", None) or getter("type", None)
        if not isinstance(kind, str) or kind == "":
            raise InvalidTaskDefinitionError(f"Task definition has no kind: {raw!r}")
        script = getter("script", None)
        path = getter("path", None)
        if script is not None and not isinstance(script, str):
            raise InvalidTaskDefinitionError(f"Task script must be a string: {script!r}")
        if path is not None and not isinstance(path, str):
            raise InvalidTaskDefinitionError(f"Task path must be a string: {path!r}")
        return cls(kind=kind, script=script or None, path=path or None)


@dataclass(frozen=True)
class ShellTask:
    """A shell command to run in a working directory."""
    name: str
    command: str
    cwd: str
    definition: TaskDefinition
    source: Optional[str] = None


class ExecutionHandle(ABC):
    """A live execution owned by an engine."""

    @property
    @abstractmethod
    def task(self) -> ShellTask:
        pass

    @property
    @abstractmethod
    def is_alive(self) -> bool:
        pass

    @abstractmethod
    def terminate(self) -> None:
        pass


@dataclass
class ProcessStartEvent:
    execution: ExecutionHandle
    pid: Optional[int] = None
    ts: float = field(default_factory=time.time)


@dataclass
class ProcessEndEvent:
    execution: ExecutionHandle
    exit_code: Optional[int] = None
    ts: float = field(default_factory=time.time)
