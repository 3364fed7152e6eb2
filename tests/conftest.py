import asyncio
import os

import pytest

from npm_buttons.engine.base import TaskEngine
from npm_buttons.engine.models import ExecutionHandle, ProcessEndEvent, ProcessStartEvent
from npm_buttons.exceptions import EngineStartError, PersistenceError
from npm_buttons.storage import MemoryWorkspaceState


class FakeHandle(ExecutionHandle):
    def __init__(self, task):
        self._task = task
        self.terminate_calls = 0
        self.ended = False

    @property
    def task(self):
        return self._task

    @property
    def is_alive(self):
        return not self.ended and self.terminate_calls == 0

    def terminate(self):
        self.terminate_calls += 1


class FakeEngine(TaskEngine):
    """Engine double recording started tasks and publishing start events."""
    def __init__(self, fail=False):
        super().__init__()
        self.fail = fail
        self.started = []

    async def start(self, task):
        await asyncio.sleep(0)
        if self.fail:
            raise EngineStartError(task.command, task.cwd, "rejected")
        handle = FakeHandle(task)
        self.started.append(handle)
        self.publish(ProcessStartEvent(execution=handle, pid=1000 + len(self.started)))
        return handle

    def finish(self, handle, exit_code=0):
        handle.ended = True
        event = ProcessEndEvent(execution=handle, exit_code=exit_code)
        self.publish(event)
        return event


class FailingState(MemoryWorkspaceState):
    def __init__(self, initial=None):
        super().__init__(initial)
        self.fail = False

    async def update(self, key, value):
        if self.fail:
            raise PersistenceError(key, "disk full")
        await super().update(key, value)


async def settle(rounds=10):
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def engine():
    return FakeEngine()


@pytest.fixture
def workspace(tmp_path):
    root = tmp_path / "repo"
    (root / "pkgA").mkdir(parents=True)
    (root / "package.json").write_text('{"name": "repo"}', encoding="utf-8")
    (root / "pkgA" / "package.json").write_text('{"name": "pkgA"}', encoding="utf-8")
    return os.path.normpath(str(root))
