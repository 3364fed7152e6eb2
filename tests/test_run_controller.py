import asyncio
import os

import pytest

from npm_buttons.detect import PackageManagerDetector
from npm_buttons.engine.models import ProcessEndEvent, ProcessStartEvent, ShellTask, TaskDefinition
from npm_buttons.exceptions import PersistenceError
from npm_buttons.runs.controller import RunController
from npm_buttons.runs.history import HistoryStore
from npm_buttons.runs.registry import RunRegistry
from npm_buttons.storage import MemoryWorkspaceState
from npm_buttons.views.rows import ViewSynchronizer

from conftest import FailingState, FakeEngine, FakeHandle


class Harness:
    def __init__(self, root, engine, state=None):
        self.root = root
        self.engine = engine
        self.state = state if state is not None else MemoryWorkspaceState()
        self.registry = RunRegistry()
        self.history = HistoryStore(self.state)
        self.views = ViewSynchronizer(root, self.history, self.registry)
        self.refreshes = 0
        self.controller = RunController(
            root, self.registry, self.history, engine,
            detector=PackageManagerDetector(root),
            on_change=self._refresh,
        )

    def _refresh(self):
        self.refreshes += 1
        self.views.refresh()


def _external(engine, kind="npm", script="build", path=None):
    task = ShellTask(name=script or "", command="npm run build", cwd=path or "/",
                     definition=TaskDefinition(kind=kind, script=script, path=path))
    return FakeHandle(task)


@pytest.mark.asyncio
async def test_toggle_scenario_with_yarn_lockfile(workspace, engine):
    open(os.path.join(workspace, "yarn.lock"), "w").close()
    harness = Harness(workspace, engine)
    key = f"{workspace}::build"

    assert await harness.controller.toggle(key) is True

    assert len(engine.started) == 1
    task = engine.started[0].task
    assert task.command == "yarn build"
    assert task.cwd == workspace
    assert task.definition == TaskDefinition(kind="npm", script="build", path=workspace)
    assert harness.registry.is_running(key)
    assert harness.history.items == [key]
    rows = harness.views.compute_rows()
    assert [(r.label, r.relative_path, r.is_running) for r in rows] == [("build", ".", True)]


@pytest.mark.asyncio
async def test_second_toggle_terminates_once(workspace, engine):
    harness = Harness(workspace, engine)
    key = f"{workspace}::build"
    await harness.controller.toggle(key)
    handle = engine.started[0]

    assert await harness.controller.toggle(key) is False

    assert not harness.registry.is_running(key)
    assert handle.terminate_calls == 1
    assert harness.history.items == [key]
    assert harness.refreshes == 2


@pytest.mark.asyncio
async def test_npm_is_the_default_command(workspace, engine):
    harness = Harness(workspace, engine)
    await harness.controller.toggle(f"{workspace}/pkgA::test")
    assert engine.started[0].task.command == "npm run test"
    assert engine.started[0].task.cwd == os.path.join(workspace, "pkgA")


@pytest.mark.asyncio
async def test_relative_key_is_canonicalized(workspace, engine):
    harness = Harness(workspace, engine)
    await harness.controller.toggle("pkgA::test")
    canonical = f"{os.path.join(workspace, 'pkgA')}::test"
    assert harness.registry.keys() == [canonical]
    assert harness.history.items == [canonical]

    assert await harness.controller.toggle(canonical) is False
    assert engine.started[0].terminate_calls == 1


@pytest.mark.asyncio
async def test_engine_rejection_leaves_no_entry(workspace):
    engine = FakeEngine(fail=True)
    harness = Harness(workspace, engine)
    key = f"{workspace}::build"

    assert await harness.controller.toggle(key) is False

    assert not harness.registry.is_running(key)
    assert harness.history.items == []
    assert harness.refreshes == 1


@pytest.mark.asyncio
async def test_persistence_failure_propagates_but_run_is_tracked(workspace, engine):
    state = FailingState()
    state.fail = True
    harness = Harness(workspace, engine, state=state)
    key = f"{workspace}::build"

    with pytest.raises(PersistenceError):
        await harness.controller.toggle(key)

    assert harness.registry.get(key) is engine.started[0]
    assert harness.history.items == []
    assert harness.refreshes == 1


@pytest.mark.asyncio
async def test_concurrent_toggles_end_stopped(workspace, engine):
    harness = Harness(workspace, engine)
    key = f"{workspace}::build"

    await asyncio.gather(harness.controller.toggle(key), harness.controller.toggle(key))

    assert not harness.registry.is_running(key)
    assert len(engine.started) == 2
    assert all(handle.terminate_calls == 1 for handle in engine.started)


@pytest.mark.asyncio
async def test_external_start_is_registered(workspace, engine):
    harness = Harness(workspace, engine)
    handle = _external(engine, path=os.path.join(workspace, "pkgA"), script="dev")

    await harness.controller.reconcile_external_start(ProcessStartEvent(execution=handle))

    key = f"{os.path.join(workspace, 'pkgA')}::dev"
    assert harness.registry.get(key) is handle
    assert harness.history.items == [key]
    rows = harness.views.compute_rows()
    assert [(r.label, r.relative_path, r.is_running) for r in rows] == [("pkgA:dev", "pkgA", True)]

    await harness.controller.toggle(key)
    assert handle.terminate_calls == 1
    assert not harness.registry.is_running(key)


@pytest.mark.asyncio
async def test_external_start_without_path_uses_root(workspace, engine):
    harness = Harness(workspace, engine)
    handle = _external(engine, path=None, script="lint")
    await harness.controller.reconcile_external_start(ProcessStartEvent(execution=handle))
    assert harness.registry.is_running(f"{workspace}::lint")


@pytest.mark.asyncio
async def test_external_start_of_other_kind_is_ignored(workspace, engine):
    harness = Harness(workspace, engine)
    for handle in (_external(engine, kind="shell"), _external(engine, script=None)):
        await harness.controller.reconcile_external_start(ProcessStartEvent(execution=handle))
    untyped = FakeHandle(task=None)
    await harness.controller.reconcile_external_start(ProcessStartEvent(execution=untyped))
    assert harness.registry.keys() == []
    assert harness.history.items == []
    assert harness.refreshes == 0


@pytest.mark.asyncio
async def test_duck_typed_definition_is_accepted(workspace, engine):
    class Task:
        definition = {"type": "npm", "script": "build", "path": workspace}

    class Execution:
        task = Task()
        is_alive = True

        def terminate(self):
            pass

    harness = Harness(workspace, engine)
    await harness.controller.reconcile_external_start(ProcessStartEvent(execution=Execution()))
    assert harness.registry.is_running(f"{workspace}::build")


@pytest.mark.asyncio
async def test_start_event_for_own_run_is_idempotent(workspace, engine):
    harness = Harness(workspace, engine)
    key = f"{workspace}::build"
    await harness.controller.toggle(key)
    handle = engine.started[0]

    await harness.controller.reconcile_external_start(ProcessStartEvent(execution=handle))

    assert harness.registry.get(key) is handle
    assert harness.history.items == [key]


@pytest.mark.asyncio
async def test_start_event_for_stopped_run_is_not_registered(workspace, engine):
    harness = Harness(workspace, engine)
    key = f"{workspace}::build"
    await harness.controller.toggle(key)
    await harness.controller.toggle(key)
    handle = engine.started[0]

    await harness.controller.reconcile_external_start(ProcessStartEvent(execution=handle))

    assert not harness.registry.is_running(key)


@pytest.mark.asyncio
async def test_end_event_removes_run(workspace, engine):
    harness = Harness(workspace, engine)
    key = f"{workspace}::build"
    await harness.controller.toggle(key)
    refreshes = harness.refreshes

    harness.controller.reconcile_external_end(engine.finish(engine.started[0], exit_code=1))

    assert not harness.registry.is_running(key)
    assert harness.history.items == [key]
    assert harness.refreshes == refreshes + 1


@pytest.mark.asyncio
async def test_end_event_for_untracked_run_is_noop(workspace, engine):
    harness = Harness(workspace, engine)
    other = f"{workspace}::other"
    await harness.controller.toggle(other)
    before = dict((k, harness.registry.get(k)) for k in harness.registry.keys())
    refreshes = harness.refreshes

    handle = _external(engine, path=workspace, script="build")
    harness.controller.reconcile_external_end(ProcessEndEvent(execution=handle, exit_code=0))

    assert dict((k, harness.registry.get(k)) for k in harness.registry.keys()) == before
    assert harness.refreshes == refreshes


@pytest.mark.asyncio
async def test_late_end_event_keeps_newer_run(workspace, engine):
    harness = Harness(workspace, engine)
    key = f"{workspace}::build"
    await harness.controller.toggle(key)
    await harness.controller.toggle(key)
    await harness.controller.toggle(key)
    first, second = engine.started

    harness.controller.reconcile_external_end(engine.finish(first, exit_code=143))

    assert harness.registry.get(key) is second


@pytest.mark.asyncio
async def test_unexpected_engine_error_is_logged_not_raised(workspace, caplog):
    class BrokenEngine(FakeEngine):
        async def start(self, task):
            raise RuntimeError("engine crashed")

    harness = Harness(workspace, BrokenEngine())
    key = f"{workspace}::build"

    assert await harness.controller.toggle(key) is False

    assert not harness.registry.is_running(key)
    assert harness.history.items == []
    assert harness.refreshes == 1
    failures = [r for r in caplog.records if r.getMessage() == f"Failed to start {key}"]
    assert failures[0].data["command"] == "npm run build"
    assert "engine crashed" in failures[0].data["reason"]


@pytest.mark.asyncio
async def test_newer_external_execution_replaces_tracked_one(workspace, engine):
    harness = Harness(workspace, engine)
    key = f"{workspace}::build"
    first = _external(engine, path=workspace)
    second = _external(engine, path=workspace)

    await harness.controller.reconcile_external_start(ProcessStartEvent(execution=first))
    await harness.controller.reconcile_external_start(ProcessStartEvent(execution=second))
    assert harness.registry.get(key) is second

    first.ended = True
    harness.controller.reconcile_external_end(ProcessEndEvent(execution=first, exit_code=0))
    assert harness.registry.get(key) is second
    assert [row.is_running for row in harness.views.compute_rows()] == [True]

    await harness.controller.toggle(key)
    assert second.terminate_calls == 1
    assert first.terminate_calls == 0
