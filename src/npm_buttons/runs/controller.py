import logging
from typing import Callable, Optional

from npm_buttons.detect import PackageManagerDetector, build_run_command
from npm_buttons.engine.models import ProcessEndEvent, ProcessStartEvent, ShellTask, TaskDefinition
from npm_buttons.exceptions import AlreadyRunningError, EngineStartError, InvalidTaskDefinitionError
from npm_buttons.runs.history import HistoryStore
from npm_buttons.runs.keys import RunKey
from npm_buttons.runs.registry import RunRegistry

logger = logging.getLogger(__name__)


class RunController:
    """Start and stop runs, and reconcile engine events with the registry.

    Every operation finishes by calling ``on_change`` so the views are
    recomputed from the updated state.
    """
    def __init__(self, root_dir: str, registry: RunRegistry, history: HistoryStore,
                 engine, detector: Optional[PackageManagerDetector] = None,
                 task_kind: str = "npm",
                 on_change: Optional[Callable[[], None]] = None):
        self._root_dir = root_dir
        self._registry = registry
        self._history = history
        self._engine = engine
        self._detector = detector or PackageManagerDetector(root_dir)
        self._task_kind = task_kind
        self._on_change = on_change

    @property
    def root_dir(self) -> str:
        return self._root_dir

    def canonicalize(self, key: str) -> RunKey:
        return RunKey.parse(key, self._root_dir)

    async def toggle(self, key: str) -> bool:
        """Stop ``key`` if it is running, start it otherwise.

        Returns whether the run is registered as running afterwards.
        """
        run_key = self.canonicalize(key)
        full = run_key.canonical
        try:
            if self._registry.is_running(full):
                self._stop(full)
            else:
                await self._start(run_key)
        finally:
            self._changed()
        return self._registry.is_running(full)

    def _stop(self, full: str):
        handle = self._registry.stop(full)
        if handle is None:
            return
        handle.terminate()
        logger.info("Terminated: %s", full)

    async def _start(self, run_key: RunKey):
        full = run_key.canonical
        task = None
        try:
            kind = await self._detector.detect(run_key.package_dir)
            task = ShellTask(
                name=run_key.script,
                command=build_run_command(kind, run_key.script),
                cwd=run_key.package_dir,
                definition=TaskDefinition(kind=self._task_kind, script=run_key.script, path=run_key.package_dir),
                source=self._task_kind,
            )
            handle = await self._engine.start(task)
        except Exception as exc:
            logger.error("Failed to start %s", full, extra={"data": {
                "command": task.command if task is not None else None,
                "cwd": run_key.package_dir,
                "reason": exc.reason if isinstance(exc, EngineStartError) else repr(exc),
            }})
            return
        try:
            self._registry.start(full, handle)
        except AlreadyRunningError:
            # started twice before either launch returned: settle on stopped
            handle.terminate()
            self._stop(full)
            logger.warning("Duplicate start of %s converted to a stop", full)
            return
        logger.info("Started task: %s", full, extra={"data": task.command})
        await self._history.add(full)

    def _key_for(self, execution) -> Optional[RunKey]:
        task = getattr(execution, "task", None)
        try:
            definition = TaskDefinition.from_raw(getattr(task, "definition", None))
        except InvalidTaskDefinitionError as exc:
            logger.debug("Ignoring execution without a usable definition: %s", exc)
            return None
        if definition.kind != self._task_kind or not definition.script:
            return None
        return RunKey(definition.path or self._root_dir, definition.script).resolve(self._root_dir)

    async def reconcile_external_start(self, event: ProcessStartEvent) -> None:
        run_key = self._key_for(event.execution)
        if run_key is None:
            return
        full = run_key.canonical
        current = self._registry.get(full)
        if current is event.execution:
            logger.debug("Start event for tracked run: %s", full)
        elif not getattr(event.execution, "is_alive", True):
            logger.debug("Start event for a run already stopping: %s", full)
        elif current is not None:
            # newest execution wins; end events of the older one no longer match
            self._registry.stop(full)
            self._registry.start(full, event.execution)
            logger.info("Detected newer execution: %s", full)
        else:
            self._registry.start(full, event.execution)
            logger.info("Detected external start: %s", full)
        try:
            await self._history.add(full)
        finally:
            self._changed()

    def reconcile_external_end(self, event: ProcessEndEvent) -> None:
        run_key = self._key_for(event.execution)
        if run_key is None:
            return
        full = run_key.canonical
        if not self._registry.release(full, event.execution):
            return
        logger.info("Task finished: %s (exitCode=%s)", full, event.exit_code)
        self._changed()

    def _changed(self):
        if self._on_change is not None:
            self._on_change()
