import asyncio
import logging
import os
import signal
from typing import Optional, Set

from npm_buttons.engine.base import TaskEngine
from npm_buttons.engine.models import (
    ExecutionHandle,
    ProcessEndEvent,
    ProcessStartEvent,
    ShellTask,
)
from npm_buttons.exceptions import EngineStartError

logger = logging.getLogger(__name__)
output_logger = logging.getLogger("npm_buttons.engine.output")

_POSIX = os.name == "posix"


class ShellExecution(ExecutionHandle):
    def __init__(self, task: ShellTask, process: asyncio.subprocess.Process):
        self._task = task
        self._process = process
        self._terminate_requested = False

    @property
    def task(self) -> ShellTask:
        return self._task

    @property
    def pid(self) -> Optional[int]:
        return self._process.pid

    @property
    def exit_code(self) -> Optional[int]:
        return self._process.returncode

    @property
    def is_alive(self) -> bool:
        return self._process.returncode is None and not self._terminate_requested

    def terminate(self) -> None:
        if self._process.returncode is not None:
            return
        self._terminate_requested = True
        try:
            if _POSIX:
                # the shell runs in its own session; signal the whole group
                os.killpg(os.getpgid(self._process.pid), signal.SIGTERM)
            else:
                self._process.terminate()
        except ProcessLookupError:
            logger.debug("Process already exited: %s", self._process.pid)

    async def wait(self) -> int:
        return await self._process.wait()

    def __repr__(self):
        return f"ShellExecution(name={self._task.name!r}, pid={self.pid}, exit_code={self.exit_code})"


class ShellTaskEngine(TaskEngine):
    """Run tasks as shell subprocesses on the current event loop.

    When ``capture_output`` is set, the merged stdout/stderr of every task is
    forwarded line by line to the ``npm_buttons.engine.output`` logger;
    otherwise the child inherits the parent's streams.
    """
    def __init__(self, capture_output: bool = False, env=None,
                 shutdown_timeout: float = 5.0, event_history_max: Optional[int] = 100):
        super().__init__(event_history_max=event_history_max)
        self._capture_output = capture_output
        self._env = env
        self._shutdown_timeout = shutdown_timeout
        self._executions: Set[ShellExecution] = set()
        self._watchers: Set[asyncio.Task] = set()

    @property
    def executions(self):
        return set(self._executions)

    async def start(self, task: ShellTask) -> ShellExecution:
        kwargs = {}
        if self._capture_output:
            kwargs["stdout"] = asyncio.subprocess.PIPE
            kwargs["stderr"] = asyncio.subprocess.STDOUT
        if _POSIX:
            kwargs["start_new_session"] = True
        try:
            process = await asyncio.create_subprocess_shell(
                task.command,
                cwd=task.cwd,
                env=self._env,
                **kwargs,
            )
        except OSError as exc:
            raise EngineStartError(task.command, task.cwd, str(exc)) from exc
        execution = ShellExecution(task, process)
        self._executions.add(execution)
        self.publish(ProcessStartEvent(execution=execution, pid=process.pid))
        watcher = asyncio.get_running_loop().create_task(self._watch(execution))
        self._watchers.add(watcher)
        watcher.add_done_callback(self._watchers.discard)
        return execution

    async def _watch(self, execution: ShellExecution):
        exit_code = None
        try:
            if self._capture_output:
                await self._pump_output(execution)
            exit_code = await execution.wait()
        finally:
            self._executions.discard(execution)
            self.publish(ProcessEndEvent(execution=execution, exit_code=exit_code))

    async def _pump_output(self, execution: ShellExecution):
        stream = execution._process.stdout
        if stream is None:
            return
        while True:
            line = await stream.readline()
            if not line:
                break
            output_logger.info("[%s] %s", execution.task.name,
                               line.decode("utf-8", errors="replace").rstrip())

    async def shutdown(self, wait: bool = True):
        for execution in list(self._executions):
            execution.terminate()
        watchers = list(self._watchers)
        if wait and watchers:
            done, pending = await asyncio.wait(watchers, timeout=self._shutdown_timeout)
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
        else:
            for task in watchers:
                task.cancel()
        await super().shutdown(wait=wait)
