import asyncio
import logging
import threading
from typing import Optional

from npm_buttons.config import Config
from npm_buttons.consoles.console import ButtonsConsole
from npm_buttons.engine.shell_engine import ShellTaskEngine
from npm_buttons.session.manager import NpmButtonsSession

logger = logging.getLogger(__name__)


class ConsoleFactory:
    """Bootstrap a session on a background event loop and run the console.

    Example:
        factory = ConsoleFactory(Config(workspace_root="/path/to/repo"))
        factory.start()

    Notes:
        - The session, the engine and every run live on the loop thread; the
          console only submits coroutines to it.
        - ``shutdown`` deactivates the session, which terminates every run
          still registered, before stopping the loop.
    """
    def __init__(self, config: Optional[Config] = None, engine=None, state=None):
        if config is None:
            config = Config()
        self.config = config
        self.engine = engine if engine is not None else ShellTaskEngine(capture_output=True)
        self.session = NpmButtonsSession(config.workspace_root, self.engine, state=state, config=config)
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._loop_thread: Optional[threading.Thread] = None
        self._shutdown_called = False

    @property
    def loop(self):
        return self._loop

    def start(self):
        """Activate the session and block in the console until it exits."""
        self.start_loop()
        try:
            self.submit(self.session.activate())
            ButtonsConsole(self.session, self._loop, self.config.console).run()
        finally:
            self.shutdown()

    def start_loop(self):
        if self._loop_thread is not None and self._loop_thread.is_alive():
            return
        loop = asyncio.new_event_loop()
        self._loop = loop
        ready = threading.Event()

        def _run_loop():
            asyncio.set_event_loop(loop)
            loop.call_soon(ready.set)
            loop.run_forever()
            pending = asyncio.all_tasks(loop)
            if pending:
                for task in pending:
                    task.cancel()
                loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
            loop.close()

        self._loop_thread = threading.Thread(
            target=_run_loop,
            name=self.config.console.loop_thread_name,
            daemon=True,
        )
        self._loop_thread.start()
        ready.wait()

    def submit(self, coro, timeout: Optional[float] = None):
        return asyncio.run_coroutine_threadsafe(coro, self._loop).result(timeout)

    def shutdown(self, timeout: Optional[float] = 10.0):
        if self._shutdown_called:
            return
        self._shutdown_called = True
        loop = self._loop
        if loop is None or not loop.is_running():
            return
        try:
            self.submit(self.session.deactivate(), timeout)
            self.submit(self.engine.shutdown(), timeout)
        finally:
            loop.call_soon_threadsafe(loop.stop)
            if self._loop_thread is not None:
                self._loop_thread.join(timeout)
