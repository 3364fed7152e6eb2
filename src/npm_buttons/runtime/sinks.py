import asyncio
import logging
from typing import Optional

from npm_buttons.engine.models import ProcessEndEvent, ProcessStartEvent

logger = logging.getLogger(__name__)


class EngineEventSink:
    """Forward engine process events to the run controller."""
    def __init__(self, engine, controller):
        self._engine = engine
        self._controller = controller
        self._queue: Optional[asyncio.Queue] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None

    async def _run(self):
        while True:
            event = await self._queue.get()
            try:
                await self.dispatch(event)
            except Exception:
                logger.exception("Could not reconcile engine event %r", event)

    async def dispatch(self, event):
        if isinstance(event, ProcessStartEvent):
            await self._controller.reconcile_external_start(event)
        elif isinstance(event, ProcessEndEvent):
            self._controller.reconcile_external_end(event)

    def start(self, loop=None):
        if self._task is not None:
            return
        loop = loop or asyncio.get_running_loop()
        self._queue = self._engine.subscribe()
        self._task = loop.create_task(self._run())

    async def drain(self):
        """Dispatch every event already queued."""
        if self._queue is None:
            return
        while not self._queue.empty():
            await self.dispatch(self._queue.get_nowait())

    def stop(self):
        if self._task is None:
            return
        self._task.cancel()
        self._engine.unsubscribe(self._queue)
        self._task = None
        self._queue = None
