import asyncio
from abc import ABC, abstractmethod
from typing import Optional

from npm_buttons.engine.models import ExecutionHandle, ShellTask
from npm_buttons.runtime.event_bus import EngineEventBus


class TaskEngine(ABC):
    """Starts tasks and reports their process start and end events."""
    def __init__(self, event_history_max: Optional[int] = 100):
        self._bus = EngineEventBus(max_events=event_history_max)

    @abstractmethod
    async def start(self, task: ShellTask) -> ExecutionHandle:
        pass

    def subscribe(self, replay: bool = False) -> asyncio.Queue:
        return self._bus.subscribe(replay=replay)

    def unsubscribe(self, queue: asyncio.Queue):
        self._bus.unsubscribe(queue)

    def publish(self, event: object):
        self._bus.publish(event)

    async def shutdown(self, wait: bool = True):
        self._bus.clear()
