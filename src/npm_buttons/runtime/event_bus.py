import asyncio
from collections import deque
from typing import Deque, List, Optional


class EngineEventBus:
    """Fan engine events out to subscriber queues.

    A bounded history lets late subscribers replay what they missed.
    """
    def __init__(self, max_events: Optional[int] = 100):
        self._subscribers: List[asyncio.Queue] = []
        self._history: Deque[object] = deque(maxlen=max_events)

    def publish(self, event: object):
        self._history.append(event)
        for queue in list(self._subscribers):
            queue.put_nowait(event)

    def subscribe(self, replay: bool = False) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue()
        if replay:
            for event in self._history:
                queue.put_nowait(event)
        self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue):
        try:
            self._subscribers.remove(queue)
        except ValueError:
            return

    @property
    def history(self) -> List[object]:
        return list(self._history)

    def clear(self):
        self._subscribers.clear()
        self._history.clear()
