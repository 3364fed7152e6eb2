import asyncio
import logging
from typing import List

logger = logging.getLogger(__name__)


class HistoryStore:
    """Ordered, duplicate-free list of launched run keys.

    Every mutation is written through to the workspace state before the
    in-memory list changes, so a failed write leaves the last persisted list
    in place.
    """
    def __init__(self, state, state_key: str = "npmButtonsHistory"):
        self._state = state
        self._state_key = state_key
        self._items: List[str] = []
        self._lock = asyncio.Lock()

    @property
    def items(self) -> List[str]:
        return list(self._items)

    def load(self) -> List[str]:
        value = self._state.get(self._state_key, [])
        if not isinstance(value, list):
            logger.warning("Discarding malformed history under %s", self._state_key)
            value = []
        items: List[str] = []
        for key in value:
            if isinstance(key, str) and key not in items:
                items.append(key)
        self._items = items
        return list(items)

    def __contains__(self, key):
        return key in self._items

    async def add(self, key: str) -> bool:
        async with self._lock:
            if key in self._items:
                return False
            await self._persist(self._items + [key])
        logger.info("Added to history", extra={"data": key})
        return True

    async def remove(self, key: str) -> bool:
        async with self._lock:
            if key not in self._items:
                return False
            await self._persist([item for item in self._items if item != key])
        logger.info("Removed from history", extra={"data": key})
        return True

    async def clear(self) -> None:
        async with self._lock:
            await self._persist([])
        logger.info("History cleared")

    async def _persist(self, items: List[str]) -> None:
        await self._state.update(self._state_key, list(items))
        self._items = items
