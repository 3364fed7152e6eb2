import enum
import time
from dataclasses import dataclass
from typing import Optional

DOUBLE_CLICK_MS = 350


class ClickAction(enum.Enum):
    START = "start"
    WAIT_FOR_SECOND_CLICK = "wait"


@dataclass
class ClickState:
    last_key: Optional[str] = None
    last_time: Optional[float] = None


class ClickDebouncer:
    """Turn single clicks on history entries into double-click decisions.

    Times are in milliseconds.
    """
    def __init__(self, window_ms: float = DOUBLE_CLICK_MS):
        self._window_ms = window_ms
        self._state = ClickState()

    @property
    def state(self) -> ClickState:
        return self._state

    def register(self, key: str, now: Optional[float] = None) -> ClickAction:
        if now is None:
            now = time.monotonic() * 1000.0
        state = self._state
        if state.last_key == key and state.last_time is not None and now - state.last_time < self._window_ms:
            self._state = ClickState()
            return ClickAction.START
        self._state = ClickState(last_key=key, last_time=now)
        return ClickAction.WAIT_FOR_SECOND_CLICK

    def reset(self) -> None:
        self._state = ClickState()
