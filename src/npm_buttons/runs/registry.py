import logging
from typing import Dict, List, Optional

from npm_buttons.exceptions import AlreadyRunningError

logger = logging.getLogger(__name__)


class RunRegistry:
    """Live executions keyed by canonical run key.

    A key is present exactly while its run is considered running. Handles
    are owned by the engine; the registry only forgets them.
    """
    def __init__(self):
        self._runs: Dict[str, object] = {}

    def is_running(self, key: str) -> bool:
        return key in self._runs

    def get(self, key: str) -> Optional[object]:
        return self._runs.get(key)

    def keys(self) -> List[str]:
        return list(self._runs)

    def start(self, key: str, handle) -> None:
        if key in self._runs:
            raise AlreadyRunningError(key)
        self._runs[key] = handle

    def stop(self, key: str):
        return self._runs.pop(key, None)

    def release(self, key: str, handle) -> bool:
        """Forget ``key`` only while it still maps to ``handle``."""
        if self._runs.get(key) is not handle:
            return False
        del self._runs[key]
        return True

    def terminate_all(self) -> None:
        runs = list(self._runs.items())
        for key, handle in runs:
            try:
                handle.terminate()
            except ProcessLookupError:
                logger.debug("Run already gone at shutdown: %s", key)
            except Exception:
                logger.exception("Failed to terminate %s", key)
        self._runs.clear()

    def __len__(self):
        return len(self._runs)

    def __contains__(self, key):
        return key in self._runs
