import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from npm_buttons.runs.keys import decode, label, relative_display

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Row:
    key: str
    label: str
    relative_path: str
    is_running: bool
    script: str = ""
    package_dir: str = ""


class ViewSynchronizer:
    """Derive display rows from history and registry, and push them to surfaces.

    Holds no state of its own beyond the attached surfaces; both surfaces are
    always rebuilt from one ``compute_rows`` result.
    """
    def __init__(self, root_dir: Optional[str], history, registry, surfaces: Sequence = ()):
        self._root_dir = root_dir
        self._history = history
        self._registry = registry
        self._surfaces = list(surfaces)

    @property
    def surfaces(self):
        return list(self._surfaces)

    def attach(self, surface):
        if surface not in self._surfaces:
            self._surfaces.append(surface)

    def compute_rows(self) -> List[Row]:
        rows = []
        for key in self._history.items:
            try:
                directory, script = decode(key)
            except ValueError:
                logger.debug("Skipping malformed history entry %r", key)
                continue
            rows.append(Row(
                key=key,
                label=label(directory, script, self._root_dir),
                relative_path=relative_display(directory, self._root_dir),
                is_running=self._registry.is_running(key),
                script=script,
                package_dir=directory,
            ))
        return rows

    def refresh(self) -> List[Row]:
        rows = self.compute_rows()
        for surface in self._surfaces:
            surface.update(rows)
        return rows

    async def delete_row(self, key: str) -> bool:
        try:
            return await self._history.remove(key)
        finally:
            self.refresh()

    async def clear_all(self) -> None:
        try:
            await self._history.clear()
        finally:
            self.refresh()

    def dispose(self):
        for surface in self._surfaces:
            surface.dispose()
