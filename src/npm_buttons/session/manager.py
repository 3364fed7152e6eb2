import logging
from typing import List, Optional

from npm_buttons.config import Config
from npm_buttons.detect import PackageManagerDetector
from npm_buttons.runs.controller import RunController
from npm_buttons.runs.debounce import ClickAction, ClickDebouncer
from npm_buttons.runs.history import HistoryStore
from npm_buttons.runs.keys import normalize_dir
from npm_buttons.runs.registry import RunRegistry
from npm_buttons.runtime.sinks import EngineEventSink
from npm_buttons.storage import JsonWorkspaceState, MemoryWorkspaceState
from npm_buttons.views.rows import Row, ViewSynchronizer
from npm_buttons.views.surfaces import ButtonBar, HistoryTree

logger = logging.getLogger(__name__)


class NpmButtonsSession:
    """Run state of one workspace, from activation to deactivation.

    Owns the registry, the history and both view surfaces. Every method must
    be called on the event loop the session was activated on.
    """
    def __init__(self, root_dir: str, engine, state=None, config: Optional[Config] = None):
        self._config = config if config is not None else Config()
        self._root_dir = normalize_dir(root_dir or self._config.workspace_root or ".")
        self._engine = engine
        if state is None:
            state_file = self._config.history.state_file
            state = JsonWorkspaceState(state_file) if state_file else MemoryWorkspaceState()
        self._state = state
        self.registry = RunRegistry()
        self.history = HistoryStore(state, self._config.history.state_key)
        self.button_bar = ButtonBar(view=self._config.view)
        self.history_tree = HistoryTree(view=self._config.view)
        self.views = ViewSynchronizer(self._root_dir, self.history, self.registry,
                                      [self.button_bar, self.history_tree])
        self.debouncer = ClickDebouncer(self._config.controller.double_click_ms)
        self.controller = RunController(
            self._root_dir,
            self.registry,
            self.history,
            engine,
            detector=PackageManagerDetector(self._root_dir),
            task_kind=self._config.controller.task_kind,
            on_change=self.views.refresh,
        )
        self._sink = EngineEventSink(engine, self.controller)
        self._active = False

    @property
    def root_dir(self) -> str:
        return self._root_dir

    @property
    def config(self) -> Config:
        return self._config

    @property
    def engine(self):
        return self._engine

    @property
    def sink(self) -> EngineEventSink:
        return self._sink

    @property
    def active(self) -> bool:
        return self._active

    @property
    def rows(self) -> List[Row]:
        return self.views.compute_rows()

    async def activate(self):
        if self._active:
            return
        self.history.load()
        self._sink.start()
        self._active = True
        logger.info("Extension activated", extra={"data": self._root_dir})
        self.views.refresh()

    async def deactivate(self):
        if not self._active:
            return
        self._active = False
        self._sink.stop()
        self.registry.terminate_all()
        self.views.dispose()
        self.debouncer.reset()
        logger.info("Extension deactivated")

    async def toggle_script(self, key: str) -> bool:
        return await self.controller.toggle(key)

    async def reset_history(self):
        await self.views.clear_all()

    async def delete_history_item(self, key: str) -> bool:
        return await self.views.delete_row(self.controller.canonicalize(key).canonical)

    async def history_item_clicked(self, key: str, now: Optional[float] = None) -> ClickAction:
        action = self.debouncer.register(key, now)
        if action == ClickAction.START:
            await self.controller.toggle(key)
        return action

    def update_view_config(self, spin_icon: Optional[bool] = None):
        if spin_icon is not None:
            self._config.view.spin_icon = spin_icon
        return self.views.refresh()
