from npm_buttons.config import Config
from npm_buttons.detect import PackageManagerKind, build_run_command
from npm_buttons.engine import ShellTaskEngine, TaskDefinition
from npm_buttons.runs import ClickAction, ClickDebouncer, HistoryStore, RunController, RunKey, RunRegistry
from npm_buttons.session import NpmButtonsSession
from npm_buttons.views import Row, ViewSynchronizer

__all__ = [
    "ClickAction",
    "ClickDebouncer",
    "Config",
    "HistoryStore",
    "NpmButtonsSession",
    "PackageManagerKind",
    "Row",
    "RunController",
    "RunKey",
    "RunRegistry",
    "ShellTaskEngine",
    "TaskDefinition",
    "ViewSynchronizer",
    "build_run_command",
]
