from npm_buttons.runs.controller import RunController
from npm_buttons.runs.debounce import DOUBLE_CLICK_MS, ClickAction, ClickDebouncer, ClickState
from npm_buttons.runs.history import HistoryStore
from npm_buttons.runs.keys import RunKey, decode, encode, label, normalize_dir, relative_display
from npm_buttons.runs.registry import RunRegistry

__all__ = [
    "DOUBLE_CLICK_MS",
    "ClickAction",
    "ClickDebouncer",
    "ClickState",
    "HistoryStore",
    "RunController",
    "RunKey",
    "RunRegistry",
    "decode",
    "encode",
    "label",
    "normalize_dir",
    "relative_display",
]
