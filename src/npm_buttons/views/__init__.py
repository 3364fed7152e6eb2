from npm_buttons.views.rows import Row, ViewSynchronizer
from npm_buttons.views.surfaces import (
    COMMAND_HISTORY_CLICKED,
    COMMAND_TOGGLE,
    ICON_PLAY,
    ICON_SPIN,
    ICON_SQUARE,
    ButtonBar,
    HistoryTree,
    StatusBarItem,
    TreeItem,
    row_icon,
)

__all__ = [
    "COMMAND_HISTORY_CLICKED",
    "COMMAND_TOGGLE",
    "ICON_PLAY",
    "ICON_SPIN",
    "ICON_SQUARE",
    "ButtonBar",
    "HistoryTree",
    "Row",
    "StatusBarItem",
    "TreeItem",
    "ViewSynchronizer",
    "row_icon",
]
