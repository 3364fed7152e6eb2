from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from prompt_toolkit.formatted_text import FormattedText

from npm_buttons.config import ViewConfig
from npm_buttons.views.rows import Row

COMMAND_TOGGLE = "npm-buttons.toggleScript"
COMMAND_HISTORY_CLICKED = "npm-buttons.historyItemClicked"

ICON_PLAY = "$(play)"
ICON_SPIN = "$(loading~spin)"
ICON_SQUARE = "$(primitive-square)"

# how icons look in a terminal
ICON_GLYPHS = {
    ICON_PLAY: "▶",
    ICON_SPIN: "◌",
    ICON_SQUARE: "■",
}

ICON_STYLES = {
    ICON_PLAY: "fg:ansigreen",
    ICON_SPIN: "fg:ansiyellow",
    ICON_SQUARE: "fg:ansired",
}


def row_icon(row: Row, view: ViewConfig) -> str:
    if not row.is_running:
        return ICON_PLAY
    return ICON_SPIN if view.spin_icon else ICON_SQUARE


@dataclass(frozen=True)
class StatusBarItem:
    text: str
    tooltip: str
    icon: str
    label: str
    command: str
    arguments: Tuple[str, ...] = ()
    alignment: str = "right"
    priority: int = 100


@dataclass(frozen=True)
class TreeItem:
    label: str
    description: str
    tooltip: str
    icon: str
    command: str
    arguments: Tuple[str, ...] = ()
    context_value: str = "historyItem"


@dataclass(eq=False)
class _Surface:
    view: ViewConfig = field(default_factory=ViewConfig)
    items: List = field(default_factory=list)

    def dispose(self):
        self.items = []

    def item_for(self, key: str):
        for item in self.items:
            if item.arguments and item.arguments[0] == key:
                return item
        return None


class ButtonBar(_Surface):
    """Status bar buttons; a single activation toggles the run."""

    def update(self, rows: Sequence[Row]):
        items = []
        for row in rows:
            icon = row_icon(row, self.view)
            items.append(StatusBarItem(
                text=f"{icon} {row.label}",
                tooltip=f"Stop {row.label}" if row.is_running else f"Launch {row.label}",
                icon=icon,
                label=row.label,
                command=COMMAND_TOGGLE,
                arguments=(row.key,),
                alignment=self.view.alignment,
                priority=self.view.priority,
            ))
        self.items = items

    def render(self) -> FormattedText:
        fragments = []
        for idx, item in enumerate(self.items):
            if idx:
                fragments.append(("", "  "))
            fragments.append((ICON_STYLES[item.icon], ICON_GLYPHS[item.icon]))
            fragments.append(("class:button", f" {item.label}"))
        return FormattedText(fragments)


class HistoryTree(_Surface):
    """History list; clicks are debounced into double-clicks by the session."""

    def update(self, rows: Sequence[Row]):
        items = []
        for row in rows:
            items.append(TreeItem(
                label=row.label,
                description=row.relative_path,
                tooltip=row.key,
                icon=row_icon(row, self.view),
                command=COMMAND_HISTORY_CLICKED,
                arguments=(row.key,),
            ))
        self.items = items

    def render(self, selected: Optional[str] = None) -> FormattedText:
        fragments = []
        for item in self.items:
            marker = "> " if selected is not None and item.arguments[0] == selected else "  "
            fragments.append(("", marker))
            fragments.append((ICON_STYLES[item.icon], ICON_GLYPHS[item.icon]))
            fragments.append(("class:label", f" {item.label}"))
            fragments.append(("class:description", f"  {item.description}\n"))
        return FormattedText(fragments)
