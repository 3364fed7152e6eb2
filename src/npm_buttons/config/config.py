import json
import logging
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger(__name__)

SPIN_ICON_SETTING = "runNpmButtons.spinIcon"


@dataclass
class ViewConfig:
    """Button bar and history tree rendering.

    Attributes:
        spin_icon: Animate the running indicator; when False a static
            stopped-square glyph is shown instead.
        alignment: Side of the status bar the buttons are placed on.
        priority: Status bar priority of every button.
    """
    spin_icon: bool = True
    alignment: str = "right"
    priority: int = 100


@dataclass
class HistoryConfig:
    """Launch history persistence.

    Attributes:
        state_key: Workspace state key the history list is stored under.
        state_file: JSON file backing the workspace state; None keeps the
            history in memory for the lifetime of the session.
    """
    state_key: str = "npmButtonsHistory"
    state_file: Optional[str] = None


@dataclass
class ControllerConfig:
    """Run controller behaviour.

    Attributes:
        task_kind: Task definition kind owned by npm-buttons; engine events
            of any other kind are ignored.
        double_click_ms: Window in which a second click on the same history
            entry counts as a double-click.
    """
    task_kind: str = "npm"
    double_click_ms: int = 350


@dataclass
class ConsoleConfig:
    """Terminal front end.

    Attributes:
        message: Prompt message.
        use_patch_stdout: Patch stdout so log lines print above the prompt.
        loop_thread_name: Thread name of the background event loop.
    """
    message: str = "npm-buttons > "
    use_patch_stdout: bool = True
    loop_thread_name: str = "EngineLoop"


@dataclass
class Config:
    """Top-level configuration for npm-buttons."""
    workspace_root: str = ""
    view: ViewConfig = field(default_factory=ViewConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    controller: ControllerConfig = field(default_factory=ControllerConfig)
    console: ConsoleConfig = field(default_factory=ConsoleConfig)


def load_settings(path: Optional[str], base: Optional[ViewConfig] = None) -> ViewConfig:
    """Read view settings from a JSON settings file.

    Only the flat ``runNpmButtons.spinIcon`` key is understood. A missing or
    unreadable file leaves the defaults in place.
    """
    view = base if base is not None else ViewConfig()
    if not path:
        return view
    try:
        with open(path, "r", encoding="utf-8") as fp:
            data = json.load(fp)
    except FileNotFoundError:
        return view
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring settings file %s: %s", path, exc)
        return view
    if not isinstance(data, dict):
        return view
    spin_icon = data.get(SPIN_ICON_SETTING)
    if isinstance(spin_icon, bool):
        view.spin_icon = spin_icon
    return view
