from npm_buttons.config.config import (
    SPIN_ICON_SETTING,
    Config,
    ConsoleConfig,
    ControllerConfig,
    HistoryConfig,
    ViewConfig,
    load_settings,
)

__all__ = [
    "Config",
    "ConsoleConfig",
    "ControllerConfig",
    "HistoryConfig",
    "ViewConfig",
    "SPIN_ICON_SETTING",
    "load_settings",
]
