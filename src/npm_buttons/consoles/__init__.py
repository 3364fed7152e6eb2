from npm_buttons.consoles.console import (
    ButtonsConsole,
    CommandValidator,
    ConsoleCommands,
    ConsoleExit,
    RunKeyCompleter,
)

__all__ = [
    "ButtonsConsole",
    "CommandValidator",
    "ConsoleCommands",
    "ConsoleExit",
    "RunKeyCompleter",
]
