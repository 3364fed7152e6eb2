from npm_buttons.commands.registry import (
    ArgSpec,
    CommandDef,
    CommandInfo,
    CommandRegistry,
    register_command,
    tokenize_cmd,
)
from npm_buttons.commands.session_commands import SessionCommands

__all__ = [
    "ArgSpec",
    "CommandDef",
    "CommandInfo",
    "CommandRegistry",
    "SessionCommands",
    "register_command",
    "tokenize_cmd",
]
