import asyncio
import inspect
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, WordCompleter
from prompt_toolkit.document import Document
from prompt_toolkit.patch_stdout import patch_stdout
from prompt_toolkit.styles import Style
from prompt_toolkit.validation import ValidationError, Validator

from npm_buttons.commands.registry import CommandRegistry, register_command, tokenize_cmd
from npm_buttons.commands.session_commands import SessionCommands
from npm_buttons.config import ConsoleConfig
from npm_buttons.exceptions import CommandNotFoundError, NpmButtonsError
from npm_buttons.ui.output import UIEventLevel, proxy_print

CONSOLE_STYLE = Style.from_dict({
    "prompt": "fg:ansicyan bold",
    "button": "bold",
    "label": "bold",
    "description": "fg:ansibrightblack",
})


class ConsoleExit(Exception):
    pass


class ConsoleCommands(SessionCommands):
    def __init__(self, console):
        super().__init__(console.session)
        self.console = console

    @register_command("console.list", "Show the button bar and history", ["list", "ls"])
    async def list_runs(self):
        self.session.views.refresh()
        proxy_print(self.session.button_bar.render(), style=CONSOLE_STYLE)
        proxy_print(self.session.history_tree.render(), style=CONSOLE_STYLE)

    @register_command("console.spin", "Animate the running icon (on/off)", "spin")
    async def spin(self, value):
        if value not in ("on", "off"):
            raise ValueError("spin expects on or off")
        self.session.update_view_config(spin_icon=value == "on")

    @register_command("console.help", "Display help information", ["help", "?"])
    def run_help(self):
        for command_def in self.console.registry.defs():
            names = ", ".join(command_def.alias) or command_def.command_id
            proxy_print(f"  {names:<14} {command_def.description}")

    @register_command("console.quit", "Quit", ["quit", "exit", "q"])
    def run_quit(self):
        raise ConsoleExit


class CommandValidator(Validator):
    def __init__(self, console):
        self.console = console
        super().__init__()

    def validate(self, document: Document) -> None:
        try:
            tokens = tokenize_cmd(document.text)
        except ValueError as exc:
            raise ValidationError(message=str(exc)) from exc
        if not tokens:
            return
        command_def = self.console.registry.find(tokens[0])
        if command_def is None:
            raise ValidationError(message=f"Unknown command: {tokens[0]}")
        command_def.arg_spec.validate_count(len(tokens) - 1)


class RunKeyCompleter(Completer):
    """Complete command names, then run keys for commands that take one."""
    def __init__(self, console):
        self.console = console
        super().__init__()

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        try:
            tokens = tokenize_cmd(text)
        except ValueError:
            return
        if len(tokens) == 0 or (len(tokens) == 1 and not text[-1].isspace()):
            words = [name for name in self.console.registry.names() if "." not in name]
        else:
            command_def = self.console.registry.find(tokens[0])
            if command_def is None or not command_def.takes_run_key:
                return
            words = self.console.session.history.items
        completer = WordCompleter(words, ignore_case=True, sentence=True)
        yield from completer.get_completions(Document(text.split(" ")[-1]), complete_event)


class ButtonsConsole:
    """Prompt loop submitting commands to the session's event loop."""
    def __init__(self, session, loop: asyncio.AbstractEventLoop,
                 config: Optional[ConsoleConfig] = None):
        self.session = session
        self.loop = loop
        self.config = config if config is not None else ConsoleConfig()
        self.commands = ConsoleCommands(self)
        self.registry = CommandRegistry().collect(self.commands)
        self.prompt_session = PromptSession(
            [("class:prompt", self.config.message)],
            style=CONSOLE_STYLE,
            completer=RunKeyCompleter(self),
            validator=CommandValidator(self),
            validate_while_typing=False,
        )

    def call(self, awaitable):
        return asyncio.run_coroutine_threadsafe(awaitable, self.loop).result()

    def execute(self, cmd: str):
        tokens = tokenize_cmd(cmd)
        if not tokens:
            return None
        try:
            command_def = self.registry.get(tokens[0])
            result = command_def.func(*tokens[1:])
            if inspect.isawaitable(result):
                result = self.call(result)
        except CommandNotFoundError as exc:
            proxy_print(str(exc), UIEventLevel.WARNING)
            return None
        except (NpmButtonsError, ValueError) as exc:
            proxy_print(str(exc), UIEventLevel.ERROR)
            return None
        return result

    def _prompt(self):
        if self.config.use_patch_stdout:
            with patch_stdout():
                return self.prompt_session.prompt()
        return self.prompt_session.prompt()

    def run(self):
        self.execute("list")
        while True:
            try:
                self.execute(self._prompt())
            except ConsoleExit:
                break
            except (KeyboardInterrupt, EOFError):
                break
