import inspect
import shlex

from prompt_toolkit.validation import ValidationError

from npm_buttons.exceptions import CommandNotFoundError


def tokenize_cmd(cmd: str):
    cmd = cmd.strip()
    if cmd == "":
        return []
    try:
        return shlex.split(cmd, posix=True)
    except ValueError as exc:
        raise ValueError("Invalid command arguments") from exc


class ArgSpec:
    def __init__(self, min_args=0, max_args=0, variadic=False):
        self.min_args = min_args
        self.max_args = max_args
        self.variadic = variadic

    @classmethod
    def from_signature(cls, func, skip_first=True):
        sig = inspect.signature(func)
        params = list(sig.parameters.values())
        if skip_first and params and params[0].name == "self":
            params = params[1:]
        min_args = 0
        max_args = 0
        variadic = False
        for param in params:
            if param.kind == param.VAR_POSITIONAL:
                variadic = True
                continue
            if param.kind == param.KEYWORD_ONLY or param.kind == param.VAR_KEYWORD:
                continue
            if param.default is param.empty:
                min_args += 1
            max_args += 1
        if variadic:
            max_args = None
        return cls(min_args, max_args, variadic)

    def validate_count(self, count):
        if count < self.min_args:
            raise ValidationError(message="Not enough parameters set!")
        if self.max_args is not None and count > self.max_args:
            raise ValidationError(message="Too many parameters set!")


class CommandInfo:
    def __init__(self, command_id, description, command_alias=None, arg_spec=None):
        self.command_id = command_id
        self.description = description
        self.arg_spec = arg_spec
        if command_alias is None:
            self.alias = []
        elif isinstance(command_alias, str):
            self.alias = [command_alias]
        else:
            self.alias = list(command_alias)


class CommandDef:
    def __init__(self, command_id, func, description, alias=None, arg_spec=None):
        self.command_id = command_id
        self.func = func
        self.description = description
        self.alias = list(alias or [])
        self.arg_spec = arg_spec or ArgSpec.from_signature(func)

    def all_names(self):
        return [self.command_id] + self.alias

    @property
    def takes_run_key(self) -> bool:
        return getattr(self.func, "takes_run_key", False)


def register_command(command_id: str, description: str, command_alias=None,
                     arg_spec=None, takes_run_key: bool = False):
    """Declare command metadata on a commands-class method."""
    def inner_wrapper(func):
        func.info = CommandInfo(command_id, description, command_alias, arg_spec)
        func.takes_run_key = takes_run_key
        return func

    return inner_wrapper


class CommandRegistry:
    """Named commands bound to the methods of a commands object."""
    def __init__(self):
        self._defs = {}
        self._names = {}

    def collect(self, commands_obj):
        for member_name in dir(type(commands_obj)):
            if member_name.startswith("_"):
                continue
            member = getattr(commands_obj, member_name)
            info = getattr(member, "info", None)
            if not isinstance(info, CommandInfo):
                continue
            self.register(CommandDef(info.command_id, member, info.description,
                                     info.alias, info.arg_spec))
        return self

    def register(self, command_def: CommandDef):
        self._defs[command_def.command_id] = command_def
        for name in command_def.all_names():
            self._names[name] = command_def
        return command_def

    def get(self, name: str) -> CommandDef:
        command_def = self._names.get(name)
        if command_def is None:
            raise CommandNotFoundError(name)
        return command_def

    def find(self, name: str):
        return self._names.get(name)

    def defs(self):
        return list(self._defs.values())

    def names(self):
        return sorted(self._names)

    async def execute(self, name: str, *args):
        result = self.get(name).func(*args)
        if inspect.isawaitable(result):
            return await result
        return result
