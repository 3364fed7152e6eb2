import enum
import threading

from prompt_toolkit import print_formatted_text
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.styles import Style


class UIEventLevel(enum.Enum):
    TEXT = -1
    INFO = 0
    WARNING = 1
    ERROR = 2
    SUCCESS = 3
    FAILURE = 4
    DEBUG = 5


MSG_LEVEL_SYMBOL = {
    0: "[*] ",
    1: "[!] ",
    2: "[x] ",
    3: "[+] ",
    4: "[-] ",
    5: "[@] "
}

MSG_LEVEL_SYMBOL_STYLE = {
    0: "fg:green",
    1: "fg:yellow",
    2: "fg:red",
    3: "fg:blue",
    4: "fg:white",
    5: "fg:pink"
}


class UIEvent:
    def __init__(self, msg, level=UIEventLevel.TEXT, style=None):
        self.msg = msg
        self.level = level
        self.style = style


class OutputRouter:
    """Serialise output from the event loop thread and the console thread.

    While the console runs under ``patch_stdout`` everything printed here
    lands above the prompt.
    """
    def __init__(self, output=None):
        self._lock = threading.Lock()
        self._output = output

    def bind_output(self, output):
        with self._lock:
            self._output = output

    def clear_output(self):
        with self._lock:
            self._output = None

    def emit(self, event: UIEvent):
        text, style = _format_event(event)
        with self._lock:
            if self._output is not None:
                print_formatted_text(text, style=style, output=self._output)
            else:
                print_formatted_text(text, style=style)


def _format_event(event: UIEvent):
    level = event.level if isinstance(event.level, UIEventLevel) else UIEventLevel.TEXT
    if level == UIEventLevel.TEXT:
        return event.msg, event.style
    formatted_text = FormattedText([
        ("class:level", MSG_LEVEL_SYMBOL[level.value]),
        ("class:text", str(event.msg)),
    ])
    style = Style.from_dict({
        "level": MSG_LEVEL_SYMBOL_STYLE[level.value]
    })
    return formatted_text, style


_OUTPUT_ROUTER = OutputRouter()


def get_output_router() -> OutputRouter:
    return _OUTPUT_ROUTER


def proxy_print(text="", text_type=UIEventLevel.TEXT, style=None):
    get_output_router().emit(UIEvent(msg=text, level=text_type, style=style))
