import json
import logging
from datetime import datetime, timezone

from npm_buttons.ui.output import UIEventLevel, proxy_print

CHANNEL_NAME = "NPM Buttons Logs"


def _level_for(levelno: int) -> UIEventLevel:
    if levelno >= logging.ERROR:
        return UIEventLevel.ERROR
    if levelno >= logging.WARNING:
        return UIEventLevel.WARNING
    if levelno >= logging.INFO:
        return UIEventLevel.INFO
    return UIEventLevel.DEBUG


class ChannelFormatter(logging.Formatter):
    """``[<iso timestamp>] message`` followed by the record's ``data`` extra."""

    def format(self, record):
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds")
        lines = [f"[{ts.replace('+00:00', 'Z')}] {record.getMessage()}"]
        data = getattr(record, "data", None)
        if data is not None:
            lines.append(data if isinstance(data, str) else json.dumps(data, indent=2, default=str))
        if record.exc_info:
            lines.append(self.formatException(record.exc_info))
        return "\n".join(lines)


class OutputChannelHandler(logging.Handler):
    def __init__(self, level=logging.NOTSET):
        super().__init__(level)
        self.setFormatter(ChannelFormatter())

    def emit(self, record):
        try:
            log = self.format(record)
            proxy_print(log, _level_for(record.levelno))
        except Exception:
            self.handleError(record)


def configure_logging(level=logging.INFO, logger_name: str = "npm_buttons") -> logging.Logger:
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    if not any(isinstance(handler, OutputChannelHandler) for handler in logger.handlers):
        logger.addHandler(OutputChannelHandler())
    return logger
