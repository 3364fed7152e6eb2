from npm_buttons.engine.base import TaskEngine
from npm_buttons.engine.models import (
    ExecutionHandle,
    ProcessEndEvent,
    ProcessStartEvent,
    ShellTask,
    TaskDefinition,
)
from npm_buttons.engine.shell_engine import ShellExecution, ShellTaskEngine

__all__ = [
    "ExecutionHandle",
    "ProcessEndEvent",
    "ProcessStartEvent",
    "ShellExecution",
    "ShellTask",
    "ShellTaskEngine",
    "TaskDefinition",
    "TaskEngine",
]
