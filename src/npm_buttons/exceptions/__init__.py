from npm_buttons.exceptions.run_exception import (
    AlreadyRunningError,
    CommandNotFoundError,
    DetectionError,
    EngineStartError,
    InvalidTaskDefinitionError,
    NpmButtonsError,
    PersistenceError,
)

__all__ = [
    "NpmButtonsError",
    "AlreadyRunningError",
    "CommandNotFoundError",
    "DetectionError",
    "EngineStartError",
    "InvalidTaskDefinitionError",
    "PersistenceError",
]
