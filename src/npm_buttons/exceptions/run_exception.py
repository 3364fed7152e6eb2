class NpmButtonsError(Exception):
    """ Base npm-buttons exception """
    pass


class DetectionError(NpmButtonsError):
    def __init__(self, directory: str, reason: str):
        self.directory = directory
        self.reason = reason
        super().__init__(f"Cannot inspect {directory}: {reason}")


class AlreadyRunningError(NpmButtonsError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Run already registered: {key}")


class EngineStartError(NpmButtonsError):
    def __init__(self, command: str, cwd: str, reason: str):
        self.command = command
        self.cwd = cwd
        self.reason = reason
        super().__init__(f"Engine rejected [{command}] in {cwd}: {reason}")


class PersistenceError(NpmButtonsError):
    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Cannot persist {key}: {reason}")


class CommandNotFoundError(NpmButtonsError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Command not found: {name}")


class InvalidTaskDefinitionError(NpmButtonsError):
    pass
