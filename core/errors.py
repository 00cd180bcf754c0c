"""Error taxonomy shared by the store, persistence and TCR layers."""

from typing import Optional


class TcrTasksError(Exception):
    """Base class for all domain errors."""


class ValidationError(TcrTasksError):
    """A description (or other user input) is empty after trimming."""


class NotFound(TcrTasksError):
    def __init__(self, task_id: int):
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class ParseError(TcrTasksError):
    """The authoritative task file cannot be read back."""

    def __init__(self, message: str, *, path: Optional[str] = None, line: Optional[int] = None):
        location = ""
        if path:
            location = f"{path}:{line}: " if line else f"{path}: "
        elif line:
            location = f"line {line}: "
        super().__init__(f"{location}{message}")
        self.path = path
        self.line = line


class PersistenceError(TcrTasksError):
    """Saving or exporting failed; in-memory state is unchanged."""


class TcrError(TcrTasksError):
    """Base class for failures of a TCR run."""


class ProcessSpawnError(TcrError):
    """The test command could not be started."""


class VcsError(TcrError):
    def __init__(self, message: str, *, fatal: bool = False):
        super().__init__(message)
        # fatal: revert failed, the working tree may be inconsistent
        self.fatal = fatal


class TcrBusyError(TcrError):
    def __init__(self) -> None:
        super().__init__("A TCR run is already in progress")


__all__ = [
    "TcrTasksError",
    "ValidationError",
    "NotFound",
    "ParseError",
    "PersistenceError",
    "TcrError",
    "ProcessSpawnError",
    "VcsError",
    "TcrBusyError",
]
