from .status import Status
from .task import Task, clean_description
from .errors import (
    TcrTasksError,
    ValidationError,
    NotFound,
    ParseError,
    PersistenceError,
    TcrError,
    ProcessSpawnError,
    VcsError,
    TcrBusyError,
)

__all__ = [
    "Status",
    "Task",
    "clean_description",
    # Errors
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
