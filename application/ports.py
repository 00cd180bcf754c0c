from pathlib import Path
from typing import TYPE_CHECKING, Dict, Optional, Protocol

if TYPE_CHECKING:
    from application.task_store import TaskStore
    from infrastructure.exporters import ExportFormat


class TaskRepository(Protocol):
    def load(self, path: Optional[Path] = None) -> "TaskStore":
        ...

    def save(self, store: "TaskStore", path: Optional[Path] = None) -> None:
        ...

    def export(self, store: "TaskStore", path: Optional[Path], fmt: "ExportFormat") -> Path:
        ...

    def export_all(self, store: "TaskStore") -> Dict["ExportFormat", Path]:
        ...


class TestRunner(Protocol):
    __test__ = False

    def run(self, command: str) -> int:
        """Run the test command to completion and return its exit status."""
        ...


class VersionControl(Protocol):
    def commit(self, message: str) -> None:
        ...

    def revert_all(self) -> None:
        ...
