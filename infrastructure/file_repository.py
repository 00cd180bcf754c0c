import logging
from pathlib import Path
from typing import Dict, Optional

from core import PersistenceError
from application.ports import TaskRepository
from application.task_store import TaskStore
from infrastructure.atomic_write import write_text_atomic
from infrastructure.exporters import ExportFormat, export_tasks
from infrastructure.task_file_parser import TaskFileParser

DEFAULT_TASKS_FILE = "tasks.md"

logger = logging.getLogger("tcr_tasks.storage")


class FileTaskRepository(TaskRepository):
    """Persistence adapter: authoritative task file plus export snapshots.

    Stateless with respect to the editor; it never mutates Task records.
    """

    def __init__(self, task_file: Path | None = None, export_dir: Path | None = None):
        self.task_file = Path(task_file or DEFAULT_TASKS_FILE).expanduser()
        self.export_dir = Path(export_dir).expanduser() if export_dir else None

    def load(self, path: Optional[Path] = None) -> TaskStore:
        return TaskFileParser.load(Path(path or self.task_file))

    def save(self, store: TaskStore, path: Optional[Path] = None) -> None:
        target = Path(path or self.task_file)
        write_text_atomic(target, TaskFileParser.render(store))
        logger.info("saved %d task(s) to %s", len(store), target)

    def export(self, store: TaskStore, path: Optional[Path], fmt: ExportFormat) -> Path:
        target = Path(path) if path else self.export_path(fmt)
        if target.resolve() == self.task_file.resolve():
            raise PersistenceError(f"Refusing to export over the task file {target}")
        written = export_tasks(store, target, fmt)
        logger.info("exported %s to %s", fmt.code, written)
        return written

    def export_path(self, fmt: ExportFormat) -> Path:
        base = self.export_dir or self.task_file.parent
        if fmt == ExportFormat.JSON:
            return base / f"{self.task_file.stem}.json"
        return base / f"{self.task_file.stem}.export{fmt.suffix}"

    def export_all(self, store: TaskStore) -> Dict[ExportFormat, Path]:
        """Write every export format next to the task file (the `E` key)."""
        return {fmt: self.export(store, None, fmt) for fmt in ExportFormat}


__all__ = ["FileTaskRepository", "DEFAULT_TASKS_FILE"]
