"""Derived, write-only snapshots of the task list (Markdown and JSON).

Exports carry no timestamps: exporting an unchanged store twice yields
byte-identical files.
"""

import json
from enum import Enum
from pathlib import Path
from typing import Dict, List

from core import Status, Task
from application.task_store import TaskStore
from infrastructure.atomic_write import write_text_atomic


class ExportFormat(Enum):
    MARKDOWN = ("markdown", ".md")
    JSON = ("json", ".json")

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def suffix(self) -> str:
        return self.value[1]

    @classmethod
    def from_string(cls, value: str) -> "ExportFormat":
        token = (value or "").strip().lower()
        aliases = {"md": "markdown"}
        token = aliases.get(token, token)
        for fmt in cls:
            if fmt.code == token:
                return fmt
        raise ValueError(f"Unknown export format: {value!r}")


def render_json(tasks: List[Task]) -> str:
    payload = [task.to_dict() for task in tasks]
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def render_markdown(tasks: List[Task]) -> str:
    counts: Dict[Status, int] = {status: 0 for status in Status}
    for task in tasks:
        counts[task.status] += 1
    summary = ", ".join(f"{counts[status]} {status.code}" for status in Status)
    lines = ["# Tasks", ""]
    noun = "task" if len(tasks) == 1 else "tasks"
    lines.append(f"{len(tasks)} {noun}: {summary}")
    lines.append("")
    if not tasks:
        lines.append("_No tasks._")
    for task in tasks:
        lines.append(f"- [{task.status.marker}] {task.description} ({task.status.label})")
    return "\n".join(lines) + "\n"


RENDERERS = {
    ExportFormat.MARKDOWN: render_markdown,
    ExportFormat.JSON: render_json,
}


def export_tasks(store: TaskStore, path: Path, fmt: ExportFormat) -> Path:
    """Write an export of `store` to `path`; raises PersistenceError on I/O failure."""
    content = RENDERERS[fmt](list(store.snapshot()))
    write_text_atomic(Path(path), content)
    return Path(path)


__all__ = ["ExportFormat", "export_tasks", "render_json", "render_markdown"]
