import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from core import ParseError, Status, Task
from application.task_store import TaskStore


class TaskFileParser:
    """Codec for the authoritative task file.

    Layout: optional YAML front matter between ``---`` fences, then a Markdown
    checklist. Each task is one line ``- [m] description <!-- id:N -->`` where
    ``m`` is the status marker (space, ``~`` or ``x``). Lines without the id
    comment are accepted (older files) and receive fresh ids in file order.
    Anything that is not a checklist line (headings, prose, blank lines) is
    ignored.
    """

    ENTRY_PATTERN = re.compile(r"^-\s\[(?P<marker>[^\]])\](?:\s+(?P<body>.*))?$")
    ID_PATTERN = re.compile(r"^(?P<text>.*?)\s*<!--\s*id:\s*(?P<id>\d+)\s*-->$")
    FORMAT_NAME = "tcr-tasks"
    CURRENT_SCHEMA_VERSION = 1
    TITLE = "# Tasks"

    @classmethod
    def load(cls, filepath: Path) -> TaskStore:
        if not filepath.exists():
            return TaskStore()
        try:
            content = filepath.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ParseError(f"cannot read task file: {exc}", path=str(filepath)) from exc
        return cls.parse(content, source=str(filepath))

    @classmethod
    def parse(cls, content: str, source: Optional[str] = None) -> TaskStore:
        lines = content.splitlines()
        metadata: Dict[str, Any] = {}
        start = 0
        if lines and lines[0].strip() == "---":
            for end in range(1, len(lines)):
                if lines[end].strip() == "---":
                    break
            else:
                raise ParseError("unterminated front matter", path=source, line=1)
            metadata = cls._parse_front_matter("\n".join(lines[1:end]), source)
            start = end + 1

        entries: List[Tuple[Optional[int], str, Status]] = []
        explicit_ids: Dict[int, int] = {}
        for lineno, raw in enumerate(lines[start:], start=start + 1):
            stripped = raw.strip()
            if not stripped.startswith("- ["):
                continue
            task_id, text, status = cls._parse_entry(stripped, lineno, source)
            if task_id is not None:
                if task_id in explicit_ids:
                    raise ParseError(
                        f"duplicate task id {task_id} (first seen on line {explicit_ids[task_id]})",
                        path=source,
                        line=lineno,
                    )
                explicit_ids[task_id] = lineno
            entries.append((task_id, text, status))

        next_id = cls._coerce_next_id(metadata.get("next_id"), source)
        floor = max(explicit_ids, default=0) + 1
        fresh = max(floor, next_id or 1)
        tasks: List[Task] = []
        for task_id, text, status in entries:
            if task_id is None:
                task_id = fresh
                fresh += 1
            tasks.append(Task(id=task_id, description=text, status=status))
        return TaskStore(tasks, next_id=max(fresh, next_id or 1))

    @classmethod
    def _parse_front_matter(cls, raw: str, source: Optional[str]) -> Dict[str, Any]:
        try:
            metadata = yaml.safe_load(raw) or {}
        except yaml.YAMLError as exc:
            raise ParseError(f"invalid front matter: {exc}", path=source, line=1) from exc
        if not isinstance(metadata, dict):
            raise ParseError("front matter must be a mapping", path=source, line=1)
        fmt = metadata.get("format")
        if fmt not in (None, cls.FORMAT_NAME):
            raise ParseError(f"unsupported format {fmt!r}", path=source, line=1)
        return metadata

    @staticmethod
    def _coerce_next_id(value: Any, source: Optional[str]) -> Optional[int]:
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ParseError(f"next_id must be a positive integer, got {value!r}", path=source, line=1)
        return value

    @classmethod
    def _parse_entry(cls, line: str, lineno: int, source: Optional[str]) -> Tuple[Optional[int], str, Status]:
        match = cls.ENTRY_PATTERN.match(line)
        if not match:
            raise ParseError(f"malformed task entry: {line!r}", path=source, line=lineno)
        try:
            status = Status.from_marker(match.group("marker"))
        except ValueError as exc:
            raise ParseError(str(exc), path=source, line=lineno) from exc
        body = (match.group("body") or "").strip()
        task_id: Optional[int] = None
        id_match = cls.ID_PATTERN.match(body)
        if id_match:
            task_id = int(id_match.group("id"))
            body = id_match.group("text").strip()
            if task_id < 1:
                raise ParseError("task id must be positive", path=source, line=lineno)
        if not body:
            raise ParseError("task entry has an empty description", path=source, line=lineno)
        return task_id, body, status

    @classmethod
    def render(cls, store: TaskStore) -> str:
        front = yaml.safe_dump(
            {
                "format": cls.FORMAT_NAME,
                "schema_version": cls.CURRENT_SCHEMA_VERSION,
                "next_id": store.next_id,
            },
            sort_keys=False,
        )
        out = ["---", front.rstrip("\n"), "---", cls.TITLE, ""]
        for task in store.snapshot():
            out.append(f"- [{task.status.marker}] {task.description} <!-- id:{task.id} -->")
        return "\n".join(out) + "\n"


__all__ = ["TaskFileParser"]
