"""Crash-safe file replacement shared by the task file and the exports.

The target either keeps its previous content or holds the complete new
content; a partially written file is never visible under the target name.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from core import PersistenceError


def write_text_atomic(target: Path, content: str, *, encoding: str = "utf-8") -> None:
    target = Path(target)
    data = content.encode(encoding)
    tmp_path: Path | None = None
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="wb",
            delete=False,
            dir=str(target.parent),
            prefix=f".{target.name}.",
            suffix=".tmp",
        ) as tmp:
            tmp_path = Path(tmp.name)
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(str(tmp_path), str(target))
        tmp_path = None
    except OSError as exc:
        raise PersistenceError(f"Cannot write {target}: {exc}") from exc
    finally:
        if tmp_path is not None and tmp_path.exists():
            try:
                tmp_path.unlink()
            except OSError:
                pass


__all__ = ["write_text_atomic"]
