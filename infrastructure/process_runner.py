"""Test command runner backed by subprocess."""

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Optional

from core import ProcessSpawnError

logger = logging.getLogger("tcr_tasks.tcr")

OUTPUT_TAIL_CHARS = 4000


class SubprocessTestRunner:
    """Runs the configured command to completion and reports its exit status.

    The command string is tokenized with shlex and executed without a shell,
    so a missing executable surfaces as ProcessSpawnError instead of a
    shell's exit status 127. With `capture_output` the child's stdout/stderr
    are collected (the full-screen UI owns the terminal) and the tail is kept
    in `last_output` for the run record.
    """

    __test__ = False

    def __init__(self, cwd: Optional[Path] = None, *, capture_output: bool = True):
        self.cwd = Path(cwd) if cwd else None
        self.capture_output = capture_output
        self.last_output = ""

    def run(self, command: str) -> int:
        try:
            argv = shlex.split(command or "")
        except ValueError as exc:
            raise ProcessSpawnError(f"Cannot parse test command {command!r}: {exc}") from exc
        if not argv:
            raise ProcessSpawnError("No test command configured")
        self.last_output = ""
        logger.info("running test command: %s", command)
        try:
            completed = subprocess.run(
                argv,
                cwd=self.cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE if self.capture_output else None,
                stderr=subprocess.STDOUT if self.capture_output else None,
            )
        except OSError as exc:
            raise ProcessSpawnError(f"Cannot start {argv[0]!r}: {exc.strerror or exc}") from exc
        if self.capture_output and completed.stdout is not None:
            text = completed.stdout.decode("utf-8", errors="replace")
            self.last_output = text[-OUTPUT_TAIL_CHARS:]
        logger.info("test command exited with %s", completed.returncode)
        return completed.returncode


__all__ = ["SubprocessTestRunner"]
