"""Test-Commit-Revert orchestration.

One run: flush the task store to disk, run the test command, then commit
(exit status 0) or revert every uncommitted change (anything else). At most
one run is in flight at a time; a second trigger raises TcrBusyError and
never starts another process.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

from core import TcrBusyError, TcrError, ValidationError, VcsError
from application.ports import TaskRepository, TestRunner, VersionControl
from application.task_store import TaskStore

logger = logging.getLogger("tcr_tasks.tcr")

DEFAULT_COMMIT_MESSAGE = "TCR: tests passed"


class TcrAction(Enum):
    COMMITTED = "committed"
    REVERTED = "reverted"


@dataclass(frozen=True)
class TcrRunRecord:
    command: str
    exit_status: int
    action_taken: TcrAction
    commit_message: str = ""
    duration: float = 0.0
    output: str = ""


def commit_message_for(description: Optional[str]) -> str:
    if description:
        return f"TCR: {description}"
    return DEFAULT_COMMIT_MESSAGE


class TcrOrchestrator:
    def __init__(
        self,
        repository: TaskRepository,
        runner: TestRunner,
        vcs: VersionControl,
        command: Union[str, Callable[[], str]],
    ):
        self.repository = repository
        self.runner = runner
        self.vcs = vcs
        self._command = command
        self._lock = threading.Lock()
        self.last_record: Optional[TcrRunRecord] = None

    @property
    def command(self) -> str:
        value = self._command() if callable(self._command) else self._command
        return (value or "").strip()

    def set_command(self, command: str) -> None:
        cleaned = (command or "").strip()
        if not cleaned:
            raise ValidationError("test command must not be empty")
        self._command = cleaned
        logger.info("test command set to %r", cleaned)

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    def run(self, store: TaskStore, commit_message: str = DEFAULT_COMMIT_MESSAGE) -> TcrRunRecord:
        """Run the whole protocol on the calling thread."""
        self._acquire()
        try:
            self._flush(store)
            return self._test_and_act(self.command, commit_message)
        finally:
            self._lock.release()

    def start(
        self,
        store: TaskStore,
        on_done: Callable[[TcrRunRecord], None],
        on_error: Callable[[TcrError], None],
        commit_message: str = DEFAULT_COMMIT_MESSAGE,
    ) -> threading.Thread:
        """Flush on the calling thread, then test and commit/revert on a worker.

        Flush failures (PersistenceError) and TcrBusyError are raised here,
        before any worker exists. Outcomes of the worker are delivered through
        exactly one of the callbacks, after the in-flight lock is released;
        callers that apply the outcome later must stay busy until they do.
        """
        self._acquire()
        try:
            self._flush(store)
            command = self.command
        except BaseException:
            self._lock.release()
            raise

        def worker() -> None:
            record: Optional[TcrRunRecord] = None
            error: Optional[TcrError] = None
            try:
                record = self._test_and_act(command, commit_message)
            except TcrError as exc:
                error = exc
            except Exception as exc:  # pragma: no cover - unexpected adapter failure
                logger.exception("TCR worker failed")
                error = TcrError(f"TCR run failed: {exc}")
            finally:
                self._lock.release()
            if error is not None:
                on_error(error)
            elif record is not None:
                on_done(record)

        thread = threading.Thread(target=worker, name="tcr-run", daemon=True)
        thread.start()
        return thread

    def _acquire(self) -> None:
        if not self._lock.acquire(blocking=False):
            logger.warning("TCR trigger rejected: a run is already in flight")
            raise TcrBusyError()
        self.last_record = None

    def _flush(self, store: TaskStore) -> None:
        self.repository.save(store)
        store.mark_clean()

    def _test_and_act(self, command: str, commit_message: str) -> TcrRunRecord:
        started = time.monotonic()
        exit_status = self.runner.run(command)
        if exit_status == 0:
            self.vcs.commit(commit_message)
            action = TcrAction.COMMITTED
        else:
            logger.warning("tests failed (exit %s), reverting working tree", exit_status)
            try:
                self.vcs.revert_all()
            except VcsError as exc:
                if exc.fatal:
                    raise
                raise VcsError(str(exc), fatal=True) from exc
            action = TcrAction.REVERTED
        record = TcrRunRecord(
            command=command,
            exit_status=exit_status,
            action_taken=action,
            commit_message=commit_message if action is TcrAction.COMMITTED else "",
            duration=time.monotonic() - started,
            output=getattr(self.runner, "last_output", ""),
        )
        self.last_record = record
        logger.info("TCR run finished: %s (exit %s)", action.value, exit_status)
        return record


__all__ = [
    "DEFAULT_COMMIT_MESSAGE",
    "TcrAction",
    "TcrOrchestrator",
    "TcrRunRecord",
    "commit_message_for",
]
