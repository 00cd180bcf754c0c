"""Edit session: the single owner of editor state for one process.

The session turns key events into store mutations through the mode state
machine, keeps the selection in bounds, and records the latest notice for
the render surface. It is the only code that mutates the TaskStore while the
editor runs; TCR outcomes are applied here too, on the caller's thread.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from core import (
    NotFound,
    ParseError,
    PersistenceError,
    ProcessSpawnError,
    Task,
    TcrBusyError,
    TcrError,
    ValidationError,
    VcsError,
    clean_description,
)
from application.ports import TaskRepository
from application.task_store import TaskStore
from application.tcr import TcrAction, TcrOrchestrator, TcrRunRecord, commit_message_for
from infrastructure.exporters import ExportFormat
from interface.key_dispatch import Command, KeyCommand, dispatch
from interface.modes import (
    AddingNew,
    ConfirmingDelete,
    ConfirmingQuit,
    EditingExisting,
    EditingTestCommand,
    Mode,
    Navigate,
    ViewingOutput,
    is_draft_mode,
    with_draft,
)

logger = logging.getLogger("tcr_tasks.session")

INFO = "info"
WARNING = "warning"
ERROR = "error"


@dataclass(frozen=True)
class Notice:
    level: str
    key: str
    params: Dict[str, Any] = field(default_factory=dict)

    def render(self, translate: Callable[..., str]) -> str:
        return translate(self.key, **self.params)


class EditSession:
    def __init__(
        self,
        store: TaskStore,
        repository: TaskRepository,
        tcr: Optional[TcrOrchestrator] = None,
        *,
        background_tcr: bool = False,
        post: Optional[Callable[[Callable[[], None]], None]] = None,
        on_test_command_changed: Optional[Callable[[str], None]] = None,
    ):
        self.store = store
        self.repository = repository
        self.tcr = tcr
        self.background_tcr = background_tcr
        # Hands TCR worker results back to the editor thread.
        self.post: Callable[[Callable[[], None]], None] = post or (lambda fn: fn())
        self.on_test_command_changed = on_test_command_changed
        self.mode: Mode = Navigate()
        self.selected_index: Optional[int] = None
        self.notice: Optional[Notice] = None
        self.should_exit = False
        self.on_change: Optional[Callable[[], None]] = None
        # set from a background trigger until its outcome has been applied here
        self._tcr_pending = False
        self._clamp_selection()

    # -------------------- queries --------------------
    @property
    def draft_text(self) -> Optional[str]:
        return self.mode.draft if is_draft_mode(self.mode) else None  # type: ignore[union-attr]

    @property
    def dirty(self) -> bool:
        return self.store.dirty

    @property
    def tcr_running(self) -> bool:
        return self._tcr_pending or bool(self.tcr and self.tcr.in_flight)

    @property
    def last_tcr_record(self) -> Optional[TcrRunRecord]:
        return self.tcr.last_record if self.tcr else None

    @property
    def test_output(self) -> str:
        record = self.last_tcr_record
        return record.output if record else ""

    def selected_task(self) -> Optional[Task]:
        if self.selected_index is None:
            return None
        return self.store.at(self.selected_index)

    def tasks(self) -> List[Task]:
        return list(self.store.snapshot())

    # -------------------- input --------------------
    def handle_key(self, key: str, text: Optional[str] = None) -> KeyCommand:
        action = dispatch(self.mode, key, text)
        handler = self._HANDLERS.get(action.command)
        if handler is not None:
            handler(self, action)
        return action

    def notify(self, level: str, key: str, **params: Any) -> None:
        self.notice = Notice(level, key, params)
        if level == ERROR:
            logger.error("%s %s", key, params)
        if self.on_change:
            self.on_change()

    # -------------------- navigation --------------------
    def _clamp_selection(self) -> None:
        total = len(self.store)
        if total == 0:
            self.selected_index = None
        elif self.selected_index is None:
            self.selected_index = 0
        else:
            self.selected_index = max(0, min(self.selected_index, total - 1))

    def move_selection(self, delta: int) -> None:
        if self.selected_index is None:
            return
        self.selected_index += delta
        self._clamp_selection()

    def _move_up(self, _: KeyCommand) -> None:
        self.move_selection(-1)

    def _move_down(self, _: KeyCommand) -> None:
        self.move_selection(1)

    def _move_first(self, _: KeyCommand) -> None:
        if self.selected_index is not None:
            self.selected_index = 0

    def _move_last(self, _: KeyCommand) -> None:
        if self.selected_index is not None:
            self.selected_index = len(self.store) - 1

    # -------------------- mode transitions --------------------
    def _start_add(self, _: KeyCommand) -> None:
        self.mode = AddingNew("")

    def _start_edit(self, _: KeyCommand) -> None:
        task = self.selected_task()
        if task is not None:
            self.mode = EditingExisting(task.id, task.description)

    def _start_delete(self, _: KeyCommand) -> None:
        task = self.selected_task()
        if task is not None:
            self.mode = ConfirmingDelete(task.id)

    def _edit_test_command(self, _: KeyCommand) -> None:
        current = self.tcr.command if self.tcr else ""
        self.mode = EditingTestCommand(current)

    def _insert_text(self, action: KeyCommand) -> None:
        self.mode = with_draft(self.mode, (self.draft_text or "") + action.text)  # type: ignore[arg-type]

    def _delete_backward(self, _: KeyCommand) -> None:
        self.mode = with_draft(self.mode, (self.draft_text or "")[:-1])  # type: ignore[arg-type]

    def _clear_draft(self, _: KeyCommand) -> None:
        self.mode = with_draft(self.mode, "")  # type: ignore[arg-type]

    def _cancel(self, _: KeyCommand) -> None:
        self.mode = Navigate()

    # -------------------- test output --------------------
    def _view_output(self, _: KeyCommand) -> None:
        if not self.test_output:
            self.notify(INFO, "MSG_NO_TEST_OUTPUT")
            return
        self.mode = ViewingOutput()

    def _scroll_output(self, scroll: int) -> None:
        last = max(0, len(self.test_output.splitlines()) - 1)
        self.mode = ViewingOutput(max(0, min(scroll, last)))

    def _scroll_up(self, _: KeyCommand) -> None:
        self._scroll_output(getattr(self.mode, "scroll", 0) + 1)

    def _scroll_down(self, _: KeyCommand) -> None:
        self._scroll_output(getattr(self.mode, "scroll", 0) - 1)

    def _scroll_top(self, _: KeyCommand) -> None:
        self._scroll_output(len(self.test_output.splitlines()))

    def _scroll_bottom(self, _: KeyCommand) -> None:
        self._scroll_output(0)

    # -------------------- mutations --------------------
    def _reject_if_busy(self) -> bool:
        if self.tcr_running:
            self.notify(WARNING, "MSG_TCR_BUSY")
            return True
        return False

    def _toggle_status(self, _: KeyCommand) -> None:
        task = self.selected_task()
        if task is None or self._reject_if_busy():
            return
        self.store.cycle_status(task.id)

    def _confirm(self, _: KeyCommand) -> None:
        mode = self.mode
        if isinstance(mode, EditingTestCommand):
            self._commit_test_command(mode.draft)
            return
        if self._reject_if_busy():
            return
        if isinstance(mode, AddingNew):
            self._commit_new(mode.draft)
        elif isinstance(mode, EditingExisting):
            self._commit_edit(mode.task_id, mode.draft)
        elif isinstance(mode, ConfirmingDelete):
            self._commit_delete(mode.task_id)
        elif isinstance(mode, ConfirmingQuit):
            self._save_and_quit()

    def _commit_new(self, draft: str) -> None:
        try:
            task_id = self.store.add(draft)
        except ValidationError:
            self.notify(WARNING, "MSG_DESCRIPTION_REQUIRED")
            return
        self.selected_index = self.store.index_of(task_id)
        self.mode = Navigate()

    def _commit_edit(self, task_id: int, draft: str) -> None:
        try:
            if self.store.get(task_id).description != clean_description(draft):
                self.store.update_description(task_id, draft)
        except ValidationError:
            self.notify(WARNING, "MSG_DESCRIPTION_REQUIRED")
            return
        except NotFound:
            self.notify(WARNING, "MSG_TASK_GONE", task_id=task_id)
        self.mode = Navigate()

    def _commit_delete(self, task_id: int) -> None:
        try:
            self.store.remove(task_id)
        except NotFound:
            self.notify(WARNING, "MSG_TASK_GONE", task_id=task_id)
        else:
            self.notify(INFO, "MSG_TASK_DELETED", task_id=task_id)
        self.mode = Navigate()
        self._clamp_selection()

    def _commit_test_command(self, draft: str) -> None:
        command = draft.strip()
        if not command:
            self.notify(WARNING, "MSG_TEST_COMMAND_REQUIRED")
            return
        self.mode = Navigate()
        if self.tcr is None:
            self.notify(ERROR, "MSG_TCR_UNAVAILABLE")
            return
        self.tcr.set_command(command)
        if self.on_test_command_changed:
            try:
                self.on_test_command_changed(command)
            except OSError as exc:
                self.notify(WARNING, "MSG_TEST_COMMAND_NOT_PERSISTED", error=exc)
                return
        self.notify(INFO, "MSG_TEST_COMMAND_SET", command=command)

    # -------------------- persistence --------------------
    def save(self) -> bool:
        try:
            self.repository.save(self.store)
        except PersistenceError as exc:
            self.notify(ERROR, "MSG_SAVE_FAILED", error=exc)
            return False
        self.store.mark_clean()
        self.notify(INFO, "MSG_SAVED", path=getattr(self.repository, "task_file", ""))
        return True

    def _save(self, _: KeyCommand) -> None:
        if not self._reject_if_busy():
            self.save()

    def export(self) -> Dict[ExportFormat, Path]:
        try:
            written = self.repository.export_all(self.store)
        except PersistenceError as exc:
            self.notify(ERROR, "MSG_EXPORT_FAILED", error=exc)
            return {}
        self.notify(INFO, "MSG_EXPORTED", paths=", ".join(str(p) for p in written.values()))
        return written

    def _export(self, _: KeyCommand) -> None:
        # exports land in the working tree the test run commits or cleans
        if not self._reject_if_busy():
            self.export()

    def _quit(self, _: KeyCommand) -> None:
        if self.store.dirty:
            self.mode = ConfirmingQuit()
        else:
            self.should_exit = True

    def _save_and_quit(self) -> None:
        try:
            self.repository.save(self.store)
        except PersistenceError as exc:
            self.mode = Navigate()
            self.notify(ERROR, "MSG_QUIT_SAVE_FAILED", error=exc)
            return
        self.store.mark_clean()
        self.should_exit = True

    def _discard(self, _: KeyCommand) -> None:
        self.should_exit = True

    # -------------------- TCR --------------------
    def run_tcr(self) -> None:
        if self.tcr is None:
            self.notify(ERROR, "MSG_TCR_UNAVAILABLE")
            return
        if self._reject_if_busy():
            return
        task = self.selected_task()
        message = commit_message_for(task.description if task else None)
        try:
            if self.background_tcr:
                self._start_background_tcr(message)
                return
            record = self.tcr.run(self.store, commit_message=message)
        except TcrBusyError:
            self.notify(WARNING, "MSG_TCR_BUSY")
        except PersistenceError as exc:
            self.notify(ERROR, "MSG_TCR_FLUSH_FAILED", error=exc)
        except TcrError as exc:
            self.apply_tcr_error(exc)
        else:
            self.apply_tcr_record(record)

    def _start_background_tcr(self, message: str) -> None:
        """Flush and hand the run to a worker; the session stays busy until
        the posted outcome is applied, not merely until the worker returns."""
        self._tcr_pending = True
        try:
            self.tcr.start(  # type: ignore[union-attr]
                self.store,
                on_done=lambda record: self.post(lambda: self.apply_tcr_record(record)),
                on_error=lambda exc: self.post(lambda: self.apply_tcr_error(exc)),
                commit_message=message,
            )
        except Exception:
            self._tcr_pending = False
            raise
        if self._tcr_pending:
            self.notify(INFO, "MSG_TCR_RUNNING", command=self.tcr.command)  # type: ignore[union-attr]

    def _run_tcr(self, _: KeyCommand) -> None:
        self.run_tcr()

    def apply_tcr_record(self, record: TcrRunRecord) -> None:
        self._tcr_pending = False
        if record.action_taken is TcrAction.COMMITTED:
            self.notify(INFO, "MSG_TCR_COMMITTED", message=record.commit_message)
            return
        if self.reload_from_disk():
            key = "MSG_TCR_REVERTED_OUTPUT" if record.output else "MSG_TCR_REVERTED"
            self.notify(WARNING, key, exit_status=record.exit_status)

    def apply_tcr_error(self, exc: TcrError) -> None:
        self._tcr_pending = False
        if isinstance(exc, ProcessSpawnError):
            self.notify(ERROR, "MSG_TCR_SPAWN_FAILED", error=exc)
        elif isinstance(exc, VcsError) and exc.fatal:
            self.notify(ERROR, "MSG_TCR_REVERT_FAILED", error=exc)
        elif isinstance(exc, VcsError):
            self.notify(ERROR, "MSG_TCR_COMMIT_FAILED", error=exc)
        elif isinstance(exc, TcrBusyError):
            self.notify(WARNING, "MSG_TCR_BUSY")
        else:
            self.notify(ERROR, "MSG_TCR_FAILED", error=exc)

    def reload_from_disk(self) -> bool:
        """Replace the in-memory tasks with the task file's current content."""
        try:
            fresh = self.repository.load()
        except ParseError as exc:
            self.notify(ERROR, "MSG_RELOAD_FAILED", error=exc)
            return False
        selected = self.selected_task()
        self.store.replace_all(fresh.snapshot(), fresh.next_id)
        if isinstance(self.mode, (EditingExisting, ConfirmingDelete)):
            self.mode = Navigate()
        if selected is not None:
            try:
                self.selected_index = self.store.index_of(selected.id)
            except NotFound:
                pass
        self._clamp_selection()
        return True

    _HANDLERS: Dict[Command, Callable[["EditSession", KeyCommand], None]] = {
        Command.MOVE_UP: _move_up,
        Command.MOVE_DOWN: _move_down,
        Command.MOVE_FIRST: _move_first,
        Command.MOVE_LAST: _move_last,
        Command.START_ADD: _start_add,
        Command.START_EDIT: _start_edit,
        Command.START_DELETE: _start_delete,
        Command.EDIT_TEST_COMMAND: _edit_test_command,
        Command.TOGGLE_STATUS: _toggle_status,
        Command.RUN_TCR: _run_tcr,
        Command.EXPORT: _export,
        Command.VIEW_OUTPUT: _view_output,
        Command.SCROLL_UP: _scroll_up,
        Command.SCROLL_DOWN: _scroll_down,
        Command.SCROLL_TOP: _scroll_top,
        Command.SCROLL_BOTTOM: _scroll_bottom,
        Command.SAVE: _save,
        Command.QUIT: _quit,
        Command.INSERT_TEXT: _insert_text,
        Command.DELETE_BACKWARD: _delete_backward,
        Command.CLEAR_DRAFT: _clear_draft,
        Command.CONFIRM: _confirm,
        Command.CANCEL: _cancel,
        Command.DISCARD: _discard,
    }


__all__ = ["EditSession", "Notice", "INFO", "WARNING", "ERROR"]
