"""Rendering helpers for TcrTasksTUI: every frame is built from the session."""

import re
from typing import List, Optional, Tuple

from prompt_toolkit.formatted_text import FormattedText
from wcwidth import wcwidth

from core import NotFound, Status, Task
from application.tcr import TcrAction
from interface.i18n import translate
from interface.modes import (
    AddingNew,
    ConfirmingDelete,
    ConfirmingQuit,
    EditingExisting,
    EditingTestCommand,
    ViewingOutput,
)

Fragments = List[Tuple[str, str]]

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")


def display_width(text: str) -> int:
    """Return visual width of text accounting for wide/narrow characters."""
    width = 0
    for ch in text:
        w = wcwidth(ch)
        if w is None:
            w = 0
        width += max(0, w)
    return width


def trim_display(text: str, width: int) -> str:
    """Trim text so visible width doesn't exceed specified width."""
    acc = []
    used = 0
    for ch in text:
        w = wcwidth(ch) or 0
        if w < 0:
            w = 0
        if used + w > width:
            break
        acc.append(ch)
        used += w
    return "".join(acc)


def ellipsize(text: str, width: int) -> str:
    if width <= 0:
        return ""
    if display_width(text) <= width:
        return text
    return trim_display(text, width - 1) + "…"


def pad_display(text: str, width: int) -> str:
    trimmed = trim_display(text, width)
    return trimmed + " " * max(0, width - display_width(trimmed))


def visible_range(total: int, selected: Optional[int], height: int) -> Tuple[int, int]:
    """Window [start, end) of rows to draw so the selection stays on screen."""
    if total <= 0 or height <= 0:
        return 0, 0
    if total <= height:
        return 0, total
    cursor = selected or 0
    start = min(max(0, cursor - height // 2), total - height)
    return start, start + height


def _task_line(task: Task, width: int, selected: bool) -> Fragments:
    code = task.status.code
    row_style = f"class:selected.{code}" if selected else ""
    pointer = "›" if selected else " "
    head = f"{pointer} {task.status.icon} [{task.status.marker}] "
    body = pad_display(ellipsize(task.description, width - display_width(head)), max(0, width - display_width(head)))
    text_style = "class:selected" if selected else ("class:text.dim" if task.status is Status.DONE else "class:text")
    return [
        (row_style or f"class:status.{code}", head),
        (text_style, body),
        ("", "\n"),
    ]


def render_task_list(session, width: int, height: int) -> FormattedText:
    if isinstance(session.mode, ViewingOutput):
        return render_test_output(session, width, height)
    tasks = session.tasks()
    if not tasks:
        return FormattedText([("class:text.dimmer", "  " + translate("EMPTY_LIST")), ("", "\n")])
    start, end = visible_range(len(tasks), session.selected_index, height)
    fragments: Fragments = []
    for idx in range(start, end):
        fragments.extend(_task_line(tasks[idx], width, idx == session.selected_index))
    return FormattedText(fragments)


def output_window(total: int, scroll: int, height: int) -> Tuple[int, int]:
    """Rows [start, end) of the output shown `scroll` lines above the tail."""
    if total <= 0 or height <= 0:
        return 0, 0
    start = max(0, total - height - max(0, scroll))
    return start, min(total, start + height)


def render_test_output(session, width: int, height: int) -> FormattedText:
    record = session.last_tcr_record
    lines = _ANSI_ESCAPE.sub("", session.test_output).splitlines()
    fragments: Fragments = []
    if record is not None:
        title = translate("OUTPUT_TITLE", command=record.command, exit_status=record.exit_status)
        fragments += [("class:header", ellipsize(title, width)), ("", "\n")]
        height -= 1
    start, end = output_window(len(lines), getattr(session.mode, "scroll", 0), height)
    for line in lines[start:end]:
        fragments += [("class:text", trim_display(line.expandtabs(4).replace("\r", ""), width)), ("", "\n")]
    return FormattedText(fragments)


def _count_summary(session) -> str:
    tasks = session.tasks()
    parts = [translate("STATUS_TASKS_COUNT", count=len(tasks))]
    for status in Status:
        parts.append(f"{status.icon} {sum(1 for t in tasks if t.status is status)}")
    return "  ".join(parts)


def render_status_bar(session, width: int, spinner: str = "") -> FormattedText:
    fragments: Fragments = [("class:header", f" {translate('TITLE')} "), ("class:text.dim", _count_summary(session))]
    if session.dirty:
        fragments.append(("class:dirty", f"  ● {translate('STATUS_MODIFIED')}"))
    else:
        fragments.append(("class:clean", f"  {translate('STATUS_SAVED')}"))
    if session.tcr is not None:
        fragments.append(("class:text.dimmer", "  " + translate("TEST_COMMAND_LABEL", command=session.tcr.command)))
    if spinner:
        fragments.append(("class:spinner", f"  {spinner}"))
    record = session.last_tcr_record
    if record is not None and not spinner:
        action = translate("ACTION_COMMITTED" if record.action_taken is TcrAction.COMMITTED else "ACTION_REVERTED")
        fragments.append(
            (
                "class:text.dim",
                "  " + translate("LAST_RUN", action=action, exit_status=record.exit_status, duration=record.duration),
            )
        )
    used = 0
    trimmed: Fragments = []
    for style, text in fragments:
        room = width - used
        if room <= 0:
            break
        piece = trim_display(text, room)
        trimmed.append((style, piece))
        used += display_width(piece)
    return FormattedText(trimmed)


def _prompt_for(session) -> Optional[str]:
    mode = session.mode
    if isinstance(mode, AddingNew):
        return translate("PROMPT_ADD")
    if isinstance(mode, EditingExisting):
        return translate("PROMPT_EDIT", task_id=mode.task_id)
    if isinstance(mode, EditingTestCommand):
        return translate("PROMPT_TEST_COMMAND")
    return None


def render_input_line(session, width: int) -> FormattedText:
    """Prompt with the draft while editing, confirmation text while confirming."""
    mode = session.mode
    if isinstance(mode, ConfirmingDelete):
        try:
            description = session.store.get(mode.task_id).description
        except NotFound:
            description = str(mode.task_id)
        return FormattedText([("class:notice.warning", ellipsize(translate("CONFIRM_DELETE", description=description), width))])
    if isinstance(mode, ConfirmingQuit):
        return FormattedText([("class:notice.warning", ellipsize(translate("CONFIRM_QUIT"), width))])
    prompt = _prompt_for(session)
    if prompt is None:
        return FormattedText([])
    head = f"{prompt}: "
    room = max(1, width - display_width(head) - 1)
    draft = session.draft_text or ""
    # keep the tail of a long draft visible, like a scrolling input field
    while display_width(draft) > room:
        draft = draft[1:]
    return FormattedText([("class:prompt", head), ("class:input", draft), ("class:input", "▏")])


def render_footer(session, width: int, message: str = "", level: str = "info") -> FormattedText:
    fragments: Fragments = []
    if message:
        fragments.append((f"class:notice.{level}", ellipsize(message, width)))
        fragments.append(("", "\n"))
    if isinstance(session.mode, ViewingOutput):
        hint_key = "HINT_OUTPUT"
    elif session.draft_text is not None:
        hint_key = "HINT_DRAFT"
    else:
        hint_key = "HINT_NAVIGATE"
    fragments.append(("class:text.dimmer", ellipsize(translate(hint_key), width)))
    return FormattedText(fragments)


__all__ = [
    "display_width",
    "trim_display",
    "ellipsize",
    "pad_display",
    "visible_range",
    "output_window",
    "render_test_output",
    "render_task_list",
    "render_status_bar",
    "render_input_line",
    "render_footer",
]
