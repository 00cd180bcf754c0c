"""Unit tests for tui_render helpers."""

from pathlib import Path

import pytest

from core import Status, Task
from application.task_store import TaskStore
from application.tcr import TcrAction, TcrOrchestrator, TcrRunRecord
from interface.modes import AddingNew, ConfirmingDelete, ConfirmingQuit, EditingTestCommand, ViewingOutput
from interface.session import EditSession
from interface.tui_render import (
    display_width,
    ellipsize,
    output_window,
    pad_display,
    render_footer,
    render_input_line,
    render_status_bar,
    render_task_list,
    trim_display,
    visible_range,
)


class NullRepository:
    task_file = Path("tasks.md")

    def load(self, path=None):
        return TaskStore()

    def save(self, store, path=None):
        pass

    def export(self, store, path, fmt):
        return Path("out")


def _text(fragments) -> str:
    return "".join(text for _, text in fragments)


def _session(*tasks: Task, tcr=None) -> EditSession:
    return EditSession(TaskStore(tasks), NullRepository(), tcr)


class TestDisplayHelpers:
    def test_wide_characters_count_double(self):
        assert display_width("abc") == 3
        assert display_width("漢字") == 4

    def test_trim_never_splits_wide_char(self):
        assert trim_display("漢字", 3) == "漢"
        assert pad_display("漢", 4) == "漢  "

    def test_ellipsize(self):
        assert ellipsize("short", 10) == "short"
        assert ellipsize("a long description", 6) == "a lon…"
        assert ellipsize("anything", 0) == ""

    @pytest.mark.parametrize(
        "total, selected, height, expected",
        [
            (0, None, 5, (0, 0)),
            (3, 2, 5, (0, 3)),
            (20, 0, 5, (0, 5)),
            (20, 10, 5, (8, 13)),
            (20, 19, 5, (15, 20)),
        ],
    )
    def test_visible_range_keeps_selection_on_screen(self, total, selected, height, expected):
        start, end = visible_range(total, selected, height)
        assert (start, end) == expected
        if selected is not None:
            assert start <= selected < end


def test_task_list_marks_selection_and_status():
    session = _session(Task(1, "Write spec"), Task(2, "Ship", Status.DONE))
    session.selected_index = 1
    fragments = render_task_list(session, width=40, height=10)
    lines = _text(fragments).splitlines()
    assert lines[0].startswith("  ○ [ ] Write spec")
    assert lines[1].startswith("› ● [x] Ship")
    assert any(style == "class:selected.done" for style, _ in fragments)
    assert all(display_width(line) <= 40 for line in lines)


def test_empty_list_shows_call_to_action():
    assert "No tasks yet" in _text(render_task_list(_session(), 40, 10))


def test_status_bar_shows_counts_dirty_flag_and_command():
    class StubTcr:
        command = "pytest -q"
        in_flight = False
        last_record = TcrRunRecord("pytest -q", 1, TcrAction.REVERTED, duration=0.25)

    session = _session(Task(1, "a"), Task(2, "b", Status.WORKING), tcr=StubTcr())
    session.store.cycle_status(1)
    text = _text(render_status_bar(session, width=200))
    assert "2 tasks" in text
    assert "◐ 2" in text
    assert "modified" in text
    assert "test: pytest -q" in text
    assert "last TCR: reverted (exit 1, 0.2s)" in text or "last TCR: reverted (exit 1, 0.3s)" in text

    narrow = _text(render_status_bar(session, width=12))
    assert display_width(narrow) <= 12


def test_status_bar_spinner_hides_last_run():
    class StubTcr:
        command = "tox"
        in_flight = True
        last_record = TcrRunRecord("tox", 0, TcrAction.COMMITTED)

    text = _text(render_status_bar(_session(tcr=StubTcr()), width=200, spinner="⠋"))
    assert "⠋" in text
    assert "last TCR" not in text
    assert "saved" in text


def test_input_line_per_mode():
    session = _session(Task(1, "Write spec"))
    assert _text(render_input_line(session, 80)) == ""

    session.mode = AddingNew("hello")
    assert _text(render_input_line(session, 80)) == "New task: hello▏"

    session.mode = EditingTestCommand("make test")
    assert "make test" in _text(render_input_line(session, 80))

    session.mode = ConfirmingDelete(1)
    assert "Delete \"Write spec\"?" in _text(render_input_line(session, 80))

    session.mode = ConfirmingQuit()
    assert "Unsaved changes" in _text(render_input_line(session, 80))


def test_long_draft_keeps_its_tail_visible():
    session = _session()
    session.mode = AddingNew("x" * 100 + "END")
    text = _text(render_input_line(session, 30))
    assert text.endswith("END▏")
    assert display_width(text) <= 30


def test_footer_shows_notice_and_mode_hints():
    session = _session(Task(1, "a"))
    text = _text(render_footer(session, 200, "Saved tasks.md", "info"))
    assert text.startswith("Saved tasks.md\n")
    assert "t TCR" in text

    session.mode = AddingNew("")
    assert "Esc cancel" in _text(render_footer(session, 200))


def test_output_window_keeps_tail_and_scrolls_up():
    assert output_window(10, 0, 4) == (6, 10)
    assert output_window(10, 3, 4) == (3, 7)
    assert output_window(10, 50, 4) == (0, 4)
    assert output_window(3, 0, 4) == (0, 3)
    assert output_window(0, 0, 4) == (0, 0)


def test_output_view_replaces_task_list():
    class StubTcr:
        command = "pytest -q"
        in_flight = False
        last_record = TcrRunRecord(
            "pytest -q", 1, TcrAction.REVERTED, output="\x1b[31mFAILED\x1b[0m test_a\n1 failed\n"
        )

    session = _session(Task(1, "Write spec"), tcr=StubTcr())
    session.mode = ViewingOutput()
    text = _text(render_task_list(session, 80, 10))
    assert text.startswith("Test output: pytest -q (exit 1)\n")
    assert "FAILED test_a\n1 failed\n" in text
    assert "Write spec" not in text
    assert "Enter/Esc back" in _text(render_footer(session, 200))
