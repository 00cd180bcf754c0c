"""TUI application - TcrTasksTUI class and run_tui entry."""

import os
import time
from typing import Dict, List, Optional

from prompt_toolkit.application import Application
from prompt_toolkit.filters import Condition
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import HSplit, Layout, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.layout.dimension import Dimension

from interface.i18n import translate
from interface.modes import Navigate
from interface.session import ERROR, WARNING, EditSession
from interface.tui_render import render_footer, render_input_line, render_status_bar, render_task_list
from interface.tui_themes import DEFAULT_THEME, build_style

# Physical keys of a Russian layout mapped to the latin command keys.
RU_LAYOUT: Dict[str, str] = {
    "й": "q",
    "ф": "a",
    "у": "e",
    "в": "d",
    "е": "t",
    "Е": "T",
    "У": "E",
    "ы": "s",
    "о": "j",
    "л": "k",
    "п": "g",
    "П": "G",
    "н": "y",
    "т": "n",
    "щ": "o",
}

NAMED_KEYS = ("up", "down", "home", "end", "enter", "escape", "backspace", "c-u")

NOTICE_TTL = {"info": 4.0, WARNING: 6.0}


class TcrTasksTUI:
    SPINNER_FRAMES: List[str] = ["⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏"]

    def __init__(self, session: EditSession, theme: str = DEFAULT_THEME):
        self.session = session
        self.theme_name = theme
        self.style = build_style(theme)
        self.status_message = ""
        self.status_level = "info"
        self.status_message_expires: Optional[float] = None
        self.spinner_start = time.time()
        self._last_notice = None

        session.on_change = self._on_session_change
        session.post = self._post

        self.status_bar = Window(
            content=FormattedTextControl(self.get_status_text),
            height=1,
            always_hide_cursor=True,
        )
        self.list_window = Window(
            content=FormattedTextControl(self.get_task_list_text),
            always_hide_cursor=True,
            wrap_lines=False,
        )
        self.input_line = Window(
            content=FormattedTextControl(self.get_input_text),
            height=Dimension(min=0, max=1),
            always_hide_cursor=True,
        )
        self.footer = Window(
            content=FormattedTextControl(self.get_footer_text),
            height=Dimension(min=1, max=2),
            always_hide_cursor=True,
        )
        root = HSplit([self.status_bar, Window(height=1, char="─", style="class:border"), self.list_window, self.input_line, self.footer])

        self.app = Application(
            layout=Layout(root),
            key_bindings=self._build_key_bindings(),
            style=self.style,
            full_screen=True,
            refresh_interval=0.25,
        )
        try:
            self.app.ttimeoutlen = max(0.0, float(os.getenv("TCR_TASKS_TUI_TTIMEOUTLEN", "0.05")))
        except ValueError:
            self.app.ttimeoutlen = 0.05

    @staticmethod
    def get_terminal_width() -> int:
        """Get current terminal width, default to 100 if unavailable."""
        try:
            return os.get_terminal_size().columns
        except (AttributeError, ValueError, OSError):
            return 100

    @staticmethod
    def get_terminal_height() -> int:
        try:
            return os.get_terminal_size().lines
        except (AttributeError, ValueError, OSError):
            return 40

    # -------------------- key bindings --------------------
    def _build_key_bindings(self) -> KeyBindings:
        kb = KeyBindings()
        drafting = Condition(lambda: self.session.draft_text is not None)

        def feed(event, key: str, text: Optional[str] = None) -> None:
            self.session.handle_key(key, text)
            if self.session.should_exit:
                event.app.exit(result=0)

        for name in NAMED_KEYS:
            kb.add(name, eager=name == "escape")(lambda event, name=name: feed(event, name))

        @kb.add(Keys.BracketedPaste, filter=drafting)
        def _(event):
            feed(event, "paste", event.data)

        @kb.add(Keys.Any)
        def _(event):
            data = event.data or ""
            if not data:
                return
            key = data if self.session.draft_text is not None else RU_LAYOUT.get(data, data)
            feed(event, key, data)

        @kb.add("c-c")
        def _(event):
            self.handle_interrupt()
            if self.session.should_exit:
                event.app.exit(result=0)

        return kb

    def handle_interrupt(self) -> None:
        """Ctrl+C: leave the current mode first, then act like q (asks when dirty)."""
        if not isinstance(self.session.mode, Navigate):
            self.session.handle_key("escape")
        self.session.handle_key("q")

    # -------------------- cross-thread posting --------------------
    def _post(self, fn) -> None:
        loop = getattr(self.app, "loop", None)
        if loop is None:
            fn()
            return
        loop.call_soon_threadsafe(self._run_posted, fn)

    def _run_posted(self, fn) -> None:
        fn()
        self.force_render()

    # -------------------- notices --------------------
    def _on_session_change(self) -> None:
        notice = self.session.notice
        if notice is None or notice is self._last_notice:
            return
        self._last_notice = notice
        ttl = NOTICE_TTL.get(notice.level)
        self.set_status_message(notice.render(translate), ttl=ttl, level=notice.level)

    def set_status_message(self, message: str, ttl: Optional[float] = 4.0, level: str = "info") -> None:
        """Show `message` in the footer; `ttl=None` keeps it until the next one."""
        self.status_message = message
        self.status_level = level
        self.status_message_expires = None if ttl is None else time.time() + ttl
        if self.session.tcr_running and level == "info":
            self.spinner_start = time.time()

    def current_status_message(self) -> str:
        if not self.status_message:
            return ""
        if self.status_message_expires is not None and time.time() > self.status_message_expires:
            if self.session.tcr_running:
                return self.status_message
            self.status_message = ""
            return ""
        return self.status_message

    def _spinner_frame(self) -> str:
        if not self.session.tcr_running:
            return ""
        elapsed = time.time() - self.spinner_start
        idx = int(elapsed * 8) % len(self.SPINNER_FRAMES)
        return self.SPINNER_FRAMES[idx]

    # -------------------- rendering --------------------
    def _list_height(self) -> int:
        return max(1, self.get_terminal_height() - 5)

    def get_status_text(self) -> FormattedText:
        return render_status_bar(self.session, self.get_terminal_width(), spinner=self._spinner_frame())

    def get_task_list_text(self) -> FormattedText:
        return render_task_list(self.session, self.get_terminal_width(), self._list_height())

    def get_input_text(self) -> FormattedText:
        return render_input_line(self.session, self.get_terminal_width())

    def get_footer_text(self) -> FormattedText:
        message = self.current_status_message()
        level = self.status_level if self.status_level in ("info", WARNING, ERROR) else "info"
        return render_footer(self.session, self.get_terminal_width(), message, level)

    def force_render(self) -> None:
        app = getattr(self, "app", None)
        if app is not None:
            app.invalidate()

    def run(self) -> int:
        return self.app.run() or 0


def run_tui(session: EditSession, theme: str = DEFAULT_THEME) -> int:
    return TcrTasksTUI(session, theme=theme or DEFAULT_THEME).run()


__all__ = ["TcrTasksTUI", "run_tui", "RU_LAYOUT", "NAMED_KEYS"]
