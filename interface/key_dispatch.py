"""Input dispatcher: key name + current mode -> editor command.

Key names follow prompt_toolkit (`up`, `enter`, `escape`, `c-u`, ...);
printable characters are passed as themselves.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from interface.modes import ConfirmingDelete, ConfirmingQuit, Mode, Navigate, ViewingOutput, is_draft_mode


class Command(Enum):
    NONE = "none"
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    MOVE_FIRST = "move_first"
    MOVE_LAST = "move_last"
    START_ADD = "start_add"
    START_EDIT = "start_edit"
    START_DELETE = "start_delete"
    EDIT_TEST_COMMAND = "edit_test_command"
    TOGGLE_STATUS = "toggle_status"
    RUN_TCR = "run_tcr"
    EXPORT = "export"
    VIEW_OUTPUT = "view_output"
    SCROLL_UP = "scroll_up"
    SCROLL_DOWN = "scroll_down"
    SCROLL_TOP = "scroll_top"
    SCROLL_BOTTOM = "scroll_bottom"
    SAVE = "save"
    QUIT = "quit"
    INSERT_TEXT = "insert_text"
    DELETE_BACKWARD = "delete_backward"
    CLEAR_DRAFT = "clear_draft"
    CONFIRM = "confirm"
    CANCEL = "cancel"
    DISCARD = "discard"


@dataclass(frozen=True)
class KeyCommand:
    command: Command
    text: str = ""


NAVIGATE_KEYS: Dict[str, Command] = {
    "up": Command.MOVE_UP,
    "k": Command.MOVE_UP,
    "down": Command.MOVE_DOWN,
    "j": Command.MOVE_DOWN,
    "home": Command.MOVE_FIRST,
    "g": Command.MOVE_FIRST,
    "end": Command.MOVE_LAST,
    "G": Command.MOVE_LAST,
    "a": Command.START_ADD,
    "e": Command.START_EDIT,
    "d": Command.START_DELETE,
    "T": Command.EDIT_TEST_COMMAND,
    "space": Command.TOGGLE_STATUS,
    " ": Command.TOGGLE_STATUS,
    "t": Command.RUN_TCR,
    "E": Command.EXPORT,
    "o": Command.VIEW_OUTPUT,
    "s": Command.SAVE,
    "q": Command.QUIT,
}

DRAFT_KEYS: Dict[str, Command] = {
    "enter": Command.CONFIRM,
    "escape": Command.CANCEL,
    "backspace": Command.DELETE_BACKWARD,
    "c-h": Command.DELETE_BACKWARD,
    "c-u": Command.CLEAR_DRAFT,
}

CONFIRM_DELETE_KEYS: Dict[str, Command] = {
    "enter": Command.CONFIRM,
    "y": Command.CONFIRM,
    "escape": Command.CANCEL,
    "n": Command.CANCEL,
}

CONFIRM_QUIT_KEYS: Dict[str, Command] = {
    "enter": Command.CONFIRM,
    "y": Command.CONFIRM,
    "n": Command.DISCARD,
    "escape": Command.CANCEL,
}

OUTPUT_KEYS: Dict[str, Command] = {
    "up": Command.SCROLL_UP,
    "k": Command.SCROLL_UP,
    "down": Command.SCROLL_DOWN,
    "j": Command.SCROLL_DOWN,
    "home": Command.SCROLL_TOP,
    "g": Command.SCROLL_TOP,
    "end": Command.SCROLL_BOTTOM,
    "G": Command.SCROLL_BOTTOM,
    "enter": Command.CANCEL,
    "escape": Command.CANCEL,
    "q": Command.CANCEL,
    "o": Command.CANCEL,
}

NONE = KeyCommand(Command.NONE)


def _insertable(text: str) -> str:
    cleaned = text.replace("\r\n", " ").replace("\n", " ").replace("\t", " ")
    return cleaned if cleaned and cleaned.isprintable() else ""


def dispatch(mode: Mode, key: str, text: Optional[str] = None) -> KeyCommand:
    """Map one key event to a command for `mode`.

    `text` is the literal input carried by the event (the typed character or
    pasted data); when omitted, single-character keys and `space` stand for
    themselves.
    """
    if text is None:
        if key == "space":
            text = " "
        elif len(key) == 1:
            text = key
        else:
            text = ""

    if is_draft_mode(mode):
        command = DRAFT_KEYS.get(key)
        if command:
            return KeyCommand(command)
        insert = _insertable(text)
        return KeyCommand(Command.INSERT_TEXT, insert) if insert else NONE
    if isinstance(mode, ConfirmingDelete):
        return KeyCommand(CONFIRM_DELETE_KEYS.get(key, Command.NONE))
    if isinstance(mode, ConfirmingQuit):
        return KeyCommand(CONFIRM_QUIT_KEYS.get(key, Command.NONE))
    if isinstance(mode, ViewingOutput):
        return KeyCommand(OUTPUT_KEYS.get(key, Command.NONE))
    if isinstance(mode, Navigate):
        return KeyCommand(NAVIGATE_KEYS.get(key, Command.NONE))
    return NONE  # pragma: no cover - every mode is handled above


__all__ = ["Command", "KeyCommand", "dispatch"]
