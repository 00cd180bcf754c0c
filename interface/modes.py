"""Interaction modes of the editor, one value at a time.

Draft-carrying modes hold their own draft text, so there is no draft buffer
outside of an edit and no way to be editing and confirming at once.
"""

from dataclasses import dataclass, replace
from typing import Union


@dataclass(frozen=True)
class Navigate:
    pass


@dataclass(frozen=True)
class AddingNew:
    draft: str = ""


@dataclass(frozen=True)
class EditingExisting:
    task_id: int
    draft: str = ""


@dataclass(frozen=True)
class EditingTestCommand:
    draft: str = ""


@dataclass(frozen=True)
class ConfirmingDelete:
    task_id: int


@dataclass(frozen=True)
class ConfirmingQuit:
    pass


@dataclass(frozen=True)
class ViewingOutput:
    """Last test output; `scroll` counts lines up from the end."""

    scroll: int = 0


DraftMode = Union[AddingNew, EditingExisting, EditingTestCommand]
Mode = Union[Navigate, AddingNew, EditingExisting, EditingTestCommand, ConfirmingDelete, ConfirmingQuit, ViewingOutput]

DRAFT_MODES = (AddingNew, EditingExisting, EditingTestCommand)


def is_draft_mode(mode: Mode) -> bool:
    return isinstance(mode, DRAFT_MODES)


def with_draft(mode: DraftMode, draft: str) -> DraftMode:
    return replace(mode, draft=draft)


__all__ = [
    "Navigate",
    "AddingNew",
    "EditingExisting",
    "EditingTestCommand",
    "ConfirmingDelete",
    "ConfirmingQuit",
    "ViewingOutput",
    "DraftMode",
    "Mode",
    "DRAFT_MODES",
    "is_draft_mode",
    "with_draft",
]
