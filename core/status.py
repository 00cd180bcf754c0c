from enum import Enum
from typing import Final


class Status(Enum):
    PENDING = ("pending", " ", "○")
    WORKING = ("working", "~", "◐")
    DONE = ("done", "x", "●")

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def marker(self) -> str:
        """Checkbox character used in the task file (`- [x]`)."""
        return self.value[1]

    @property
    def icon(self) -> str:
        return self.value[2]

    @property
    def label(self) -> str:
        return self.code.capitalize()

    def next(self) -> "Status":
        """Toggle order: PENDING -> WORKING -> DONE -> PENDING."""
        return _CYCLE[self]

    @classmethod
    def from_marker(cls, marker: str) -> "Status":
        char = (marker or " ").lower()
        for status in cls:
            if status.marker == char:
                return status
        raise ValueError(f"Unknown checkbox marker: {marker!r}")


_CYCLE: Final[dict] = {
    Status.PENDING: Status.WORKING,
    Status.WORKING: Status.DONE,
    Status.DONE: Status.PENDING,
}
