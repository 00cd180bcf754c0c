from dataclasses import dataclass, replace
from typing import Any, Dict

from .errors import ValidationError
from .status import Status


def clean_description(text: str) -> str:
    """Return the stored form of a description or raise ValidationError.

    Descriptions are single-line: interior line breaks collapse to one space.
    """
    value = " ".join((text or "").split())
    if not value:
        raise ValidationError("Description must not be empty")
    return value


@dataclass(frozen=True)
class Task:
    """A single task record. Instances are immutable; the store swaps them."""

    id: int
    description: str
    status: Status = Status.PENDING

    def with_status(self, status: Status) -> "Task":
        return replace(self, status=status)

    def with_description(self, description: str) -> "Task":
        return replace(self, description=clean_description(description))

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "description": self.description, "status": self.status.code}
