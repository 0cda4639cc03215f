"""PriorityAssignment value object."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PriorityAssignment:
    """Reference to a priority plus the weight copied onto the room."""

    id: str
    sort_item: int

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Priority id is required")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PriorityAssignment":
        """Build from a priority document (``_id`` / ``sortItem``)."""
        return cls(id=data["_id"], sort_item=data["sortItem"])
