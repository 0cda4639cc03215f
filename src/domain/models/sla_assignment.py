"""SlaAssignment value object.

The part of a service-level agreement that is copied onto a room.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class SlaAssignment:
    """Reference to an SLA plus its due time, as stored on a room.

    The due time is copied into ``estimatedWaitingTimeQueue`` so that queue
    ordering can filter and sort without joining the SLA collection.
    """

    id: str
    due_time_in_minutes: int

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("SLA id is required")
        if self.due_time_in_minutes < 0:
            raise ValueError(f"SLA due time must not be negative, got {self.due_time_in_minutes}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SlaAssignment":
        """Build from an SLA document (``_id`` / ``dueTimeInMinutes``)."""
        return cls(id=data["_id"], due_time_in_minutes=data["dueTimeInMinutes"])
