"""Domain value objects for livechat room queries.

These are immutable value objects passed to and returned from the room
queries. All value objects use @dataclass(frozen=True) for immutability.
"""

from .find_options import FindOptions
from .priority_assignment import PriorityAssignment
from .report_result import ReportEntry, ReportResult
from .room_defaults import RoomDefaults
from .sla_assignment import SlaAssignment

__all__ = [
    "FindOptions",
    "PriorityAssignment",
    "ReportEntry",
    "ReportResult",
    "RoomDefaults",
    "SlaAssignment",
]
