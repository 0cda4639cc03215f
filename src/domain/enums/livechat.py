"""Livechat room enumerations.

These enums carry the constants the livechat room queries write into room
documents and the labels the reporting aggregations emit.
"""

from enum import Enum, IntEnum


class RoomType(str, Enum):
    """Room type discriminator stored in the ``t`` field."""

    LIVECHAT = "l"


class LivechatPriorityWeight(IntEnum):
    """Sortable weight copied onto a room from its priority.

    Lower weights sort first. NOT_SPECIFIED is written when a room has no
    priority so that sorting never meets a missing value.
    """

    HIGHEST = 1
    HIGH = 2
    MEDIUM = 3
    LOW = 4
    LOWEST = 5
    NOT_SPECIFIED = 99


class ConversationStatus(str, Enum):
    """Status buckets reported by the conversations-by-status aggregation."""

    OPEN = "Open"
    CLOSED = "Closed"
    QUEUED = "Queued"
    ON_HOLD = "On_Hold"


class ReportIndexHint(str, Enum):
    """Names of the compound indexes hinted by the reporting aggregations."""

    SOURCE_TS = "source_1_ts_1"
    DEPARTMENT_TS = "departmentId_1_ts_1"
    TAGS_TS = "tags.0_1_ts_1"
    SERVED_BY_TS = "servedBy_1_ts_1"

    @property
    def keys(self) -> list[tuple[str, int]]:
        """Index key specification matching the index name."""
        return {
            ReportIndexHint.SOURCE_TS: [("source", 1), ("ts", 1)],
            ReportIndexHint.DEPARTMENT_TS: [("departmentId", 1), ("ts", 1)],
            ReportIndexHint.TAGS_TS: [("tags.0", 1), ("ts", 1)],
            ReportIndexHint.SERVED_BY_TS: [("servedBy", 1), ("ts", 1)],
        }[self]


# Waiting time (minutes) written to rooms that have no SLA assigned.
DEFAULT_ESTIMATED_WAITING_TIME_QUEUE = 9999999
