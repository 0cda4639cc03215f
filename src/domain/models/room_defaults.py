"""RoomDefaults value object."""

from dataclasses import dataclass

from domain.enums import DEFAULT_ESTIMATED_WAITING_TIME_QUEUE, LivechatPriorityWeight


@dataclass(frozen=True)
class RoomDefaults:
    """Values restored on a room when its SLA or priority is removed.

    Fields used for queue sorting must never be absent, so removing an SLA or
    a priority writes these defaults instead of unsetting the field.
    """

    estimated_waiting_time_queue: int = DEFAULT_ESTIMATED_WAITING_TIME_QUEUE
    priority_weight: int = LivechatPriorityWeight.NOT_SPECIFIED.value
