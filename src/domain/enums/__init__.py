"""Domain enumerations package.

This package contains all enumerations used across the domain layer,
organized into logical modules for maintainability.
"""

from .livechat import (
    DEFAULT_ESTIMATED_WAITING_TIME_QUEUE,
    ConversationStatus,
    LivechatPriorityWeight,
    ReportIndexHint,
    RoomType,
)

__all__ = [
    "RoomType",
    "LivechatPriorityWeight",
    "ConversationStatus",
    "ReportIndexHint",
    "DEFAULT_ESTIMATED_WAITING_TIME_QUEUE",
]
