"""Application services package.

Contains the livechat room queries and the query restrictions they apply.
"""

from .livechat_room_queries import LivechatRoomQueries
from .logging_config import configure_logging
from .unit_query_restriction import UnitQueryRestriction, no_query_restriction

__all__ = [
    "configure_logging",
    # Room queries
    "LivechatRoomQueries",
    # Query restrictions
    "UnitQueryRestriction",
    "no_query_restriction",
]
