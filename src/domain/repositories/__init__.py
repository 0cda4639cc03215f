"""Domain repositories package.

Contains the abstract room repository the livechat room queries depend on.
The MongoDB implementation lives in src/integration/repositories/.
"""

from .room_repository import QueryRestriction, RoomFilter, RoomRepository

__all__: list[str] = [
    "QueryRestriction",
    "RoomFilter",
    "RoomRepository",
]
