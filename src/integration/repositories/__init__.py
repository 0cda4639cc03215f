"""Integration layer repositories package.

Contains the MongoDB implementation of the room repository defined in
domain/repositories/.
"""

from .motor_room_repository import MotorRoomRepository

__all__ = [
    "MotorRoomRepository",
]
