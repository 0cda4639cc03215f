"""Abstract repository for livechat room documents."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any

from pymongo.results import UpdateResult

from domain.models import FindOptions

RoomFilter = dict[str, Any]
"""MongoDB filter document over the rooms collection."""

QueryRestriction = Callable[[RoomFilter], Awaitable[RoomFilter]]
"""Async transform narrowing a room filter to the rooms a caller may touch."""


class RoomRepository(ABC):
    """Generic access to the rooms collection.

    This is the capability the livechat room queries are built on. It exposes
    raw documents and the driver's own result objects; errors raised by the
    database propagate unchanged.
    """

    @abstractmethod
    async def find_async(self, filter: RoomFilter, options: FindOptions | None = None) -> list[dict[str, Any]]:
        """Retrieve the room documents matching a filter."""
        pass

    @abstractmethod
    async def update_async(self, filter: RoomFilter, update: dict[str, Any], multi: bool = False, upsert: bool = False) -> UpdateResult:
        """Legacy update: one document, or every match when ``multi`` is set."""
        pass

    @abstractmethod
    async def update_one_async(self, filter: RoomFilter, update: dict[str, Any], upsert: bool = False) -> UpdateResult:
        """Update the first room matching a filter."""
        pass

    @abstractmethod
    async def update_many_async(self, filter: RoomFilter, update: dict[str, Any], upsert: bool = False) -> UpdateResult:
        """Update every room matching a filter."""
        pass

    @abstractmethod
    async def count_documents_async(self, filter: RoomFilter) -> int:
        """Count the rooms matching a filter."""
        pass

    @abstractmethod
    async def aggregate_async(
        self,
        pipeline: list[dict[str, Any]],
        hint: str | None = None,
        secondary_preferred: bool = False,
    ) -> list[dict[str, Any]]:
        """Run an aggregation pipeline over the rooms collection.

        Args:
            pipeline: The aggregation stages
            hint: Optional index name the server must use
            secondary_preferred: Read from a secondary when one is available
        """
        pass
