"""MongoDB repository implementation for livechat room documents."""

import logging
from typing import Any

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReadPreference
from pymongo.results import UpdateResult

from domain.enums import ReportIndexHint
from domain.models import FindOptions
from domain.repositories import RoomFilter, RoomRepository

log = logging.getLogger(__name__)


class MotorRoomRepository(RoomRepository):
    """
    MongoDB-based repository over the rooms collection.

    Works on raw room documents through Motor's collection API, so that the
    livechat room queries can express their filters, updates and pipelines
    exactly as MongoDB receives them. Driver results are returned unmodified
    and driver errors propagate to the caller.
    """

    def __init__(self, collection: AsyncIOMotorCollection):
        self._collection = collection

    @property
    def collection(self) -> AsyncIOMotorCollection:
        return self._collection

    async def find_async(self, filter: RoomFilter, options: FindOptions | None = None) -> list[dict[str, Any]]:
        """Query rooms with optional projection, sorting and pagination."""
        options = options or FindOptions()
        cursor = self.collection.find(filter, options.projection)

        if options.sort:
            cursor = cursor.sort(options.sort)
        if options.skip:
            cursor = cursor.skip(options.skip)
        if options.limit:
            cursor = cursor.limit(options.limit)

        results = []
        async for doc in cursor:
            results.append(doc)
        return results

    async def update_async(self, filter: RoomFilter, update: dict[str, Any], multi: bool = False, upsert: bool = False) -> UpdateResult:
        if multi:
            return await self.collection.update_many(filter, update, upsert=upsert)
        return await self.collection.update_one(filter, update, upsert=upsert)

    async def update_one_async(self, filter: RoomFilter, update: dict[str, Any], upsert: bool = False) -> UpdateResult:
        return await self.collection.update_one(filter, update, upsert=upsert)

    async def update_many_async(self, filter: RoomFilter, update: dict[str, Any], upsert: bool = False) -> UpdateResult:
        return await self.collection.update_many(filter, update, upsert=upsert)

    async def count_documents_async(self, filter: RoomFilter) -> int:
        return await self.collection.count_documents(filter)

    async def aggregate_async(
        self,
        pipeline: list[dict[str, Any]],
        hint: str | None = None,
        secondary_preferred: bool = False,
    ) -> list[dict[str, Any]]:
        """Run a pipeline, optionally on a secondary and with an index hint.

        Reporting pipelines scan large historical ranges, so they are sent to a
        secondary when one is available and pinned to the index matching the
        grouping dimension.
        """
        collection = self.collection
        if secondary_preferred:
            collection = collection.with_options(read_preference=ReadPreference.SECONDARY_PREFERRED)

        kwargs: dict[str, Any] = {}
        if hint:
            kwargs["hint"] = hint

        results = []
        async for doc in collection.aggregate(pipeline, **kwargs):
            results.append(doc)
        return results

    async def ensure_reporting_indexes_async(self) -> list[str]:
        """Create the compound indexes the reporting aggregations hint.

        A hinted aggregation fails when the named index is missing, so this
        must run before reports are served from a fresh database.

        Returns:
            Names of the indexes ensured
        """
        names = []
        for index in ReportIndexHint:
            names.append(await self.collection.create_index(index.keys, name=index.value))
        log.info(f"✅ Reporting indexes ensured on '{self.collection.name}': {', '.join(names)}")
        return names
