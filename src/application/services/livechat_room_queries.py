"""Enterprise livechat room queries and conversation reports.

Translates livechat domain operations (assigning an SLA, putting a room on
hold, predicting visitor abandonment, associating rooms with a unit) into
MongoDB update statements, and conversation reports into aggregation
pipelines over the rooms collection.

Mutations go through a query restriction that narrows the filter to the rooms
the caller's units permit. Reads, counts and reports do not.
"""

import logging
import time
import warnings
from datetime import datetime
from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.results import UpdateResult

from application.services.unit_query_restriction import no_query_restriction
from application.settings import Settings, app_settings
from domain.enums import ConversationStatus, ReportIndexHint, RoomType
from domain.models import FindOptions, PriorityAssignment, ReportResult, RoomDefaults, SlaAssignment
from domain.repositories import QueryRestriction, RoomFilter, RoomRepository
from integration.repositories import MotorRoomRepository
from observability import report_duration, reports_generated, room_updates

log = logging.getLogger(__name__)

LIVECHAT = RoomType.LIVECHAT.value
PREDICTED_ABANDONMENT_FIELD = "omnichannel.predictedVisitorAbandonmentAt"

SortSpec = dict[str, int]


class LivechatRoomQueries:
    """Livechat room mutations, lookups and reports.

    Built by composition over a RoomRepository: every method builds a filter,
    an update or a pipeline, hands it to the repository and returns the
    driver's result unmodified. Database errors propagate to the caller; no
    method retries or translates them.

    Restricted entry points (update_async, update_one_async, update_many_async
    and every domain mutation built on them) pass their filter through the
    query restriction first. update_one_unrestricted_async skips it and is
    meant for trusted internal callers that cannot evaluate the restriction.
    """

    def __init__(
        self,
        repository: RoomRepository,
        query_restriction: QueryRestriction = no_query_restriction,
        logger: logging.Logger | None = None,
        defaults: RoomDefaults | None = None,
        departments_collection_name: str = "rocketchat_livechat_department",
        users_collection_name: str = "users",
        read_secondary_preferred: bool = True,
    ):
        """Initialize the room queries.

        Args:
            repository: Generic access to the rooms collection
            query_restriction: Async transform narrowing mutation filters
            logger: Logger for restricted filters and association steps
            defaults: Values restored when an SLA or priority is removed
            departments_collection_name: Collection joined by the department report
            users_collection_name: Collection joined by the agents report
            read_secondary_preferred: Send report aggregations to a secondary
        """
        self._repository = repository
        self._query_restriction = query_restriction
        self._logger = logger or log
        self._defaults = defaults or RoomDefaults()
        self._departments_collection_name = departments_collection_name
        self._users_collection_name = users_collection_name
        self._read_secondary_preferred = read_secondary_preferred

    @classmethod
    def create(
        cls,
        database: AsyncIOMotorDatabase,
        settings: Settings | None = None,
        query_restriction: QueryRestriction = no_query_restriction,
        logger: logging.Logger | None = None,
    ) -> "LivechatRoomQueries":
        """Wire the room queries over a MongoDB database from settings."""
        settings = settings or app_settings
        repository = MotorRoomRepository(database[settings.rooms_collection_name])
        return cls(
            repository,
            query_restriction=query_restriction,
            logger=logger,
            defaults=settings.room_defaults(),
            departments_collection_name=settings.departments_collection_name,
            users_collection_name=settings.users_collection_name,
            read_secondary_preferred=settings.reporting_read_secondary_preferred,
        )

    @property
    def repository(self) -> RoomRepository:
        return self._repository

    @property
    def defaults(self) -> RoomDefaults:
        return self._defaults

    # =========================================================================
    # COUNTS
    # =========================================================================

    async def count_prioritized_rooms_async(self) -> int:
        return await self._repository.count_documents_async({"priorityId": {"$exists": True}})

    async def count_rooms_with_sla_async(self) -> int:
        return await self._repository.count_documents_async({"slaId": {"$exists": True}})

    async def count_rooms_with_pdf_transcript_requested_async(self) -> int:
        return await self._repository.count_documents_async({"pdfTranscriptRequested": True})

    async def count_rooms_with_transcript_sent_async(self) -> int:
        return await self._repository.count_documents_async({"pdfTranscriptFileId": {"$exists": True}})

    # =========================================================================
    # RESTRICTED MUTATIONS
    # =========================================================================

    async def update_async(self, filter: RoomFilter, update: dict[str, Any], multi: bool = False, upsert: bool = False) -> UpdateResult:
        """Legacy restricted update.

        Deprecated: use update_one_async or update_many_async instead.
        """
        warnings.warn(
            "LivechatRoomQueries.update_async is deprecated, use update_one_async or update_many_async instead",
            DeprecationWarning,
            stacklevel=2,
        )
        restricted = await self._query_restriction(filter)
        self._logger.debug(f"LivechatRoomQueries.update - query={restricted}")
        room_updates.add(1, {"operation": "update"})
        return await self._repository.update_async(restricted, update, multi=multi, upsert=upsert)

    async def update_one_async(self, filter: RoomFilter, update: dict[str, Any], upsert: bool = False) -> UpdateResult:
        """Update one room the caller's units permit."""
        restricted = await self._query_restriction(filter)
        self._logger.debug(f"LivechatRoomQueries.update_one - query={restricted}")
        room_updates.add(1, {"operation": "update_one"})
        return await self._repository.update_one_async(restricted, update, upsert=upsert)

    async def update_one_unrestricted_async(self, filter: RoomFilter, update: dict[str, Any], upsert: bool = False) -> UpdateResult:
        """Update one room without applying the unit restriction.

        For trusted internal callers that run outside a user context and so
        cannot resolve units. The filter is sent as given.
        """
        room_updates.add(1, {"operation": "update_one_unrestricted"})
        return await self._repository.update_one_async(filter, update, upsert=upsert)

    async def update_many_async(self, filter: RoomFilter, update: dict[str, Any], upsert: bool = False) -> UpdateResult:
        """Update every room the caller's units permit."""
        restricted = await self._query_restriction(filter)
        self._logger.debug(f"LivechatRoomQueries.update_many - query={restricted}")
        room_updates.add(1, {"operation": "update_many"})
        return await self._repository.update_many_async(restricted, update, upsert=upsert)

    # =========================================================================
    # ON HOLD
    # =========================================================================

    async def set_on_hold_by_room_id_async(self, room_id: str) -> UpdateResult:
        return await self.update_one_async({"_id": room_id}, {"$set": {"onHold": True}})

    async def unset_on_hold_by_room_id_async(self, room_id: str) -> UpdateResult:
        return await self.update_one_async({"_id": room_id}, {"$unset": {"onHold": 1}})

    async def unset_on_hold_and_predicted_visitor_abandonment_by_room_id_async(self, room_id: str) -> UpdateResult:
        """Resume a room: clear the hold and the abandonment prediction together."""
        return await self.update_one_async(
            {"_id": room_id},
            {
                "$unset": {
                    PREDICTED_ABANDONMENT_FIELD: 1,
                    "onHold": 1,
                }
            },
        )

    # =========================================================================
    # SLA
    # =========================================================================

    async def set_sla_for_room_by_id_async(self, room_id: str, sla: SlaAssignment) -> UpdateResult:
        """Assign an SLA and copy its due time onto the room."""
        return await self.update_one_async(
            {"_id": room_id},
            {
                "$set": {
                    "slaId": sla.id,
                    "estimatedWaitingTimeQueue": sla.due_time_in_minutes,
                }
            },
        )

    async def remove_sla_from_room_by_id_async(self, room_id: str) -> UpdateResult:
        """Remove the SLA and restore the default waiting time."""
        return await self.update_one_async(
            {"_id": room_id},
            {
                "$unset": {"slaId": 1},
                "$set": {"estimatedWaitingTimeQueue": self._defaults.estimated_waiting_time_queue},
            },
        )

    async def bulk_remove_sla_from_rooms_by_id_async(self, sla_id: str) -> UpdateResult:
        """Detach an SLA from every open livechat room referencing it.

        Closed rooms keep the reference for reporting.
        """
        return await self.update_many_async(
            {
                "open": True,
                "t": LIVECHAT,
                "slaId": sla_id,
            },
            {
                "$unset": {"slaId": 1},
                "$set": {"estimatedWaitingTimeQueue": self._defaults.estimated_waiting_time_queue},
            },
        )

    async def find_open_by_sla_id_async(
        self,
        sla_id: str,
        options: FindOptions | None = None,
        extra_query: RoomFilter | None = None,
    ) -> list[dict[str, Any]]:
        query = {
            "t": LIVECHAT,
            "open": True,
            "slaId": sla_id,
            **(extra_query or {}),
        }
        return await self._repository.find_async(query, options)

    # =========================================================================
    # PRIORITY
    # =========================================================================

    async def set_priority_by_room_id_async(self, room_id: str, priority: PriorityAssignment) -> UpdateResult:
        """Assign a priority and copy its weight onto the room."""
        return await self.update_one_async(
            {"_id": room_id},
            {"$set": {"priorityId": priority.id, "priorityWeight": priority.sort_item}},
        )

    async def unset_priority_by_room_id_async(self, room_id: str) -> UpdateResult:
        """Remove the priority and restore the not-specified weight."""
        return await self.update_one_async(
            {"_id": room_id},
            {
                "$unset": {"priorityId": 1},
                "$set": {"priorityWeight": self._defaults.priority_weight},
            },
        )

    # =========================================================================
    # VISITOR ABANDONMENT
    # =========================================================================

    async def set_predicted_visitor_abandonment_by_room_id_async(self, room_id: str, will_be_abandoned_at: datetime) -> UpdateResult:
        return await self.update_one_async(
            {"_id": room_id},
            {"$set": {PREDICTED_ABANDONMENT_FIELD: will_be_abandoned_at}},
        )

    async def unset_predicted_visitor_abandonment_by_room_id_async(self, room_id: str) -> UpdateResult:
        return await self.update_one_async(
            {"_id": room_id},
            {"$unset": {PREDICTED_ABANDONMENT_FIELD: 1}},
        )

    async def find_abandoned_open_rooms_async(self, date: datetime, extra_query: RoomFilter | None = None) -> list[dict[str, Any]]:
        """Find open rooms whose predicted abandonment time has passed.

        Only rooms still waiting on the visitor qualify: no close time and no
        pending agent response.
        """
        return await self._repository.find_async(
            {
                PREDICTED_ABANDONMENT_FIELD: {"$lte": date},
                "waitingResponse": {"$exists": False},
                "closedAt": {"$exists": False},
                "open": True,
                **(extra_query or {}),
            }
        )

    async def unset_all_predicted_visitor_abandonment_async(self) -> None:
        await self.update_many_async(
            {
                "open": True,
                "t": LIVECHAT,
                PREDICTED_ABANDONMENT_FIELD: {"$exists": True},
            },
            {"$unset": {PREDICTED_ABANDONMENT_FIELD: 1}},
        )

    # =========================================================================
    # DEPARTMENT / UNIT ASSOCIATION
    # =========================================================================

    async def associate_rooms_with_department_to_unit_async(self, departments: list[str], unit_id: str) -> None:
        """Make exactly the rooms of the given departments carry the unit.

        Runs in two steps: attach the unit to rooms in the departments that
        lack it, then detach it from rooms outside the departments. The steps
        are not transactional; re-running the call converges.
        """
        query = {
            "$and": [
                {"departmentId": {"$in": departments}},
                {
                    "$or": [
                        {"departmentAncestors": {"$exists": False}},
                        {
                            "$and": [
                                {"departmentAncestors": {"$exists": True}},
                                {"departmentAncestors": {"$ne": unit_id}},
                            ]
                        },
                    ]
                },
            ]
        }
        update = {"$set": {"departmentAncestors": [unit_id]}}
        self._logger.debug(f"LivechatRoomQueries.associate_rooms_with_department_to_unit - association step: query={query} update={update}")
        association_result = await self.update_many_async(query, update)
        self._logger.debug(f"LivechatRoomQueries.associate_rooms_with_department_to_unit - association step: result={_describe(association_result)}")

        disassociation_query = {
            "departmentAncestors": unit_id,
            "departmentId": {"$nin": departments},
        }
        disassociation_update = {"$unset": {"departmentAncestors": 1}}
        self._logger.debug(
            f"LivechatRoomQueries.associate_rooms_with_department_to_unit - disassociation step: query={disassociation_query} update={disassociation_update}"
        )
        disassociation_result = await self.update_many_async(disassociation_query, disassociation_update)
        self._logger.debug(f"LivechatRoomQueries.associate_rooms_with_department_to_unit - disassociation step: result={_describe(disassociation_result)}")

    async def remove_unit_association_from_rooms_async(self, unit_id: str) -> None:
        query = {"departmentAncestors": unit_id}
        update = {"$unset": {"departmentAncestors": 1}}
        self._logger.debug(f"LivechatRoomQueries.remove_unit_association_from_rooms: query={query} update={update}")
        result = await self.update_many_async(query, update)
        self._logger.debug(f"LivechatRoomQueries.remove_unit_association_from_rooms: result={_describe(result)}")

    async def update_department_ancestors_by_id_async(self, room_id: str, department_ancestors: list[str] | None = None) -> UpdateResult:
        """Replace a room's ancestor chain, or remove it when None."""
        if department_ancestors is not None:
            update: dict[str, Any] = {"$set": {"departmentAncestors": department_ancestors}}
        else:
            update = {"$unset": {"departmentAncestors": 1}}
        return await self.update_one_async({"_id": room_id}, update)

    # =========================================================================
    # REPORTS
    # =========================================================================

    async def get_conversations_by_source_async(self, start: datetime, end: datetime, extra_query: RoomFilter | None = None) -> ReportResult:
        """Count conversations per source, labelled by alias or source type."""
        pipeline = [
            {
                "$match": {
                    "source": {"$exists": True},
                    "t": LIVECHAT,
                    "ts": {"$gte": start, "$lt": end},
                    **(extra_query or {}),
                }
            },
            {"$group": {"_id": "$source", "value": {"$sum": 1}}},
            {"$sort": {"value": -1}},
            {
                "$group": {
                    "_id": None,
                    "total": {"$sum": "$value"},
                    "data": {
                        "$push": {
                            "label": {"$ifNull": ["$_id.alias", "$_id.type"]},
                            "value": "$value",
                        }
                    },
                }
            },
            {"$project": {"_id": 0}},
        ]
        return await self._report_async("by_source", pipeline, ReportIndexHint.SOURCE_TS)

    async def get_conversations_by_status_async(self, start: datetime, end: datetime, extra_query: RoomFilter | None = None) -> ReportResult:
        """Count conversations per status bucket in a single pass.

        Buckets are not exclusive: a closed room counts as Closed through its
        chat duration, an open room without an agent counts as Queued, and a
        served open room counts as Open unless it is on hold.
        """
        pipeline = [
            {
                "$match": {
                    "t": LIVECHAT,
                    "ts": {"$gte": start, "$lt": end},
                    **(extra_query or {}),
                }
            },
            {
                "$group": {
                    "_id": None,
                    "total": {"$sum": 1},
                    "open": {
                        "$sum": {
                            "$cond": [
                                {
                                    "$and": [
                                        {"$eq": ["$open", True]},
                                        {"$or": [{"$not": ["$onHold"]}, {"$eq": ["$onHold", False]}]},
                                        {"$ifNull": ["$servedBy", False]},
                                    ]
                                },
                                1,
                                0,
                            ]
                        }
                    },
                    "closed": {"$sum": {"$cond": [{"$ifNull": ["$metrics.chatDuration", False]}, 1, 0]}},
                    "queued": {
                        "$sum": {
                            "$cond": [
                                {
                                    "$and": [
                                        {"$eq": ["$open", True]},
                                        {"$eq": [{"$ifNull": ["$servedBy", None]}, None]},
                                    ]
                                },
                                1,
                                0,
                            ]
                        }
                    },
                    "onhold": {"$sum": {"$cond": [{"$eq": ["$onHold", True]}, 1, 0]}},
                }
            },
            {
                "$project": {
                    "total": 1,
                    "data": [
                        {"label": ConversationStatus.OPEN.value, "value": "$open"},
                        {"label": ConversationStatus.CLOSED.value, "value": "$closed"},
                        {"label": ConversationStatus.QUEUED.value, "value": "$queued"},
                        {"label": ConversationStatus.ON_HOLD.value, "value": "$onhold"},
                    ],
                }
            },
            {"$unwind": "$data"},
            {"$sort": {"data.value": -1}},
            {
                "$group": {
                    "_id": "$_id",
                    "total": {"$first": "$total"},
                    "data": {"$push": "$data"},
                }
            },
            {"$project": {"_id": 0}},
        ]
        return await self._report_async("by_status", pipeline)

    async def get_conversations_by_department_async(
        self,
        start: datetime,
        end: datetime,
        sort: SortSpec | None = None,
        extra_query: RoomFilter | None = None,
    ) -> ReportResult:
        """Count conversations per department name.

        Rooms whose department no longer exists are dropped from the report.
        """
        pipeline = [
            {
                "$match": {
                    "t": LIVECHAT,
                    "departmentId": {"$exists": True},
                    "ts": {"$lt": end, "$gte": start},
                    **(extra_query or {}),
                }
            },
            {"$group": {"_id": "$departmentId", "total": {"$sum": 1}}},
            {
                "$lookup": {
                    "from": self._departments_collection_name,
                    "localField": "_id",
                    "foreignField": "_id",
                    "as": "department",
                }
            },
            {
                "$group": {
                    "_id": {"$arrayElemAt": ["$department.name", 0]},
                    "total": {"$sum": "$total"},
                }
            },
            {"$match": {"_id": {"$ne": None}}},
            {"$sort": sort or {"total": 1}},
            {
                "$group": {
                    "_id": None,
                    "total": {"$sum": "$total"},
                    "data": {"$push": {"label": "$_id", "value": "$total"}},
                }
            },
            {"$project": {"_id": 0}},
        ]
        return await self._report_async("by_department", pipeline, ReportIndexHint.DEPARTMENT_TS)

    async def get_total_conversations_without_department_between_dates_async(
        self,
        start: datetime,
        end: datetime,
        extra_query: RoomFilter | None = None,
    ) -> int:
        return await self._repository.count_documents_async(
            {
                "t": LIVECHAT,
                "departmentId": {"$exists": False},
                "ts": {"$gte": start, "$lt": end},
                **(extra_query or {}),
            }
        )

    async def get_conversations_by_tags_async(
        self,
        start: datetime,
        end: datetime,
        sort: SortSpec | None = None,
        extra_query: RoomFilter | None = None,
    ) -> ReportResult:
        """Count conversations per tag; a room with several tags counts once per tag."""
        pipeline = [
            {
                "$match": {
                    "t": LIVECHAT,
                    "ts": {"$lt": end, "$gte": start},
                    "tags": {"$exists": True, "$ne": []},
                    **(extra_query or {}),
                }
            },
            {"$group": {"_id": "$tags", "total": {"$sum": 1}}},
            {"$unwind": "$_id"},
            {"$group": {"_id": "$_id", "total": {"$sum": "$total"}}},
            {"$sort": sort or {"total": 1}},
            {
                "$group": {
                    "_id": None,
                    "total": {"$sum": "$total"},
                    "data": {"$push": {"label": "$_id", "value": "$total"}},
                }
            },
            {"$project": {"_id": 0}},
        ]
        return await self._report_async("by_tags", pipeline, ReportIndexHint.TAGS_TS)

    async def get_conversations_without_tags_between_date_async(
        self,
        start: datetime,
        end: datetime,
        extra_query: RoomFilter | None = None,
    ) -> int:
        return await self._repository.count_documents_async(
            {
                "t": LIVECHAT,
                "ts": {"$gte": start, "$lt": end},
                "$or": [
                    {"tags": {"$exists": False}},
                    {"tags": {"$eq": []}},
                ],
                **(extra_query or {}),
            }
        )

    async def get_conversations_by_agents_async(
        self,
        start: datetime,
        end: datetime,
        sort: SortSpec | None = None,
        extra_query: RoomFilter | None = None,
    ) -> ReportResult:
        """Count conversations per serving agent, labelled by agent name.

        Agents missing from the users collection are labelled by their id.
        """
        pipeline = [
            {
                "$match": {
                    "t": LIVECHAT,
                    "ts": {"$gte": start, "$lt": end},
                    "servedBy": {"$exists": True},
                    **(extra_query or {}),
                }
            },
            {"$group": {"_id": "$servedBy._id", "total": {"$sum": 1}}},
            {
                "$lookup": {
                    "from": self._users_collection_name,
                    "localField": "_id",
                    "foreignField": "_id",
                    "as": "agent",
                }
            },
            {"$set": {"agent": {"$first": "$agent"}}},
            {"$addFields": {"name": {"$ifNull": ["$agent.name", "$_id"]}}},
            {"$sort": sort or {"name": 1}},
            {
                "$group": {
                    "_id": None,
                    "total": {"$sum": "$total"},
                    "data": {"$push": {"label": "$name", "value": "$total"}},
                }
            },
            {"$project": {"_id": 0}},
        ]
        return await self._report_async("by_agents", pipeline, ReportIndexHint.SERVED_BY_TS)

    async def get_total_conversations_without_agents_between_date_async(
        self,
        start: datetime,
        end: datetime,
        extra_query: RoomFilter | None = None,
    ) -> int:
        return await self._repository.count_documents_async(
            {
                "t": LIVECHAT,
                "ts": {"$gte": start, "$lt": end},
                "servedBy": {"$exists": False},
                **(extra_query or {}),
            }
        )

    async def _report_async(self, report: str, pipeline: list[dict[str, Any]], hint: ReportIndexHint | None = None) -> ReportResult:
        start_time = time.time()
        documents = await self._repository.aggregate_async(
            pipeline,
            hint=hint.value if hint else None,
            secondary_preferred=self._read_secondary_preferred,
        )

        processing_time_ms = (time.time() - start_time) * 1000
        reports_generated.add(1, {"report": report})
        report_duration.record(processing_time_ms, {"report": report})

        return ReportResult.from_document(documents[0] if documents else None)


def _describe(result: UpdateResult) -> dict[str, Any]:
    return {"matched": result.matched_count, "modified": result.modified_count}
