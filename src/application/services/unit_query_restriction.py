"""Unit-based query restriction for livechat rooms.

Narrows room filters to the rooms whose department belongs to one of the
caller's organizational units. Which units a caller belongs to is resolved
elsewhere and supplied through an async provider.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from domain.repositories import RoomFilter

logger = logging.getLogger(__name__)

UnitsProvider = Callable[[], Awaitable[list[str] | None]]
"""Returns the caller's unit ids, or None when the caller is not unit-scoped."""

DepartmentsProvider = Callable[[list[str]], Awaitable[list[str]]]
"""Returns the ids of the departments whose ancestors include any given unit."""


async def no_query_restriction(filter: RoomFilter) -> RoomFilter:
    """Identity restriction for callers that are never unit-scoped."""
    return dict(filter)


class UnitQueryRestriction:
    """Restricts room filters to the caller's units.

    A unit-scoped caller may only reach rooms that either carry one of its
    units in ``departmentAncestors`` or belong to a department of one of its
    units. The condition is prepended to the filter's ``$and`` list so that
    any conditions already there are preserved.

    The incoming filter is never mutated.
    """

    def __init__(self, units_provider: UnitsProvider, departments_provider: DepartmentsProvider):
        """Initialize the restriction.

        Args:
            units_provider: Resolves the caller's unit ids
            departments_provider: Resolves the departments belonging to units
        """
        self._units_provider = units_provider
        self._departments_provider = departments_provider

    async def __call__(self, filter: RoomFilter) -> RoomFilter:
        query: dict[str, Any] = dict(filter)

        units = await self._units_provider()
        if not isinstance(units, list):
            return query

        departments = await self._departments_provider(units)
        condition = {
            "$or": [
                {"departmentAncestors": {"$in": units}},
                {"departmentId": {"$in": departments}},
            ]
        }
        query["$and"] = [condition, *query.get("$and", [])]

        logger.debug(f"Restricted room query to {len(units)} unit(s) and {len(departments)} department(s)")
        return query
