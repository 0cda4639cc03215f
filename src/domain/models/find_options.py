"""FindOptions value object.

Projection, sorting and paging options applied to a room cursor.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FindOptions:
    """Options forwarded to a repository ``find``.

    sort is a list of (field, direction) tuples. 1=ascending, -1=descending.
    """

    projection: dict[str, Any] | None = None
    sort: list[tuple[str, int]] | None = None
    skip: int | None = None
    limit: int | None = None
