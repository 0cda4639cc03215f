"""Reporting result value objects.

Every conversation report has the same shape: a total and a list of
labelled values ordered by the aggregation.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ReportEntry:
    """One labelled bucket of a conversation report."""

    label: Any
    value: int

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {"label": self.label, "value": self.value}


@dataclass(frozen=True)
class ReportResult:
    """Aggregated conversation counts: ``{total, data: [{label, value}]}``."""

    total: int = 0
    data: list[ReportEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {"total": self.total, "data": [entry.to_dict() for entry in self.data]}

    def as_mapping(self) -> dict[Any, int]:
        """Return the buckets as a label -> value mapping."""
        return {entry.label: entry.value for entry in self.data}

    @classmethod
    def from_document(cls, document: dict[str, Any] | None) -> "ReportResult":
        """Deserialize the single document produced by a report pipeline.

        A pipeline over zero rooms yields no document; that is an empty report.
        """
        if not document:
            return cls()
        return cls(
            total=document.get("total", 0),
            data=[ReportEntry(label=item.get("label"), value=item.get("value", 0)) for item in document.get("data", [])],
        )
