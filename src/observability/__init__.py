"""Observability utilities and metrics."""

from .metrics import report_duration, reports_generated, room_updates

__all__ = [
    # Room metrics
    "room_updates",
    # Report metrics
    "reports_generated",
    "report_duration",
]
