"""Business metrics for Livechat Room Queries.

Defines OpenTelemetry metrics for room mutations and conversation reports.
"""

from opentelemetry import metrics

meter = metrics.get_meter(__name__)

# =============================================================================
# ROOM METRICS
# =============================================================================

room_updates = meter.create_counter(
    name="livechat.rooms.updates",
    description="Total room update statements issued",
    unit="1",
)

# =============================================================================
# REPORT METRICS
# =============================================================================

reports_generated = meter.create_counter(
    name="livechat.reports.generated",
    description="Total conversation reports generated",
    unit="1",
)

report_duration = meter.create_histogram(
    name="livechat.reports.duration",
    description="Time to run a conversation report aggregation",
    unit="ms",
)
