"""Application settings configuration for Livechat Room Queries."""

from neuroglia.hosting.abstractions import ApplicationSettings

from domain.enums import DEFAULT_ESTIMATED_WAITING_TIME_QUEUE, LivechatPriorityWeight
from domain.models import RoomDefaults


class Settings(ApplicationSettings):
    """Application settings for the livechat room queries and reports."""

    # Debugging Configuration
    debug: bool = False
    environment: str = "development"  # development, production
    log_level: str = "INFO"

    # Application Configuration
    app_name: str = "Livechat Room Queries"
    app_version: str = "1.0.0"

    # Observability Configuration
    service_name: str = "livechat-room-queries"
    service_version: str = app_version

    # Database Configuration
    database_name: str = "rocketchat"

    # Connection Strings - override from ApplicationSettings base class
    # Set via CONNECTION_STRINGS env var as JSON (no prefix):
    # {"mongo": "mongodb://..."}
    connection_strings: dict[str, str] = {"mongo": "mongodb://localhost:27017/?directConnection=true"}

    # Collections
    rooms_collection_name: str = "rocketchat_room"
    departments_collection_name: str = "rocketchat_livechat_department"
    users_collection_name: str = "users"

    # Room defaults restored when an SLA or priority is removed
    default_sla_estimated_waiting_time_queue: int = DEFAULT_ESTIMATED_WAITING_TIME_QUEUE
    default_priority_weight: int = LivechatPriorityWeight.NOT_SPECIFIED.value

    # Reporting
    reporting_read_secondary_preferred: bool = True

    def get_mongo_connection_string(self) -> str:
        """Get the MongoDB connection string.

        Accepts both the 'mongo' and legacy 'mongodb' keys.
        """
        return self.connection_strings.get("mongo") or self.connection_strings["mongodb"]

    def room_defaults(self) -> RoomDefaults:
        """Build the room defaults from configuration."""
        return RoomDefaults(
            estimated_waiting_time_queue=self.default_sla_estimated_waiting_time_queue,
            priority_weight=self.default_priority_weight,
        )


# Create singleton instance
app_settings = Settings()
