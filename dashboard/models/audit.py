"""
System log model - the activity trail shown to admins.

Entries are append-only and kept in a fixed-capacity ring: once the ring is
full the oldest entry is dropped silently. Iteration is newest-first.
"""
from pydantic import BaseModel, ConfigDict

from dashboard.models.domain import UtcDatetime


class SystemLogEntry(BaseModel):
    """
    Immutable activity entry.

    Invariants:
    - Once written, never edited
    - Only ever evicted by the ring bound, oldest first
    """
    model_config = ConfigDict(frozen=True)

    id: str
    action: str
    user_id: str
    user_name: str
    timestamp: UtcDatetime
    details: str


# Action labels for consistency
class SystemLogAction:
    """Enumeration of system log actions written by the stores and API."""
    # Session lifecycle
    USER_LOGIN = "User Login"
    USER_LOGOUT = "User Logout"

    # Task lifecycle
    TASK_CREATED = "Task Created"
    TASK_COMPLETED = "Task Completed"
    TASK_DELETED = "Task Deleted"

    # Calendar
    EVENT_CREATED = "Event Created"
    EVENT_DELETED = "Event Deleted"

    # Documents
    DOCUMENT_UPLOADED = "Document Uploaded"
    DOCUMENT_DELETED = "Document Deleted"

    # User management
    USER_CREATED = "User Created"
    USER_UPDATED = "User Updated"
    USER_DELETED = "User Deleted"

    # Self-service
    PROFILE_UPDATED = "Profile Updated"
    SETTINGS_UPDATED = "Settings Updated"
