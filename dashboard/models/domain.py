"""Domain models - the entities held by the in-memory domain store."""
from datetime import datetime, timezone
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

from dashboard.models.enums import (
    NotificationType,
    Role,
    TaskPriority,
    TaskStatus,
    Theme,
)


def _as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC so every timestamp compares cleanly."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class Session(BaseModel):
    """
    The currently authenticated actor.

    Serialized to durable storage as ``{id, email, name, role}``; the role is
    fixed for the lifetime of the session.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    user_id: str = Field(alias="id")
    email: str
    name: str
    role: Role


class UserSettings(BaseModel):
    notifications: bool = True
    theme: Theme = Theme.LIGHT
    language: str = "en"


class User(BaseModel):
    """
    A user record managed by admins and edited through profile/settings.

    Deleting a user does not cascade: tasks, events and documents keep
    whatever ids they reference.
    """
    model_config = ConfigDict(validate_assignment=True)

    id: str
    email: str
    name: str
    role: Role = Role.USER
    is_active: bool = True
    last_login: Optional[UtcDatetime] = None
    avatar: Optional[str] = None
    settings: UserSettings = Field(default_factory=UserSettings)


class Task(BaseModel):
    """
    A unit of work assigned to a single user.

    Invariants:
    - completed_at is only stamped on a transition to completed
    - assigned_to and created_by are soft references and may dangle
    - due_date is not checked against created_at
    """
    model_config = ConfigDict(validate_assignment=True)

    id: str
    title: str
    description: str = ""
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    assigned_to: str = ""
    created_by: str = ""
    created_at: UtcDatetime
    due_date: UtcDatetime
    completed_at: Optional[UtcDatetime] = None


class Notification(BaseModel):
    """Scoped to one recipient. ``read`` only ever moves from False to True."""
    model_config = ConfigDict(validate_assignment=True)

    id: str
    title: str
    message: str
    type: NotificationType = NotificationType.INFO
    read: bool = False
    created_at: UtcDatetime
    user_id: str


class Event(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    id: str
    title: str
    description: str = ""
    date: UtcDatetime
    duration_minutes: int = 60
    attendees: List[str] = Field(default_factory=list)
    created_by: str = ""

    @field_validator("attendees")
    @classmethod
    def _unique_attendees(cls, value: List[str]) -> List[str]:
        # Attendees behave as a set; keep first-seen order for display
        return list(dict.fromkeys(value))


class Document(BaseModel):
    """
    An uploaded document record.

    The size is not checked against the MIME type, and demo uploads get a
    random size rather than one measured from content.
    """
    id: str
    name: str
    type: str
    size_bytes: int
    uploaded_by: str
    uploaded_at: UtcDatetime
    content: Optional[str] = None


class DashboardStats(BaseModel):
    """Counts recomputed from the current collections on every call."""
    model_config = ConfigDict(frozen=True)

    total_tasks: int
    completed_tasks: int
    pending_tasks: int
    total_users: int
    active_users: int
    total_notifications: int
    unread_notifications: int
    upcoming_events: int
