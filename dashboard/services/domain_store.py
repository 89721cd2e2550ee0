"""
Domain store - the single in-memory container of business entities.

All creations, updates and deletions go through here. Mutators never fail:
unknown ids are silent no-ops (deletes still write their log entry), and
nothing cascades across the soft references between entities.
"""
import random
from collections import deque
from datetime import datetime, timezone
from typing import Any, Callable, Deque, Iterable, List, Mapping, Optional, Sequence, TypeVar

from pydantic import BaseModel

from dashboard.models.audit import SystemLogAction, SystemLogEntry
from dashboard.models.domain import (
    DashboardStats,
    Document,
    Event,
    Notification,
    Session,
    Task,
    User,
    UserSettings,
)
from dashboard.models.enums import NotificationType, Role, TaskPriority, TaskStatus
from dashboard.observability.logging import get_logger
from dashboard.seed import MockData

logger = get_logger(__name__)

DEFAULT_LOG_CAPACITY = 100

# Demo uploads get a random size in this range (bytes)
DEMO_SIZE_RANGE = (100_000, 5_100_000)

Entity = TypeVar("Entity", bound=BaseModel)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IdGenerator:
    """
    Millisecond-timestamp ids.

    Two creations inside the same millisecond would collide on the raw
    timestamp, so each id is bumped to stay strictly above the previous one.
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self.clock = clock
        self._last = 0

    def __call__(self) -> str:
        candidate = int(self.clock().timestamp() * 1000)
        self._last = max(candidate, self._last + 1)
        return str(self._last)


def _find(items: Iterable[Entity], entity_id: str) -> Optional[Entity]:
    return next((item for item in items if item.id == entity_id), None)


def _merge(entity: BaseModel, updates: Mapping[str, Any]) -> None:
    """Shallow-merge known fields into an entity. The id is never rewritten."""
    fields = type(entity).model_fields
    for name, value in updates.items():
        if name in fields and name != "id":
            setattr(entity, name, value)


class DomainStore:
    """Owns every collection and exposes the mutators and derived stats."""

    def __init__(
        self,
        log_capacity: int = DEFAULT_LOG_CAPACITY,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.clock = clock
        self.log_capacity = log_capacity
        self._next_id = IdGenerator(clock)

        self._users: List[User] = []
        self._tasks: List[Task] = []
        self._notifications: List[Notification] = []
        self._events: List[Event] = []
        self._documents: List[Document] = []
        # Newest first; appendleft evicts the oldest once full
        self._system_logs: Deque[SystemLogEntry] = deque(maxlen=log_capacity)

    def seed(self, data: MockData) -> None:
        """Replace every collection with the given dataset."""
        self._users = list(data.users)
        self._tasks = list(data.tasks)
        self._notifications = list(data.notifications)
        self._events = list(data.events)
        self._documents = list(data.documents)
        # Seed entries are newest first; keep the head, not the tail
        self._system_logs = deque(data.system_logs[: self.log_capacity], maxlen=self.log_capacity)
        logger.info(
            "Domain store seeded",
            users=len(self._users),
            tasks=len(self._tasks),
            notifications=len(self._notifications),
            events=len(self._events),
            documents=len(self._documents),
            system_logs=len(self._system_logs),
        )

    # Read access. Callers get snapshots of the collections, never the lists themselves.

    @property
    def users(self) -> Sequence[User]:
        return tuple(self._users)

    @property
    def tasks(self) -> Sequence[Task]:
        return tuple(self._tasks)

    @property
    def notifications(self) -> Sequence[Notification]:
        return tuple(self._notifications)

    @property
    def events(self) -> Sequence[Event]:
        return tuple(self._events)

    @property
    def documents(self) -> Sequence[Document]:
        return tuple(self._documents)

    @property
    def system_logs(self) -> Sequence[SystemLogEntry]:
        return tuple(self._system_logs)

    def get_user(self, user_id: str) -> Optional[User]:
        return _find(self._users, user_id)

    def get_task(self, task_id: str) -> Optional[Task]:
        return _find(self._tasks, task_id)

    def get_notification(self, notification_id: str) -> Optional[Notification]:
        return _find(self._notifications, notification_id)

    def get_event(self, event_id: str) -> Optional[Event]:
        return _find(self._events, event_id)

    def get_document(self, document_id: str) -> Optional[Document]:
        return _find(self._documents, document_id)

    def _actor_name(self, user_id: str, fallback: str) -> str:
        user = self.get_user(user_id) if user_id else None
        return user.name if user is not None else fallback

    # Tasks

    def create_task(
        self,
        title: str,
        description: str = "",
        priority: TaskPriority = TaskPriority.MEDIUM,
        status: TaskStatus = TaskStatus.PENDING,
        assigned_to: str = "",
        created_by: str = "",
        due_date: Optional[datetime] = None,
        completed_at: Optional[datetime] = None,
    ) -> Task:
        now = self.clock()
        task = Task(
            id=self._next_id(),
            title=title,
            description=description,
            priority=priority,
            status=status,
            assigned_to=assigned_to,
            created_by=created_by,
            created_at=now,
            due_date=due_date or now,
            completed_at=completed_at,
        )
        self._tasks.append(task)
        logger.info("Task created", task_id=task.id, created_by=created_by, assigned_to=assigned_to)

        self.add_system_log(
            SystemLogAction.TASK_CREATED,
            created_by,
            self._actor_name(created_by, "User"),
            f"Created task: {title}",
        )
        return task

    def update_task(self, task_id: str, updates: Mapping[str, Any]) -> Optional[Task]:
        """
        Merge partial fields into a task.

        Side effects when the update sets status to completed:
        - completed_at is stamped with the current time unless supplied
        - a "Task Completed" entry is logged, even for an unknown id
        """
        updates = dict(updates)
        completing = updates.get("status") == TaskStatus.COMPLETED
        if completing and updates.get("completed_at") is None:
            updates["completed_at"] = self.clock()

        task = self.get_task(task_id)
        if task is not None:
            _merge(task, updates)
            logger.debug("Task updated", task_id=task_id, fields=sorted(updates))
        else:
            logger.debug("Task update ignored, no such task", task_id=task_id)

        if completing:
            assignee = updates.get("assigned_to") or (task.assigned_to if task else "")
            self.add_system_log(
                SystemLogAction.TASK_COMPLETED,
                assignee,
                self._actor_name(assignee, "User"),
                f"Completed task: {task_id}",
            )
        return task

    def delete_task(self, task_id: str) -> None:
        """Remove a task. Logs the deletion whether or not the id existed."""
        self._tasks = [t for t in self._tasks if t.id != task_id]
        logger.info("Task deleted", task_id=task_id)
        self.add_system_log(SystemLogAction.TASK_DELETED, "", "User", f"Deleted task: {task_id}")

    # Notifications

    def create_notification(
        self,
        title: str,
        message: str,
        user_id: str,
        type: NotificationType = NotificationType.INFO,
        read: bool = False,
    ) -> Notification:
        notification = Notification(
            id=self._next_id(),
            title=title,
            message=message,
            type=type,
            read=read,
            created_at=self.clock(),
            user_id=user_id,
        )
        self._notifications.append(notification)
        logger.debug("Notification created", notification_id=notification.id, user_id=user_id)
        return notification

    def mark_notification_read(self, notification_id: str) -> Optional[Notification]:
        notification = self.get_notification(notification_id)
        if notification is not None:
            notification.read = True
        return notification

    def clear_all_notifications(self, user_id: str) -> int:
        """Mark every notification of one recipient as read. Returns how many changed."""
        changed = 0
        for notification in self._notifications:
            if notification.user_id == user_id and not notification.read:
                notification.read = True
                changed += 1
        logger.debug("Notifications cleared", user_id=user_id, changed=changed)
        return changed

    # Events

    def create_event(
        self,
        title: str,
        date: datetime,
        description: str = "",
        duration_minutes: int = 60,
        attendees: Iterable[str] = (),
        created_by: str = "",
    ) -> Event:
        event = Event(
            id=self._next_id(),
            title=title,
            description=description,
            date=date,
            duration_minutes=duration_minutes,
            attendees=list(attendees),
            created_by=created_by,
        )
        self._events.append(event)
        logger.info("Event created", event_id=event.id, created_by=created_by)

        self.add_system_log(
            SystemLogAction.EVENT_CREATED,
            created_by,
            self._actor_name(created_by, "User"),
            f"Created event: {title}",
        )
        return event

    def update_event(self, event_id: str, updates: Mapping[str, Any]) -> Optional[Event]:
        event = self.get_event(event_id)
        if event is not None:
            _merge(event, updates)
        return event

    def delete_event(self, event_id: str) -> None:
        self._events = [e for e in self._events if e.id != event_id]
        logger.info("Event deleted", event_id=event_id)
        self.add_system_log(SystemLogAction.EVENT_DELETED, "", "User", f"Deleted event: {event_id}")

    # Documents

    def upload_document(
        self,
        name: str,
        type: str,
        uploaded_by: str,
        size_bytes: Optional[int] = None,
        content: Optional[str] = None,
    ) -> Document:
        if size_bytes is None:
            size_bytes = random.randrange(*DEMO_SIZE_RANGE)

        document = Document(
            id=self._next_id(),
            name=name,
            type=type,
            size_bytes=size_bytes,
            uploaded_by=uploaded_by,
            uploaded_at=self.clock(),
            content=content,
        )
        self._documents.append(document)
        logger.info("Document uploaded", document_id=document.id, uploaded_by=uploaded_by, size_bytes=size_bytes)

        self.add_system_log(
            SystemLogAction.DOCUMENT_UPLOADED,
            uploaded_by,
            self._actor_name(uploaded_by, "User"),
            f"Uploaded: {name}",
        )
        return document

    def delete_document(self, document_id: str) -> None:
        self._documents = [d for d in self._documents if d.id != document_id]
        logger.info("Document deleted", document_id=document_id)
        self.add_system_log(SystemLogAction.DOCUMENT_DELETED, "", "User", f"Deleted document: {document_id}")

    # Users

    def create_user(
        self,
        email: str,
        name: str,
        role: Role = Role.USER,
        is_active: bool = True,
        settings: Optional[UserSettings] = None,
        avatar: Optional[str] = None,
    ) -> User:
        user = User(
            id=self._next_id(),
            email=email,
            name=name,
            role=role,
            is_active=is_active,
            avatar=avatar,
            settings=settings or UserSettings(),
        )
        self._users.append(user)
        logger.info("User created", user_id=user.id, role=role.value)
        self.add_system_log(SystemLogAction.USER_CREATED, "", "Admin", f"Created user: {email}")
        return user

    def update_user(self, user_id: str, updates: Mapping[str, Any]) -> Optional[User]:
        user = self.get_user(user_id)
        if user is not None:
            _merge(user, updates)
        logger.info("User updated", user_id=user_id, found=user is not None)
        self.add_system_log(SystemLogAction.USER_UPDATED, user_id, "Admin", f"Updated user: {user_id}")
        return user

    def delete_user(self, user_id: str) -> None:
        """Remove a user record. References held by other entities are left dangling."""
        self._users = [u for u in self._users if u.id != user_id]
        logger.info("User deleted", user_id=user_id)
        self.add_system_log(SystemLogAction.USER_DELETED, "", "Admin", f"Deleted user: {user_id}")

    # Session bookkeeping

    def record_login(self, session: Session) -> None:
        """Stamp last_login on the session's user record and log the login."""
        user = self.get_user(session.user_id)
        if user is not None:
            user.last_login = self.clock()
        self.add_system_log(SystemLogAction.USER_LOGIN, session.user_id, session.name, f"Login as {session.role.value}")

    def record_logout(self, session: Session) -> None:
        self.add_system_log(SystemLogAction.USER_LOGOUT, session.user_id, session.name, "Logged out")

    # System log

    def add_system_log(self, action: str, user_id: str, user_name: str, details: str) -> SystemLogEntry:
        """Prepend an entry; the ring keeps only the most recent ``log_capacity``."""
        entry = SystemLogEntry(
            id=self._next_id(),
            action=action,
            user_id=user_id,
            user_name=user_name,
            timestamp=self.clock(),
            details=details,
        )
        self._system_logs.appendleft(entry)
        logger.debug("System log appended", action=action, user_id=user_id)
        return entry

    # Stats

    def get_stats(self) -> DashboardStats:
        """Recompute counts from the current collections."""
        now = self.clock()
        return DashboardStats(
            total_tasks=len(self._tasks),
            completed_tasks=sum(1 for t in self._tasks if t.status == TaskStatus.COMPLETED),
            pending_tasks=sum(1 for t in self._tasks if t.status == TaskStatus.PENDING),
            total_users=len(self._users),
            active_users=sum(1 for u in self._users if u.is_active),
            total_notifications=len(self._notifications),
            unread_notifications=sum(1 for n in self._notifications if not n.read),
            upcoming_events=sum(1 for e in self._events if e.date > now),
        )
