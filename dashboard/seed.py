"""Mock dataset the domain store is seeded from on startup."""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List

from dashboard.models.audit import SystemLogAction, SystemLogEntry
from dashboard.models.domain import Document, Event, Notification, Task, User, UserSettings
from dashboard.models.enums import NotificationType, Role, TaskPriority, TaskStatus, Theme

HOUR = timedelta(hours=1)
DAY = timedelta(days=1)


@dataclass
class MockData:
    users: List[User] = field(default_factory=list)
    tasks: List[Task] = field(default_factory=list)
    notifications: List[Notification] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)
    documents: List[Document] = field(default_factory=list)
    # Newest first
    system_logs: List[SystemLogEntry] = field(default_factory=list)


def generate_mock_data(now: datetime) -> MockData:
    """Build the demo dataset with timestamps relative to ``now``."""

    users = [
        User(id="1", email="admin@example.com", name="Admin User", role=Role.ADMIN,
             is_active=True, last_login=now),
        User(id="2", email="worker@example.com", name="Worker User", role=Role.WORKER,
             is_active=True, last_login=now - 2 * HOUR),
        User(id="3", email="user@example.com", name="Regular User", role=Role.USER,
             is_active=True, last_login=now - 1 * HOUR),
        User(id="4", email="john.doe@example.com", name="John Doe", role=Role.USER,
             is_active=False, last_login=now - 24 * HOUR,
             settings=UserSettings(notifications=False, theme=Theme.DARK, language="en")),
    ]

    tasks = [
        Task(
            id="1",
            title="Complete project documentation",
            description="Write comprehensive documentation for the new authentication system",
            priority=TaskPriority.HIGH,
            status=TaskStatus.IN_PROGRESS,
            assigned_to="2",
            created_by="1",
            created_at=now - 2 * DAY,
            due_date=now + 2 * DAY,
        ),
        Task(
            id="2",
            title="Review code changes",
            description="Review the latest pull request for security improvements",
            priority=TaskPriority.MEDIUM,
            status=TaskStatus.PENDING,
            assigned_to="1",
            created_by="2",
            created_at=now - 1 * DAY,
            due_date=now + 1 * DAY,
        ),
        Task(
            id="3",
            title="Update client presentation",
            description="Prepare slides for the quarterly business review",
            priority=TaskPriority.HIGH,
            status=TaskStatus.COMPLETED,
            assigned_to="3",
            created_by="1",
            created_at=now - 3 * DAY,
            due_date=now - 1 * DAY,
            completed_at=now - 1 * DAY,
        ),
    ]

    notifications = [
        Notification(id="1", title="New Task Assigned",
                     message="You have been assigned a new high-priority task",
                     type=NotificationType.INFO, read=False,
                     created_at=now - 2 * HOUR, user_id="2"),
        Notification(id="2", title="System Maintenance",
                     message="Scheduled maintenance will occur tonight at 2 AM",
                     type=NotificationType.WARNING, read=False,
                     created_at=now - 4 * HOUR, user_id="1"),
        Notification(id="3", title="Task Completed",
                     message='Your task "Update client presentation" has been completed',
                     type=NotificationType.SUCCESS, read=True,
                     created_at=now - 6 * HOUR, user_id="3"),
    ]

    events = [
        Event(id="1", title="Team Meeting", description="Weekly team sync and project updates",
              date=now + 2 * DAY, duration_minutes=60, attendees=["1", "2", "3"], created_by="1"),
        Event(id="2", title="Client Presentation",
              description="Quarterly business review with key stakeholders",
              date=now + 5 * DAY, duration_minutes=120, attendees=["1", "3"], created_by="1"),
    ]

    documents = [
        Document(id="1", name="Project Requirements.pdf", type="application/pdf",
                 size_bytes=2048576, uploaded_by="1", uploaded_at=now - 7 * DAY),
        Document(id="2", name="System Architecture.docx",
                 type="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
                 size_bytes=1024768, uploaded_by="2", uploaded_at=now - 3 * DAY),
    ]

    system_logs = [
        SystemLogEntry(id="1", action=SystemLogAction.USER_LOGIN, user_id="1", user_name="Admin User",
                       timestamp=now, details="Successful login from IP 192.168.1.100"),
        SystemLogEntry(id="2", action=SystemLogAction.TASK_CREATED, user_id="1", user_name="Admin User",
                       timestamp=now - 1 * HOUR, details="Created task: Complete project documentation"),
        SystemLogEntry(id="3", action=SystemLogAction.USER_UPDATED, user_id="1", user_name="Admin User",
                       timestamp=now - 2 * HOUR, details="Updated user profile for john.doe@example.com"),
    ]

    return MockData(
        users=users,
        tasks=tasks,
        notifications=notifications,
        events=events,
        documents=documents,
        system_logs=system_logs,
    )
