"""
Read-side projections used by the pages and the API.

Everything here is a pure function over collections handed in by the caller;
nothing mutates the domain store.
"""
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from dashboard.models.audit import SystemLogEntry
from dashboard.models.domain import DashboardStats, Document, Event, Notification, Task
from dashboard.models.enums import (
    DocumentKind,
    LogDateRange,
    NotificationType,
    TaskPriority,
    TaskStatus,
)

WEEK = timedelta(days=7)
MONTH = timedelta(days=30)

_STATUS_CYCLE = {
    TaskStatus.PENDING: TaskStatus.IN_PROGRESS,
    TaskStatus.IN_PROGRESS: TaskStatus.COMPLETED,
    TaskStatus.COMPLETED: TaskStatus.PENDING,
}


def _contains(haystack: str, needle: str) -> bool:
    return needle.lower() in haystack.lower()


# Tasks

def is_user_task(task: Task, user_id: str) -> bool:
    """A user's tasks are the ones assigned to or created by them."""
    return task.assigned_to == user_id or task.created_by == user_id


def filter_tasks(
    tasks: Iterable[Task],
    user_id: Optional[str] = None,
    status: Optional[TaskStatus] = None,
    search: str = "",
) -> List[Task]:
    return [
        task for task in tasks
        if (status is None or task.status == status)
        and (_contains(task.title, search) or _contains(task.description, search))
        and (user_id is None or is_user_task(task, user_id))
    ]


def task_status_counts(tasks: Sequence[Task]) -> Dict[str, int]:
    return {
        "total": len(tasks),
        "pending": sum(1 for t in tasks if t.status == TaskStatus.PENDING),
        "in_progress": sum(1 for t in tasks if t.status == TaskStatus.IN_PROGRESS),
        "completed": sum(1 for t in tasks if t.status == TaskStatus.COMPLETED),
    }


def is_overdue(task: Task, now: datetime) -> bool:
    return task.due_date < now and task.status != TaskStatus.COMPLETED


def next_status(status: TaskStatus) -> TaskStatus:
    """The status a task moves to when its status toggle is clicked."""
    return _STATUS_CYCLE[status]


# Documents

def classify_document(mime_type: str) -> DocumentKind:
    if "pdf" in mime_type:
        return DocumentKind.PDF
    if "word" in mime_type or "document" in mime_type:
        return DocumentKind.DOC
    if "image" in mime_type:
        return DocumentKind.IMAGE
    return DocumentKind.OTHER


def filter_documents(
    documents: Iterable[Document],
    search: str = "",
    kind: DocumentKind = DocumentKind.ALL,
) -> List[Document]:
    return [
        doc for doc in documents
        if _contains(doc.name, search)
        and (kind == DocumentKind.ALL or classify_document(doc.type) == kind)
    ]


def document_stats(documents: Sequence[Document], user_id: str, now: datetime) -> Dict[str, int]:
    return {
        "total": len(documents),
        "mine": sum(1 for d in documents if d.uploaded_by == user_id),
        "total_size": sum(d.size_bytes for d in documents),
        "recent_uploads": sum(1 for d in documents if d.uploaded_at >= now - WEEK),
    }


def format_file_size(size_bytes: int) -> str:
    """Human-readable size, base 1024, at most two decimals."""
    if size_bytes <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(size_bytes)
    exponent = 0
    while value >= 1024 and exponent < len(units) - 1:
        value /= 1024
        exponent += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {units[exponent]}"


# Calendar

def events_on(events: Iterable[Event], day: date) -> List[Event]:
    return [e for e in events if e.date.date() == day]


def upcoming_events(events: Iterable[Event], now: datetime, limit: int = 5) -> List[Event]:
    """Events from now on, soonest first."""
    return sorted((e for e in events if e.date >= now), key=lambda e: e.date)[:limit]


def user_events(events: Iterable[Event], user_id: str) -> List[Event]:
    return [e for e in events if user_id in e.attendees or e.created_by == user_id]


# Notifications

def notifications_for(notifications: Iterable[Notification], user_id: str) -> List[Notification]:
    return [n for n in notifications if n.user_id == user_id]


def notification_type_counts(notifications: Sequence[Notification]) -> Dict[str, int]:
    counts = {t.value: 0 for t in NotificationType}
    for notification in notifications:
        counts[notification.type.value] += 1
    return counts


# Analytics

def analytics(
    stats: DashboardStats,
    tasks: Sequence[Task],
    events: Sequence[Event],
    documents: Sequence[Document],
    user_id: str,
) -> Dict[str, object]:
    my_tasks = filter_tasks(tasks, user_id=user_id)
    my_completed = sum(1 for t in my_tasks if t.status == TaskStatus.COMPLETED)

    return {
        "task_status": {
            "pending": stats.pending_tasks,
            "in_progress": stats.total_tasks - stats.pending_tasks - stats.completed_tasks,
            "completed": stats.completed_tasks,
        },
        "priority": {p.value: sum(1 for t in tasks if t.priority == p) for p in TaskPriority},
        "my_tasks": len(my_tasks),
        "my_completed_tasks": my_completed,
        "my_events": len(user_events(events, user_id)),
        "my_documents": sum(1 for d in documents if d.uploaded_by == user_id),
        "completion_rate": round(my_completed / len(my_tasks) * 100) if my_tasks else 0,
    }


# System log

def _in_range(timestamp: datetime, date_range: LogDateRange, now: datetime) -> bool:
    if date_range == LogDateRange.TODAY:
        return timestamp.date() == now.date()
    if date_range == LogDateRange.WEEK:
        return timestamp >= now - WEEK
    if date_range == LogDateRange.MONTH:
        return timestamp >= now - MONTH
    return True


def filter_logs(
    logs: Iterable[SystemLogEntry],
    now: datetime,
    search: str = "",
    action: Optional[str] = None,
    date_range: LogDateRange = LogDateRange.ALL,
) -> List[SystemLogEntry]:
    return [
        log for log in logs
        if (_contains(log.action, search) or _contains(log.details, search) or _contains(log.user_name, search))
        and (action is None or log.action == action)
        and _in_range(log.timestamp, date_range, now)
    ]


def unique_actions(logs: Iterable[SystemLogEntry]) -> List[str]:
    return list(dict.fromkeys(log.action for log in logs))


def log_stats(logs: Sequence[SystemLogEntry], now: datetime) -> Dict[str, int]:
    return {
        "total": len(logs),
        "today": sum(1 for log in logs if _in_range(log.timestamp, LogDateRange.TODAY, now)),
        "this_week": sum(1 for log in logs if _in_range(log.timestamp, LogDateRange.WEEK, now)),
        "unique_users": len({log.user_id for log in logs}),
    }
