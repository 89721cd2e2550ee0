"""Enums for the dashboard - these define the valid values for roles and states."""
from enum import Enum


class Role(str, Enum):
    """The three roles a session can carry. No other roles are allowed."""
    ADMIN = "admin"
    WORKER = "worker"
    USER = "user"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(str, Enum):
    """Task workflow states, cycled pending -> in-progress -> completed."""
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class NotificationType(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class DocumentKind(str, Enum):
    """Coarse document filter buckets, derived from the MIME type."""
    ALL = "all"
    PDF = "pdf"
    DOC = "doc"
    IMAGE = "image"
    OTHER = "other"


class LogDateRange(str, Enum):
    """Time windows offered by the system log view."""
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"
