"""Pydantic schemas for request/response validation."""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from dashboard.models.domain import Session, UserSettings, UtcDatetime
from dashboard.models.enums import NotificationType, Role, TaskPriority, TaskStatus


# Auth schemas
class LoginRequest(BaseModel):
    email: str
    password: str


class SessionResponse(BaseModel):
    authenticated: bool
    is_loading: bool = False
    user: Optional[Session] = None


# Task schemas
class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    assigned_to: Optional[str] = None  # Defaults to the current user
    due_date: Optional[UtcDatetime] = None


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    assigned_to: Optional[str] = None
    due_date: Optional[UtcDatetime] = None
    completed_at: Optional[UtcDatetime] = None


class TaskStatusChange(BaseModel):
    status: TaskStatus


# Notification schemas
class NotificationCreate(BaseModel):
    title: str = Field(..., min_length=1)
    message: str
    type: NotificationType = NotificationType.INFO
    user_id: str


class NotificationsCleared(BaseModel):
    user_id: str
    cleared: int


# Event schemas
class EventCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    date: UtcDatetime
    duration_minutes: int = Field(60, gt=0)
    attendees: Optional[List[str]] = None  # Defaults to the current user


class EventUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    date: Optional[UtcDatetime] = None
    duration_minutes: Optional[int] = Field(None, gt=0)
    attendees: Optional[List[str]] = None


# Document schemas
class DocumentUpload(BaseModel):
    name: str = Field(..., min_length=1)
    type: str = "application/pdf"
    size_bytes: Optional[int] = Field(None, ge=0)  # Random demo size when omitted
    content: Optional[str] = None


# User schemas
class UserCreate(BaseModel):
    email: str = Field(..., min_length=3)
    name: str = Field(..., min_length=1)
    role: Role = Role.USER
    is_active: bool = True
    settings: Optional[UserSettings] = None


class UserUpdate(BaseModel):
    email: Optional[str] = Field(None, min_length=3)
    name: Optional[str] = Field(None, min_length=1)
    role: Optional[Role] = None
    is_active: Optional[bool] = None
    avatar: Optional[str] = None
    settings: Optional[UserSettings] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, min_length=3)


# Page schemas
class NavLinkResponse(BaseModel):
    to: str
    label: str


class PageResponse(BaseModel):
    """A rendered page: who is looking, where they can go, and what they see."""
    page: str
    title: str
    user: Session
    nav: List[NavLinkResponse]
    data: Dict[str, Any]


# Error response
class AccessDeniedResponse(BaseModel):
    """Response when the access guard refuses an API call."""
    message: str
    redirect_to: Optional[str] = None
