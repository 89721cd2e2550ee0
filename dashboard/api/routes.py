"""JSON API over the identity and domain stores."""
from datetime import date
from typing import List, Optional, Sequence

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from dashboard.api.dependencies import (
    LogFilters,
    get_identity,
    get_store,
    log_filters,
    require_admin,
    require_session,
)
from dashboard.api.schemas import (
    AccessDeniedResponse,
    DocumentUpload,
    EventCreate,
    EventUpdate,
    LoginRequest,
    NotificationCreate,
    NotificationsCleared,
    ProfileUpdate,
    SessionResponse,
    TaskCreate,
    TaskStatusChange,
    TaskUpdate,
    UserCreate,
    UserUpdate,
)
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
from dashboard.models.enums import DocumentKind, TaskStatus
from dashboard.observability.logging import get_logger
from dashboard.services import queries
from dashboard.services.domain_store import DomainStore
from dashboard.services.identity import IdentityStore
from dashboard.services.log_export import export_filename, export_logs_csv

logger = get_logger(__name__)

router = APIRouter()

GUARDED = {
    401: {"model": AccessDeniedResponse, "description": "No session - sign in first"},
    403: {"model": AccessDeniedResponse, "description": "Session role not allowed"},
}


def csv_download(logs: Sequence[SystemLogEntry], store: DomainStore) -> Response:
    """Serve log entries as a CSV attachment."""
    return Response(
        content=export_logs_csv(logs),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(store.clock())}"'},
    )


def _not_found(entity: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"{entity} not found")


# Auth endpoints
@router.post("/auth/login", response_model=SessionResponse, responses={401: {"description": "Invalid credentials"}})
def login(
    credentials: LoginRequest,
    identity: IdentityStore = Depends(get_identity),
    store: DomainStore = Depends(get_store),
):
    """Sign in with one of the demo accounts. Replaces any existing session."""
    if not identity.login(credentials.email, credentials.password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    session = identity.current_session()
    store.record_login(session)
    return SessionResponse(authenticated=True, user=session)


@router.post("/auth/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    identity: IdentityStore = Depends(get_identity),
    store: DomainStore = Depends(get_store),
):
    session = identity.current_session()
    identity.logout()
    if session is not None:
        store.record_logout(session)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/auth/session", response_model=SessionResponse)
def current_session(identity: IdentityStore = Depends(get_identity)):
    session = identity.current_session()
    return SessionResponse(authenticated=session is not None, is_loading=identity.is_loading, user=session)


# Stats
@router.get("/stats", response_model=DashboardStats, responses=GUARDED)
def get_stats(session: Session = Depends(require_session), store: DomainStore = Depends(get_store)):
    return store.get_stats()


# Task endpoints
@router.get("/tasks", response_model=List[Task], responses=GUARDED)
def list_tasks(
    mine: bool = True,
    status_filter: Optional[TaskStatus] = Query(None, alias="status"),
    search: str = "",
    session: Session = Depends(require_session),
    store: DomainStore = Depends(get_store),
):
    """List tasks; by default only the ones assigned to or created by the caller."""
    return queries.filter_tasks(
        store.tasks,
        user_id=session.user_id if mine else None,
        status=status_filter,
        search=search,
    )


@router.post("/tasks", response_model=Task, status_code=status.HTTP_201_CREATED, responses=GUARDED)
def create_task(
    task_data: TaskCreate,
    session: Session = Depends(require_session),
    store: DomainStore = Depends(get_store),
):
    return store.create_task(
        title=task_data.title,
        description=task_data.description,
        priority=task_data.priority,
        status=task_data.status,
        assigned_to=task_data.assigned_to or session.user_id,
        created_by=session.user_id,
        due_date=task_data.due_date,
    )


@router.get("/tasks/{task_id}", response_model=Task, responses=GUARDED)
def get_task(task_id: str, session: Session = Depends(require_session), store: DomainStore = Depends(get_store)):
    task = store.get_task(task_id)
    if task is None:
        raise _not_found("Task")
    return task


@router.patch("/tasks/{task_id}", response_model=Task, responses=GUARDED)
def update_task(
    task_id: str,
    task_data: TaskUpdate,
    session: Session = Depends(require_session),
    store: DomainStore = Depends(get_store),
):
    """
    Merge the supplied fields into a task.
    Setting status to completed stamps completed_at unless one is supplied.
    """
    task = store.update_task(task_id, task_data.model_dump(exclude_unset=True, exclude_none=True))
    if task is None:
        raise _not_found("Task")
    return task


@router.put("/tasks/{task_id}/status", response_model=Task, responses=GUARDED)
def change_task_status(
    task_id: str,
    change: TaskStatusChange,
    session: Session = Depends(require_session),
    store: DomainStore = Depends(get_store),
):
    updates = {"status": change.status}
    if change.status == TaskStatus.COMPLETED:
        updates["completed_at"] = store.clock()

    task = store.update_task(task_id, updates)
    if task is None:
        raise _not_found("Task")
    return task


@router.post("/tasks/{task_id}/advance", response_model=Task, responses=GUARDED)
def advance_task(task_id: str, session: Session = Depends(require_session), store: DomainStore = Depends(get_store)):
    """Move a task one step along pending -> in-progress -> completed -> pending."""
    task = store.get_task(task_id)
    if task is None:
        raise _not_found("Task")
    return change_task_status(task_id, TaskStatusChange(status=queries.next_status(task.status)), session, store)


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT, responses=GUARDED)
def delete_task(task_id: str, session: Session = Depends(require_session), store: DomainStore = Depends(get_store)):
    """Always succeeds, even for an unknown id."""
    store.delete_task(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Notification endpoints
@router.get("/notifications", response_model=List[Notification], responses=GUARDED)
def list_notifications(
    unread_only: bool = False,
    session: Session = Depends(require_session),
    store: DomainStore = Depends(get_store),
):
    """The caller's notifications."""
    notifications = queries.notifications_for(store.notifications, session.user_id)
    if unread_only:
        notifications = [n for n in notifications if not n.read]
    return notifications


@router.post("/notifications", response_model=Notification, status_code=status.HTTP_201_CREATED, responses=GUARDED)
def create_notification(
    notification_data: NotificationCreate,
    session: Session = Depends(require_session),
    store: DomainStore = Depends(get_store),
):
    return store.create_notification(
        title=notification_data.title,
        message=notification_data.message,
        user_id=notification_data.user_id,
        type=notification_data.type,
    )


@router.put("/notifications/clear", response_model=NotificationsCleared, responses=GUARDED)
def clear_notifications(session: Session = Depends(require_session), store: DomainStore = Depends(get_store)):
    """Mark all of the caller's notifications as read."""
    cleared = store.clear_all_notifications(session.user_id)
    return NotificationsCleared(user_id=session.user_id, cleared=cleared)


@router.put("/notifications/{notification_id}/read", response_model=Notification, responses=GUARDED)
def mark_notification_read(
    notification_id: str,
    session: Session = Depends(require_session),
    store: DomainStore = Depends(get_store),
):
    notification = store.mark_notification_read(notification_id)
    if notification is None:
        raise _not_found("Notification")
    return notification


# Event endpoints
@router.get("/events", response_model=List[Event], responses=GUARDED)
def list_events(
    day: Optional[date] = None,
    session: Session = Depends(require_session),
    store: DomainStore = Depends(get_store),
):
    if day is not None:
        return queries.events_on(store.events, day)
    return list(store.events)


@router.post("/events", response_model=Event, status_code=status.HTTP_201_CREATED, responses=GUARDED)
def create_event(
    event_data: EventCreate,
    session: Session = Depends(require_session),
    store: DomainStore = Depends(get_store),
):
    return store.create_event(
        title=event_data.title,
        description=event_data.description,
        date=event_data.date,
        duration_minutes=event_data.duration_minutes,
        attendees=event_data.attendees if event_data.attendees is not None else [session.user_id],
        created_by=session.user_id,
    )


@router.patch("/events/{event_id}", response_model=Event, responses=GUARDED)
def update_event(
    event_id: str,
    event_data: EventUpdate,
    session: Session = Depends(require_session),
    store: DomainStore = Depends(get_store),
):
    event = store.update_event(event_id, event_data.model_dump(exclude_unset=True, exclude_none=True))
    if event is None:
        raise _not_found("Event")
    return event


@router.delete("/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT, responses=GUARDED)
def delete_event(event_id: str, session: Session = Depends(require_session), store: DomainStore = Depends(get_store)):
    store.delete_event(event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Document endpoints
@router.get("/documents", response_model=List[Document], responses=GUARDED)
def list_documents(
    search: str = "",
    kind: DocumentKind = DocumentKind.ALL,
    session: Session = Depends(require_session),
    store: DomainStore = Depends(get_store),
):
    return queries.filter_documents(store.documents, search=search, kind=kind)


@router.post("/documents", response_model=Document, status_code=status.HTTP_201_CREATED, responses=GUARDED)
def upload_document(
    document_data: DocumentUpload,
    session: Session = Depends(require_session),
    store: DomainStore = Depends(get_store),
):
    return store.upload_document(
        name=document_data.name,
        type=document_data.type,
        uploaded_by=session.user_id,
        size_bytes=document_data.size_bytes,
        content=document_data.content,
    )


@router.delete("/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT, responses=GUARDED)
def delete_document(
    document_id: str,
    session: Session = Depends(require_session),
    store: DomainStore = Depends(get_store),
):
    store.delete_document(document_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Profile endpoints
@router.get("/profile", response_model=User, responses=GUARDED)
def get_profile(session: Session = Depends(require_session), store: DomainStore = Depends(get_store)):
    user = store.get_user(session.user_id)
    if user is None:
        raise _not_found("User")
    return user


@router.patch("/profile", response_model=User, responses=GUARDED)
def update_profile(
    profile_data: ProfileUpdate,
    session: Session = Depends(require_session),
    store: DomainStore = Depends(get_store),
):
    """Edit the caller's name and email. The session keeps its original values."""
    user = store.update_user(session.user_id, profile_data.model_dump(exclude_unset=True, exclude_none=True))
    if user is None:
        raise _not_found("User")
    store.add_system_log(SystemLogAction.PROFILE_UPDATED, session.user_id, session.name, "Updated profile information")
    return user


@router.put("/profile/settings", response_model=User, responses=GUARDED)
def update_settings(
    settings_data: UserSettings,
    session: Session = Depends(require_session),
    store: DomainStore = Depends(get_store),
):
    user = store.update_user(session.user_id, {"settings": settings_data})
    if user is None:
        raise _not_found("User")
    store.add_system_log(SystemLogAction.SETTINGS_UPDATED, session.user_id, session.name, "Updated account settings")
    return user


# User management endpoints (admin only)
@router.get("/users", response_model=List[User], responses=GUARDED)
def list_users(session: Session = Depends(require_admin), store: DomainStore = Depends(get_store)):
    return list(store.users)


@router.post("/users", response_model=User, status_code=status.HTTP_201_CREATED, responses=GUARDED)
def create_user(
    user_data: UserCreate,
    session: Session = Depends(require_admin),
    store: DomainStore = Depends(get_store),
):
    return store.create_user(
        email=user_data.email,
        name=user_data.name,
        role=user_data.role,
        is_active=user_data.is_active,
        settings=user_data.settings,
    )


@router.patch("/users/{user_id}", response_model=User, responses=GUARDED)
def update_user(
    user_id: str,
    user_data: UserUpdate,
    session: Session = Depends(require_admin),
    store: DomainStore = Depends(get_store),
):
    user = store.update_user(user_id, user_data.model_dump(exclude_unset=True, exclude_none=True))
    if user is None:
        raise _not_found("User")
    return user


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT, responses=GUARDED)
def delete_user(user_id: str, session: Session = Depends(require_admin), store: DomainStore = Depends(get_store)):
    """Removes the record only; tasks and documents keep referencing the id."""
    store.delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# System log endpoints (admin only)
@router.get("/logs", response_model=List[SystemLogEntry], responses=GUARDED)
def list_logs(
    filters: LogFilters = Depends(log_filters),
    session: Session = Depends(require_admin),
    store: DomainStore = Depends(get_store),
):
    """Newest first."""
    return queries.filter_logs(
        store.system_logs,
        now=store.clock(),
        search=filters.search,
        action=filters.action,
        date_range=filters.date_range,
    )


@router.get("/logs/export", responses=GUARDED)
def export_logs(
    filters: LogFilters = Depends(log_filters),
    session: Session = Depends(require_admin),
    store: DomainStore = Depends(get_store),
):
    logs = list_logs(filters, session, store)
    logger.info("System log exported", entries=len(logs), session=session)
    return csv_download(logs, store)


# Unknown API paths must not fall through to the page catch-all
@router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
def unknown_endpoint(path: str):
    raise _not_found("Endpoint")
