"""
Role-gated page routes.

Each page runs the access guard first: Loading renders a 503 placeholder,
Redirect becomes a 307 to the login page or the session's home, and
Authorized renders the page payload. Unknown paths fall back to /user.
"""
from datetime import date
from typing import Any, Dict, Optional, Tuple, Union

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse, RedirectResponse, Response

from dashboard.api.dependencies import LogFilters, get_identity, get_store, log_filters
from dashboard.api.routes import csv_download
from dashboard.api.schemas import NavLinkResponse, PageResponse
from dashboard.models.domain import Session
from dashboard.models.enums import DocumentKind, Role, TaskStatus
from dashboard.services import queries
from dashboard.services.access_guard import (
    DEFAULT_HOME,
    LOGIN_PATH,
    AccessState,
    evaluate_access,
    nav_links,
)
from dashboard.services.domain_store import DomainStore
from dashboard.services.identity import IdentityStore

router = APIRouter()

RECENT_LOGS = 5


def guard_page(
    identity: IdentityStore,
    required_role: Optional[Role] = None,
) -> Tuple[Optional[Session], Optional[Response]]:
    """Return the session to render for, or the response that replaces the page."""
    session = identity.current_session()
    decision = evaluate_access(session, required_role, identity.is_loading)

    if decision.state == AccessState.LOADING:
        return None, JSONResponse(
            {"page": "loading", "title": "Loading"},
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    if decision.state == AccessState.REDIRECT:
        return None, RedirectResponse(decision.redirect_to, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
    return session, None


def render(page: str, title: str, session: Session, data: Dict[str, Any]) -> PageResponse:
    return PageResponse(
        page=page,
        title=title,
        user=session,
        nav=[NavLinkResponse(to=link.to, label=link.label) for link in nav_links(session)],
        data=data,
    )


PageResult = Union[PageResponse, Response]


@router.get("/", include_in_schema=False)
def index():
    return RedirectResponse(DEFAULT_HOME, status_code=status.HTTP_307_TEMPORARY_REDIRECT)


@router.get(LOGIN_PATH)
def login_page():
    """The sign-in page is public."""
    return {"page": "login", "title": "Sign In", "action": "/api/auth/login"}


@router.get("/user", response_model=None)
def user_page(
    identity: IdentityStore = Depends(get_identity),
    store: DomainStore = Depends(get_store),
) -> PageResult:
    session, redirect = guard_page(identity)
    if redirect is not None:
        return redirect

    now = store.clock()
    my_tasks = queries.filter_tasks(store.tasks, user_id=session.user_id)
    my_notifications = queries.notifications_for(store.notifications, session.user_id)
    return render("user", "User Dashboard", session, {
        "task_counts": queries.task_status_counts(my_tasks),
        "unread_notifications": sum(1 for n in my_notifications if not n.read),
        "upcoming_events": queries.upcoming_events(queries.user_events(store.events, session.user_id), now),
    })


@router.get("/admin", response_model=None)
def admin_page(
    identity: IdentityStore = Depends(get_identity),
    store: DomainStore = Depends(get_store),
) -> PageResult:
    session, redirect = guard_page(identity, Role.ADMIN)
    if redirect is not None:
        return redirect

    return render("admin", "Admin Dashboard", session, {
        "stats": store.get_stats(),
        "recent_logs": list(store.system_logs[:RECENT_LOGS]),
    })


@router.get("/admin/users", response_model=None)
def admin_users_page(
    identity: IdentityStore = Depends(get_identity),
    store: DomainStore = Depends(get_store),
) -> PageResult:
    session, redirect = guard_page(identity, Role.ADMIN)
    if redirect is not None:
        return redirect

    users = list(store.users)
    return render("admin/users", "User Management", session, {
        "users": users,
        "active": sum(1 for u in users if u.is_active),
    })


@router.get("/admin/logs", response_model=None)
def admin_logs_page(
    filters: LogFilters = Depends(log_filters),
    identity: IdentityStore = Depends(get_identity),
    store: DomainStore = Depends(get_store),
) -> PageResult:
    session, redirect = guard_page(identity, Role.ADMIN)
    if redirect is not None:
        return redirect

    now = store.clock()
    logs = store.system_logs
    filtered = queries.filter_logs(
        logs, now=now, search=filters.search, action=filters.action, date_range=filters.date_range,
    )
    return render("admin/logs", "System Logs", session, {
        "entries": filtered,
        "actions": queries.unique_actions(logs),
        "stats": queries.log_stats(logs, now),
    })


@router.get("/admin/logs/export", response_model=None)
def admin_logs_export(
    filters: LogFilters = Depends(log_filters),
    identity: IdentityStore = Depends(get_identity),
    store: DomainStore = Depends(get_store),
) -> Response:
    session, redirect = guard_page(identity, Role.ADMIN)
    if redirect is not None:
        return redirect

    filtered = queries.filter_logs(
        store.system_logs, now=store.clock(),
        search=filters.search, action=filters.action, date_range=filters.date_range,
    )
    return csv_download(filtered, store)


def _analytics(session: Session, store: DomainStore) -> PageResponse:
    return render("analytics", "Analytics Dashboard", session, queries.analytics(
        store.get_stats(), store.tasks, store.events, store.documents, session.user_id,
    ))


@router.get("/admin/analytics", response_model=None)
def admin_analytics_page(
    identity: IdentityStore = Depends(get_identity),
    store: DomainStore = Depends(get_store),
) -> PageResult:
    session, redirect = guard_page(identity, Role.ADMIN)
    if redirect is not None:
        return redirect
    return _analytics(session, store)


@router.get("/analytics", response_model=None)
def analytics_page(
    identity: IdentityStore = Depends(get_identity),
    store: DomainStore = Depends(get_store),
) -> PageResult:
    session, redirect = guard_page(identity)
    if redirect is not None:
        return redirect
    return _analytics(session, store)


@router.get("/worker", response_model=None)
def worker_page(
    identity: IdentityStore = Depends(get_identity),
    store: DomainStore = Depends(get_store),
) -> PageResult:
    session, redirect = guard_page(identity, Role.WORKER)
    if redirect is not None:
        return redirect

    now = store.clock()
    assigned = [t for t in store.tasks if t.assigned_to == session.user_id]
    return render("worker", "Worker Dashboard", session, {
        "assigned_tasks": assigned,
        "task_counts": queries.task_status_counts(assigned),
        "overdue": [t.id for t in assigned if queries.is_overdue(t, now)],
    })


@router.get("/tasks", response_model=None)
def tasks_page(
    status_filter: Optional[TaskStatus] = Query(None, alias="status"),
    search: str = "",
    identity: IdentityStore = Depends(get_identity),
    store: DomainStore = Depends(get_store),
) -> PageResult:
    session, redirect = guard_page(identity)
    if redirect is not None:
        return redirect

    now = store.clock()
    tasks = queries.filter_tasks(store.tasks, user_id=session.user_id, status=status_filter, search=search)
    users = {u.id: u.name for u in store.users}
    return render("tasks", "Task Management", session, {
        "tasks": [
            {
                "task": task,
                "assignee_name": users.get(task.assigned_to),
                "overdue": queries.is_overdue(task, now),
                "next_status": queries.next_status(task.status),
            }
            for task in tasks
        ],
        "counts": queries.task_status_counts(tasks),
    })


@router.get("/calendar", response_model=None)
def calendar_page(
    day: Optional[date] = None,
    identity: IdentityStore = Depends(get_identity),
    store: DomainStore = Depends(get_store),
) -> PageResult:
    session, redirect = guard_page(identity)
    if redirect is not None:
        return redirect

    now = store.clock()
    selected = day or now.date()
    return render("calendar", "Calendar", session, {
        "selected_day": selected,
        "events": queries.events_on(store.events, selected),
        "upcoming": queries.upcoming_events(store.events, now),
    })


@router.get("/documents", response_model=None)
def documents_page(
    search: str = "",
    kind: DocumentKind = DocumentKind.ALL,
    identity: IdentityStore = Depends(get_identity),
    store: DomainStore = Depends(get_store),
) -> PageResult:
    session, redirect = guard_page(identity)
    if redirect is not None:
        return redirect

    users = {u.id: u.name for u in store.users}
    documents = queries.filter_documents(store.documents, search=search, kind=kind)
    return render("documents", "Document Management", session, {
        "documents": [
            {
                "document": doc,
                "kind": queries.classify_document(doc.type),
                "size": queries.format_file_size(doc.size_bytes),
                "uploader_name": users.get(doc.uploaded_by),
            }
            for doc in documents
        ],
        "stats": queries.document_stats(store.documents, session.user_id, store.clock()),
    })


@router.get("/notifications", response_model=None)
def notifications_page(
    identity: IdentityStore = Depends(get_identity),
    store: DomainStore = Depends(get_store),
) -> PageResult:
    session, redirect = guard_page(identity)
    if redirect is not None:
        return redirect

    mine = queries.notifications_for(store.notifications, session.user_id)
    return render("notifications", "Notifications", session, {
        "notifications": mine,
        "unread": sum(1 for n in mine if not n.read),
        "by_type": queries.notification_type_counts(mine),
    })


@router.get("/profile", response_model=None)
def profile_page(
    identity: IdentityStore = Depends(get_identity),
    store: DomainStore = Depends(get_store),
) -> PageResult:
    session, redirect = guard_page(identity)
    if redirect is not None:
        return redirect
    return render("profile", "Profile Management", session, {"profile": store.get_user(session.user_id)})


@router.get("/settings", response_model=None)
def settings_page(
    identity: IdentityStore = Depends(get_identity),
    store: DomainStore = Depends(get_store),
) -> PageResult:
    session, redirect = guard_page(identity)
    if redirect is not None:
        return redirect

    user = store.get_user(session.user_id)
    return render("settings", "Settings", session, {"settings": user.settings if user else None})


# Catch-all: must stay the last route registered
@router.get("/{path:path}", include_in_schema=False)
def fallback(path: str):
    return RedirectResponse(DEFAULT_HOME, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
