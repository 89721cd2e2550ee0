"""FastAPI dependencies: the per-process stores and the session guard."""
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Depends, HTTPException, Query, Request, status

from dashboard.models.domain import Session
from dashboard.models.enums import LogDateRange, Role
from dashboard.services.access_guard import AccessState, evaluate_access
from dashboard.services.domain_store import DomainStore
from dashboard.services.identity import IdentityStore


def get_store(request: Request) -> DomainStore:
    """Dependency for endpoints to get the process-wide domain store."""
    return request.app.state.store


def get_identity(request: Request) -> IdentityStore:
    return request.app.state.identity


def _enforce(identity: IdentityStore, required_role: Optional[Role]) -> Session:
    """Translate a guard decision into an HTTP error for API callers."""
    session = identity.current_session()
    decision = evaluate_access(session, required_role, identity.is_loading)

    if decision.state == AccessState.LOADING:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"message": "Session restore in progress"},
        )
    if decision.state == AccessState.REDIRECT:
        if session is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail={"message": "Not signed in", "redirect_to": decision.redirect_to},
            )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"message": f"Requires role {required_role.value}", "redirect_to": decision.redirect_to},
        )
    return session


def require_session(identity: IdentityStore = Depends(get_identity)) -> Session:
    return _enforce(identity, None)


def require_role(role: Role) -> Callable[..., Session]:
    """Build a dependency that only lets sessions with ``role`` through."""

    def dependency(identity: IdentityStore = Depends(get_identity)) -> Session:
        return _enforce(identity, role)

    return dependency


require_admin = require_role(Role.ADMIN)


@dataclass
class LogFilters:
    search: str
    action: Optional[str]
    date_range: LogDateRange


def log_filters(
    search: str = "",
    action: Optional[str] = Query(None, description="Exact action, or 'all'"),
    date_range: LogDateRange = LogDateRange.ALL,
) -> LogFilters:
    return LogFilters(
        search=search,
        action=None if action in (None, "all") else action,
        date_range=date_range,
    )
