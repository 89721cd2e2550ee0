"""
Access guard - maps (session, required role) to render or redirect.

The guard holds no state of its own; it reads the session and the loading
flag from the identity store and returns a decision.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from dashboard.models.domain import Session
from dashboard.models.enums import Role

LOGIN_PATH = "/login"
DEFAULT_HOME = "/user"

# Every role must have a home
ROLE_HOME: Dict[Role, str] = {
    Role.ADMIN: "/admin",
    Role.WORKER: "/worker",
    Role.USER: DEFAULT_HOME,
}


class AccessState(str, Enum):
    LOADING = "loading"
    AUTHORIZED = "authorized"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class AccessDecision:
    state: AccessState
    redirect_to: Optional[str] = None

    @property
    def authorized(self) -> bool:
        return self.state == AccessState.AUTHORIZED


LOADING = AccessDecision(AccessState.LOADING)
AUTHORIZED = AccessDecision(AccessState.AUTHORIZED)


def home_for(role: Role) -> str:
    """Landing page for a role."""
    return ROLE_HOME.get(role, DEFAULT_HOME)


def evaluate_access(
    session: Optional[Session],
    required_role: Optional[Role] = None,
    is_loading: bool = False,
) -> AccessDecision:
    """
    Decide whether protected content may render.

    - Loading while the identity store is still restoring
    - Redirect to login without a session
    - Redirect to the session's home when the role does not match
    - Authorized otherwise
    """
    if is_loading:
        return LOADING

    if session is None:
        return AccessDecision(AccessState.REDIRECT, LOGIN_PATH)

    if required_role is not None and session.role != required_role:
        return AccessDecision(AccessState.REDIRECT, home_for(session.role))

    return AUTHORIZED


@dataclass(frozen=True)
class NavLink:
    to: str
    label: str


def nav_links(session: Optional[Session]) -> List[NavLink]:
    """Navigation shown in the page header for the current session."""
    if session is None:
        return []

    links = [NavLink(DEFAULT_HOME, "Dashboard")]
    if session.role == Role.ADMIN:
        links.append(NavLink(ROLE_HOME[Role.ADMIN], "Admin Panel"))
    elif session.role == Role.WORKER:
        links.append(NavLink(ROLE_HOME[Role.WORKER], "Worker Panel"))
    return links
