"""
Identity store - owns the single authenticated session of the process.

Credentials are a static table compared in plain text: there is no hashing,
lockout or rate limiting. The session record is mirrored into durable local
storage so that a restart restores it.
"""
import json
from typing import Dict, NamedTuple, Optional

from pydantic import ValidationError

from dashboard.models.domain import Session
from dashboard.models.enums import Role
from dashboard.observability.logging import get_logger
from dashboard.storage import LocalStorage

logger = get_logger(__name__)

DEFAULT_SESSION_KEY = "user"


class Credential(NamedTuple):
    password: str
    session: Session


# Demo accounts, one per role
CREDENTIALS: Dict[str, Credential] = {
    "admin@example.com": Credential(
        password="admin123",
        session=Session(id="1", email="admin@example.com", name="Admin User", role=Role.ADMIN),
    ),
    "worker@example.com": Credential(
        password="worker123",
        session=Session(id="2", email="worker@example.com", name="Worker User", role=Role.WORKER),
    ),
    "user@example.com": Credential(
        password="user123",
        session=Session(id="3", email="user@example.com", name="Regular User", role=Role.USER),
    ),
}


class IdentityStore:
    """Holds the current session and exposes login/logout."""

    def __init__(
        self,
        storage: LocalStorage,
        storage_key: str = DEFAULT_SESSION_KEY,
        credentials: Optional[Dict[str, Credential]] = None,
    ):
        self.storage = storage
        self.storage_key = storage_key
        self.credentials = CREDENTIALS if credentials is None else credentials
        self._session: Optional[Session] = None
        # True until restore() has run once
        self.is_loading = True

    def restore(self) -> Optional[Session]:
        """
        Restore the session from durable storage.

        A stored record is trusted as-is when it is well-formed. Anything that
        does not parse as a session counts as "no stored session".
        """
        self.is_loading = True
        try:
            raw = self.storage.get_item(self.storage_key)
            if raw is not None:
                self._session = self._parse(raw)
        finally:
            self.is_loading = False
        return self._session

    def _parse(self, raw: str) -> Optional[Session]:
        try:
            return Session.model_validate(json.loads(raw))
        except (ValueError, ValidationError) as e:
            logger.warning("Ignoring malformed stored session", key=self.storage_key, error=str(e))
            return None

    def login(self, email: str, password: str) -> bool:
        credential = self.credentials.get(email)

        if credential is None or credential.password != password:
            logger.warning("Login failed", email=email)
            return False

        self._session = credential.session
        self.storage.set_item(
            self.storage_key,
            json.dumps(credential.session.model_dump(mode="json", by_alias=True)),
        )
        logger.info("Login succeeded", session=credential.session)
        return True

    def logout(self) -> None:
        if self._session is not None:
            logger.info("Logout", session=self._session)
        self._session = None
        self.storage.remove_item(self.storage_key)

    def current_session(self) -> Optional[Session]:
        return self._session
