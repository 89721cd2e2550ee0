"""Durable local storage - a small string key/value store kept in one table."""
from typing import Optional

from sqlalchemy import Column, String, Text
from sqlalchemy.orm import sessionmaker

from dashboard.database import IN_MEMORY_URL, Base, create_session_factory
from dashboard.observability.logging import get_logger

logger = get_logger(__name__)


class LocalStorageItem(Base):
    """One stored key. Values are opaque strings; callers serialize their own records."""
    __tablename__ = "local_storage"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)


class LocalStorage:
    """
    Key/value storage with the browser ``localStorage`` contract.

    Every write runs in its own transaction, so a failed write leaves the
    previous value in place. Without a session factory the items live in an
    in-memory SQLite database, which is what tests use.
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory or create_session_factory(IN_MEMORY_URL)

    @classmethod
    def from_url(cls, url: str) -> "LocalStorage":
        return cls(create_session_factory(url))

    def get_item(self, key: str) -> Optional[str]:
        with self.session_factory() as db:
            item = db.get(LocalStorageItem, key)
            return item.value if item is not None else None

    def set_item(self, key: str, value: str) -> None:
        with self.session_factory.begin() as db:
            db.merge(LocalStorageItem(key=key, value=value))
        logger.debug("Local storage item written", key=key)

    def remove_item(self, key: str) -> None:
        with self.session_factory.begin() as db:
            removed = db.query(LocalStorageItem).filter(LocalStorageItem.key == key).delete()
        if removed:
            logger.debug("Local storage item removed", key=key)

    def __contains__(self, key: str) -> bool:
        return self.get_item(key) is not None
