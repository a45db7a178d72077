"""
Key/value settings store backed by SQLAlchemy, plus an in-memory implementation.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Protocol

from sqlalchemy import JSON, Column, String, create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from guildsite.errors import StoreUnavailable

logger = logging.getLogger(__name__)

SCHEDULE_URL_KEY = "schedule_url"
PROFILE_ABOUT_KEY = "profile_about"
PROFILE_CREDITS_KEY = "profile_credits"


class SettingsStore(Protocol):
    """Interface for settings access."""

    def get(self, key: str) -> Optional[Any]:
        ...

    def upsert(self, key: str, value: Any) -> Any:
        ...


def _copy_json(value: Any) -> Any:
    # Mimic a real round trip so callers never share state with the store.
    return json.loads(json.dumps(value))


class InMemorySettingsStore:
    """Simple in-memory store for development and tests. Data does not persist."""

    def __init__(self):
        self.settings: Dict[str, Any] = {}

    def get(self, key: str) -> Optional[Any]:
        if key not in self.settings:
            return None
        return _copy_json(self.settings[key])

    def upsert(self, key: str, value: Any) -> Any:
        self.settings[key] = _copy_json(value)
        return value

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.settings.clear()


class SqlSettingsStore:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres
    or SQLite for tests).

    The table is created lazily on first use, so a database that is down at boot
    surfaces as StoreUnavailable on each request instead of killing the process.
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlSettingsStore")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        self._schema_ready = False

    def _ensure_schema(self) -> None:
        if self._schema_ready:
            return
        Base.metadata.create_all(self.engine)
        self._schema_ready = True

    def get(self, key: str) -> Optional[Any]:
        try:
            self._ensure_schema()
            with self.Session() as session:
                row = session.get(SettingRow, key)
                return row.value if row else None
        except SQLAlchemyError as exc:
            raise StoreUnavailable() from exc

    def upsert(self, key: str, value: Any) -> Any:
        try:
            self._ensure_schema()
            with self.Session() as session:
                existing = session.get(SettingRow, key)
                if existing:
                    existing.value = value
                else:
                    session.add(SettingRow(key=key, value=value))
                try:
                    session.commit()
                except IntegrityError:
                    # Another writer inserted the key first; overwrite it.
                    session.rollback()
                    row = session.get(SettingRow, key)
                    row.value = value
                    session.commit()
            return value
        except SQLAlchemyError as exc:
            raise StoreUnavailable() from exc


Base = declarative_base()


class SettingRow(Base):
    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(JSON, nullable=False)
