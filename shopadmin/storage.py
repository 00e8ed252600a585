# shopadmin/storage.py
"""
Durable key/value storage for client state that must survive restarts.

Values are JSON documents stored under namespaced keys (the session lives
under "auth-storage"). Backed by SQLAlchemy so the location is just a URL:
a local SQLite file by default, or an in-memory database in tests.
"""
from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import Column, DateTime, String, Text, create_engine, select
from sqlalchemy.orm import Session, declarative_base
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class PersistedState(Base):
    __tablename__ = "persisted_state"

    key = Column(String(128), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<PersistedState key={self.key!r}>"


class KeyValueStorage:
    """JSON documents keyed by name, persisted through SQLAlchemy."""

    def __init__(self, url: str):
        self.url = url
        if url.startswith("sqlite") and (url.endswith(":memory:") or url == "sqlite://"):
            # One shared connection, otherwise every checkout sees an empty DB
            self.engine = create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(url)
        Base.metadata.create_all(self.engine)

    def load(self, key: str) -> Optional[Any]:
        with Session(self.engine) as session:
            row = session.execute(
                select(PersistedState).where(PersistedState.key == key)
            ).scalar_one_or_none()
            if row is None:
                return None
            return json.loads(row.value)

    def save(self, key: str, value: Any) -> None:
        encoded = json.dumps(value)
        with Session(self.engine) as session:
            row = session.get(PersistedState, key)
            if row is None:
                session.add(PersistedState(key=key, value=encoded))
            else:
                row.value = encoded
            session.commit()

    def remove(self, key: str) -> None:
        with Session(self.engine) as session:
            row = session.get(PersistedState, key)
            if row is not None:
                session.delete(row)
                session.commit()

    def close(self) -> None:
        self.engine.dispose()
