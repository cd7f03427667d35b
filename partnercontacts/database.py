"""
Database schema and connection management.

Uses SQLAlchemy for partner contact storage. Any SQLAlchemy URL works;
bare file paths are treated as SQLite databases.
"""

from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Protocol, Union

from sqlalchemy import create_engine, Column, Integer, String, DateTime
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()

DatabaseTarget = Union[str, Path]


class PartnerContact(Base):
    """Live partner contact. PII columns hold ciphertext."""

    __tablename__ = "PartnerContacts"
    __encrypted_fields__ = ("first_name", "last_name", "email", "phone_number")

    location_id = Column(String, primary_key=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    email = Column(String, nullable=True, unique=True)
    phone_number = Column(String, nullable=True, unique=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    def __repr__(self) -> str:
        return f"<PartnerContact location_id={self.location_id!r}>"


class PartnerContactArchive(Base):
    """Soft-deleted partner contact, copied as-is from the live table."""

    __tablename__ = "PartnerContactsArchive"
    __encrypted_fields__ = ("first_name", "last_name", "email", "phone_number")

    id = Column(Integer, primary_key=True, autoincrement=True)
    location_id = Column(String, nullable=False, index=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    email = Column(String, nullable=True)
    phone_number = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=True)
    archived_at = Column(DateTime, nullable=False, default=datetime.now)

    @classmethod
    def from_contact(cls, contact: PartnerContact) -> "PartnerContactArchive":
        """Build an archive row from a live row without touching the ciphertext."""
        return cls(
            location_id=contact.location_id,
            first_name=contact.first_name,
            last_name=contact.last_name,
            email=contact.email,
            phone_number=contact.phone_number,
            created_at=contact.created_at,
        )


def database_url(target: DatabaseTarget) -> str:
    """
    Turn a database target into a SQLAlchemy URL.

    Args:
        target: SQLAlchemy URL or path to a SQLite database file

    Returns:
        SQLAlchemy URL string
    """
    if isinstance(target, Path) or "://" not in str(target):
        return f"sqlite:///{target}"
    return str(target)


def _ensure_sqlite_parent(url: str) -> None:
    prefix = "sqlite:///"
    if url.startswith(prefix) and url != prefix + ":memory:" and len(url) > len(prefix):
        Path(url[len(prefix):]).parent.mkdir(parents=True, exist_ok=True)


def create_db_engine(target: DatabaseTarget) -> Engine:
    """Create an engine for a database target."""
    url = database_url(target)
    _ensure_sqlite_parent(url)
    return create_engine(url)


def init_database(target: DatabaseTarget) -> None:
    """
    Initialize database and create tables.

    Args:
        target: SQLAlchemy URL or path to SQLite database file
    """
    engine = create_db_engine(target)
    Base.metadata.create_all(engine)
    engine.dispose()


def get_session(target: DatabaseTarget) -> Session:
    """
    Get database session.

    Args:
        target: SQLAlchemy URL or path to SQLite database file

    Returns:
        SQLAlchemy session
    """
    engine = create_db_engine(target)
    Session = sessionmaker(bind=engine)
    return Session()


class DataContextFactory(Protocol):
    """Provides a scoped data session."""

    def create_data_context(self):
        ...


class SessionContextFactory:
    """
    Produces short-lived sessions bound to a single engine.

    Each context is closed when its ``with`` block exits; whatever was
    not committed by then is rolled back.
    """

    def __init__(self, target: DatabaseTarget, create_tables: bool = False):
        self.engine = create_db_engine(target)
        self._sessionmaker = sessionmaker(bind=self.engine, expire_on_commit=False)
        if create_tables:
            Base.metadata.create_all(self.engine)

    @contextmanager
    def create_data_context(self) -> Iterator[Session]:
        session = self._sessionmaker()
        try:
            yield session
        finally:
            session.close()

    def dispose(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()
