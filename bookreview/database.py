"""
Database Configuration Module

Sets up SQLAlchemy 2.0 for the Book Review API.

Store Handle
============
The engine and session factory live on a `Database` object that is built
explicitly at startup and handed to the application factory:

    database = Database.from_settings(get_settings())
    app = create_app(database=database)

The application keeps the handle on `app.state.database`; tests build
their own handle around an in-memory SQLite engine.

Session Management Pattern
==========================
One session per request:
1. Request arrives -> open a session from the application's Database
2. Route and services use it for all reads/writes
3. Services commit explicitly; nothing is committed implicitly
4. Session is closed when the request ends
"""

import logging
from collections.abc import Generator
from typing import Any

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from bookreview.config import Settings

logger = logging.getLogger(__name__)


# =============================================================================
# Base Model Class
# =============================================================================
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

        class Book(Base):
            __tablename__ = "books"
            ...

    Alembic reads Base.metadata to discover the tables.
    """
    pass


# =============================================================================
# Database Handle
# =============================================================================
class Database:
    """
    Engine plus session factory for one database.

    Args:
        url: SQLAlchemy database URL
        **engine_kwargs: Passed straight to create_engine()

    Example:
        db = Database("sqlite://", poolclass=StaticPool,
                      connect_args={"check_same_thread": False})
        db.create_tables()
        with db.session() as session:
            ...
    """

    def __init__(self, url: str, **engine_kwargs: Any) -> None:
        self.url = url
        self.engine: Engine = create_engine(url, **engine_kwargs)
        # autocommit/autoflush off: services decide when to commit
        self.session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """
        Build the handle described by application settings.

        Pool sizing only applies to server databases; SQLite gets
        check_same_thread=False so the threadpool can share connections.
        """
        if settings.is_sqlite:
            return cls(
                settings.database_url,
                connect_args={"check_same_thread": False},
                echo=settings.debug,
            )

        return cls(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=True,
            echo=settings.debug,
        )

    def session(self) -> Session:
        """Open a new session bound to this database."""
        return self.session_factory()

    def create_tables(self) -> None:
        """
        Create all tables that don't exist yet.

        Managed deployments use the Alembic migrations instead.
        """
        # Importing the package registers every model with Base.metadata
        import bookreview.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def drop_tables(self) -> None:
        """
        Drop all tables.

        DANGER: deletes all data. Only for tests and local resets.
        """
        import bookreview.models  # noqa: F401

        Base.metadata.drop_all(bind=self.engine)

    def dispose(self) -> None:
        """Close every pooled connection."""
        self.engine.dispose()

    def __repr__(self) -> str:
        return f"Database(url='{self.engine.url.render_as_string(hide_password=True)}')"


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Opens a session from the Database stored on the application and
    closes it when the request ends, even if the handler raised.

    Usage in Routes:
        @router.get("/books")
        def list_books(db: Session = Depends(get_db)):
            ...

    Yields:
        SQLAlchemy Session instance
    """
    database: Database = request.app.state.database
    db = database.session()
    try:
        yield db
    finally:
        db.close()
