"""
clipkeep.database

Shared SQLAlchemy declarative base and session management for the history log.

Overview:
- Provides a single `declarative_base()` instance (`Base`) inherited by the ORM
    entity classes in clipkeep.models.
- Includes a utility class that builds the engine and hands out sessions.

Contents:
- Base:
    Singleton `declarative_base` instance.

- DatabaseSessionGenerator:
    - __init__(settings: StorageSettings | None, engine: Engine | None):
        Builds the engine from the provided StorageSettings, or wraps an existing
        engine (tests pass an in-memory StaticPool engine).
    - get_session() -> Session:
        Creates a new synchronous SQLAlchemy session.
    - session_factory:
        The bound sessionmaker, used with `.begin()` for one transaction per write.
    - init_db():
        Creates all tables defined in the ORM models.

Design Notes:
- SQLite file databases get their parent directory created on first use.
- Sessions keep their objects usable after commit (expire_on_commit=False); the log
    never holds on to rows between operations.
"""

from typing import Optional

from sqlalchemy import create_engine, make_url
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from clipkeep.config import StorageSettings


Base = declarative_base()
"""Singleton `declarative_base` instance for ORM models."""


class DatabaseSessionGenerator:
    """
    Utility class to generate SQLAlchemy sessions bound to a specific engine.

    Attributes:
        engine (sqlalchemy.engine.Engine): The SQLAlchemy engine to bind sessions to.
        session_factory (sessionmaker): Session factory bound to the engine.
    """

    def __init__(
        self,
        settings: Optional[StorageSettings] = None,
        engine: Optional[Engine] = None,
    ):
        if engine is None:
            if settings is None:
                raise ValueError("Either settings or engine is required")
            engine = self._create_engine(settings.database_url)
        self.engine = engine
        self.session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)

    @staticmethod
    def _create_engine(database_url: str) -> Engine:
        url = make_url(database_url)
        if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
            from pathlib import Path

            Path(url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)
        return create_engine(url)

    def get_session(self) -> Session:
        """
        Creates a new SQLAlchemy session bound to the configured engine.

        Returns:
            sqlalchemy.orm.Session: A new session instance.
        """
        return self.session_factory()

    def init_db(self):
        """
        Initializes the database by creating all tables defined in the ORM models.
        """
        # Register the entities on Base.metadata
        import clipkeep.models  # noqa: F401

        Base.metadata.create_all(self.engine)

    def dispose(self):
        self.engine.dispose()
