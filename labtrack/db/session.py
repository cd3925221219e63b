"""Database engine, session factory, and dependency injection."""

from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from labtrack.core.config import Settings
from labtrack.db.base import Base


class Database:
    """Owns one engine and its session factory.

    Built once at process start by ``create_app`` (or the CLI), handed to
    request handlers through ``app.state.db``, and disposed at shutdown.
    """

    def __init__(self, url: str, echo: bool = False, **engine_kwargs):
        self.url = url
        if url.startswith("sqlite"):
            # In-memory SQLite must share a single connection across threads
            engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
            engine_kwargs.setdefault("poolclass", StaticPool)
        else:
            engine_kwargs.setdefault("pool_pre_ping", True)
        self.engine: Engine = create_engine(url, echo=echo, **engine_kwargs)
        self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        if settings.DATABASE_URL.startswith("sqlite"):
            return cls(settings.DATABASE_URL, echo=settings.DB_ECHO)
        return cls(
            settings.DATABASE_URL,
            echo=settings.DB_ECHO,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_recycle=settings.DB_POOL_RECYCLE,
        )

    def session(self) -> Session:
        return self.session_factory()

    def create_all(self) -> None:
        """Create every table. Safe to call multiple times."""
        import labtrack.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        import labtrack.models  # noqa: F401

        Base.metadata.drop_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Generator[Session, None, None]:
    """FastAPI dependency that provides a DB session per request."""
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()
