import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from inventory_ledger.config import Settings
from inventory_ledger.exceptions import StorageUnavailableError

logger = logging.getLogger(__name__)

# Base class for models
Base = declarative_base()


class Database:
    """
    Storage client owning the SQLAlchemy engine and session factory.

    Built once at process start by the application factory and disposed
    on shutdown. Request handlers get sessions through `get_db`.
    """

    def __init__(self, url: str, connect_args: dict = None, **engine_kwargs):
        self.engine = create_engine(url, connect_args=connect_args or {}, **engine_kwargs)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """
        Build a Database from application settings.

        SQLite needs check_same_thread and no pool bounds; PostgreSQL gets a
        bounded pool, TLS and connect/statement timeouts.
        """
        url = settings.database_url
        if url.startswith("sqlite"):
            return cls(url, connect_args={"check_same_thread": False})

        if settings.DB_SSLMODE in ("require", "prefer", "allow"):
            logger.warning(
                "Database TLS is enabled without certificate verification (sslmode=%s)",
                settings.DB_SSLMODE,
            )

        connect_args = {
            "sslmode": settings.DB_SSLMODE,
            "connect_timeout": settings.DB_CONNECT_TIMEOUT,
            "options": f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}",
        }
        return cls(
            url,
            connect_args=connect_args,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_pre_ping=True,
        )

    def create_all(self) -> None:
        # Register models on Base.metadata
        from inventory_ledger.models import login_event, outflow, product  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def ping(self) -> bool:
        """Return True when a trivial query succeeds."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database ping failed: {e}")
            return False

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    """
    Dependency to get database session.
    Yields a session from the application's Database and closes it after use.
    """
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def storage_errors(db: Session, action: str) -> Iterator[None]:
    """Roll back and re-raise SQLAlchemy failures as StorageUnavailableError."""
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Storage failure while {action}")
        raise StorageUnavailableError(f"Storage failure while {action}") from e
