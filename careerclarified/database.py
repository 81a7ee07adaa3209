"""
Database connection and session management.

Production uses the Supabase Postgres connection string
(CLARIFIED_DATABASE_URL). A SQLite file works for local development and
`sqlite://` gives a shared in-memory database. Failed statements are rolled
back and re-raised; nothing is retried.
"""
import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import settings

logger = logging.getLogger("clarified.database")

Base = declarative_base()


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:")


def create_app_engine(database_url: str = None):
    """
    Build the engine for the configured backend.

    Postgres gets a pre-pinged, recycled pool sized from settings. SQLite
    files run in WAL mode with a busy timeout; in-memory SQLite shares one
    connection so every session sees the same tables.
    """
    url = database_url or settings.database_url

    if not _is_sqlite(url):
        logger.info("Using PostgreSQL engine with connection pooling")
        return create_engine(
            url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
            pool_pre_ping=True,
        )

    if _is_memory_sqlite(url):
        logger.info("Using in-memory SQLite engine")
        return create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)

    engine = create_engine(url, connect_args={"check_same_thread": False})

    @event.listens_for(engine, "connect")
    def _sqlite_pragmas(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA busy_timeout=5000")
        cursor.close()

    logger.info("Using SQLite file engine (WAL mode)")
    return engine


engine = create_app_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def _is_connection_error(exc: Exception) -> bool:
    """Connection drops and timeouts, as opposed to constraint violations."""
    return isinstance(exc, (OperationalError, DBAPIError)) and not isinstance(exc, IntegrityError)


def get_db():
    """FastAPI dependency that yields a database session."""
    db = SessionLocal()
    try:
        yield db
    except Exception as exc:
        if _is_connection_error(exc):
            db.rollback()
            logger.warning("Rolled back session after connection error: %s", exc)
        raise
    finally:
        db.close()


@contextmanager
def get_resilient_session():
    """
    Session for scripts and jobs outside a request. Commits on success.

    Usage:
        with get_resilient_session() as db:
            db.query(...)
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception as exc:
        db.rollback()
        if _is_connection_error(exc):
            logger.warning("Session rolled back after connection error: %s", exc)
        raise
    finally:
        db.close()


def check_connection() -> bool:
    """True when a trivial query succeeds. Used by the health endpoint."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        return False
