# ============================================================================
# FILE: audiovault/db/session.py
# Engine, connection pool and per-request sessions
# ============================================================================
from typing import Generator
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from audiovault.config import settings
import logging

logger = logging.getLogger(__name__)


def _configure_sqlite(engine: Engine) -> None:
    """
    Enforce foreign keys and let SQLAlchemy own transaction boundaries.

    Transactions open with a plain (deferred) BEGIN, so readers share the
    database and only a write statement takes the write lock. Position
    allocation relies on that: it opens its transaction with an UPDATE.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # Let SQLAlchemy emit BEGIN itself
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def build_engine(database_url: str, pool_size: int = 5, max_overflow: int = 10) -> Engine:
    """Create the shared engine; the pool bounds concurrent store access"""
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False, "timeout": 30},
        )
        _configure_sqlite(engine)
    else:
        engine = create_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
        )
    logger.info(f"Database engine created for {engine.url.render_as_string(hide_password=True)}")
    return engine


def build_sessionmaker(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


engine = build_engine(settings.DATABASE_URL, settings.DB_POOL_SIZE, settings.DB_MAX_OVERFLOW)
SessionLocal = build_sessionmaker(engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency yielding one session per request"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
