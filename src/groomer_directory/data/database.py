"""
Database engine and session management.

Supports PostgreSQL (production) and SQLite (development) via DATABASE_URL.
Uses SQLAlchemy with connection pooling and health checks. The directory
is read-mostly: request handlers only write contact messages, and the
maintenance scripts write everything else.
"""

from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session, DeclarativeBase
from sqlalchemy.pool import StaticPool

from groomer_directory.config import settings
from groomer_directory.logging_config import get_logger
from groomer_directory.exceptions import DatabaseConnectionError

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


def _is_sqlite(url: str) -> bool:
    """Check if the database URL is SQLite."""
    return url.startswith("sqlite")


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


def create_db_engine(database_url: str | None = None):
    """
    Create a SQLAlchemy engine based on the database URL.

    Args:
        database_url: Override the URL from settings. Useful for testing.

    Returns:
        SQLAlchemy Engine instance
    """
    url = database_url or settings.database.url
    logger.info("Creating database engine — %s", "SQLite" if _is_sqlite(url) else "PostgreSQL")

    try:
        if _is_sqlite(url):
            # SQLite: StaticPool so every session shares one connection
            engine = create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
                echo=False,
            )

            # Foreign keys for offering cascades; WAL for file databases shared
            # by the API and the maintenance scripts
            use_wal = not _is_memory_sqlite(url)

            @event.listens_for(engine, "connect")
            def _set_sqlite_pragma(dbapi_conn, connection_record):
                cursor = dbapi_conn.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                if use_wal:
                    cursor.execute("PRAGMA journal_mode=WAL")
                cursor.close()
        else:
            # PostgreSQL: connection pooling
            engine = create_engine(
                url,
                pool_size=10,
                max_overflow=20,
                pool_pre_ping=True,  # Health check before using connection
                echo=False,
            )

        # Verify connection
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Database connection verified successfully")

        return engine

    except Exception as e:
        raise DatabaseConnectionError(
            message=f"Failed to connect to database: {e}",
            details={"url": url.split("@")[-1] if "@" in url else url},  # Hide credentials
        ) from e


def create_session_factory(engine=None) -> sessionmaker[Session]:
    """
    Create a session factory bound to the given engine.

    Args:
        engine: SQLAlchemy engine. If None, creates one from settings.

    Returns:
        Configured sessionmaker
    """
    if engine is None:
        engine = create_db_engine()
    # Rows stay readable after the contact form commits and the session closes
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def database_reachable(session: Session) -> bool:
    """
    Round-trip a trivial query on an open session.

    Returns:
        True if the database answered, False if the query failed.
    """
    try:
        session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Database health check failed: %s", e)
        return False
    return True


def init_db(engine=None) -> None:
    """
    Initialize the database — create all tables.

    Args:
        engine: SQLAlchemy engine. If None, creates one from settings.
    """
    if engine is None:
        engine = create_db_engine()

    # Import all models so they register with Base.metadata
    import groomer_directory.data.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")
