"""
Database connection and session management.
"""
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.exc import OperationalError, DBAPIError
from sqlalchemy.pool import StaticPool
from typing import Generator, Optional
import logging
import time

logger = logging.getLogger(__name__)

engine: Optional[Engine] = None
SessionLocal = None


def _normalize_url(database_url: str) -> str:
    # Some hosts hand out postgres:// which SQLAlchemy no longer accepts
    if database_url.startswith('postgres://'):
        return database_url.replace('postgres://', 'postgresql://', 1)
    return database_url


def _engine_kwargs(database_url: str, pool_size: int, max_overflow: int) -> dict:
    if database_url.startswith('sqlite'):
        kwargs = {'connect_args': {'check_same_thread': False}, 'echo': False}
        if ':memory:' in database_url or database_url in ('sqlite://', 'sqlite:///'):
            # One shared connection, otherwise every session sees an empty database
            kwargs['poolclass'] = StaticPool
        return kwargs

    return {
        'pool_pre_ping': True,  # Verify connections before using
        'pool_size': pool_size,
        'max_overflow': max_overflow,
        'pool_recycle': 3600,  # Recycle connections after 1 hour
        'echo': False,
        'connect_args': {'connect_timeout': 10},
    }


def init_db(
    database_url: Optional[str] = None,
    max_retries: int = 3,
    retry_delay: float = 1.0,
) -> Engine:
    """
    Initialize the database engine and session factory with retry logic.
    Call this once at application startup.

    Args:
        database_url: Connection URL (default: from settings)
        max_retries: Number of connection attempts
        retry_delay: Seconds to wait between retries

    Returns:
        The initialized engine

    Raises:
        RuntimeError: If connection fails after all retries
    """
    global engine, SessionLocal

    if database_url is None:
        from backend.core.config import get_settings
        settings = get_settings()
        database_url = settings.database_url
        pool_size, max_overflow = settings.database_pool_size, settings.database_max_overflow
    else:
        pool_size, max_overflow = 5, 10

    database_url = _normalize_url(database_url)

    for attempt in range(max_retries):
        try:
            new_engine = create_engine(
                database_url,
                **_engine_kwargs(database_url, pool_size, max_overflow)
            )

            # Test connection
            with new_engine.connect() as conn:
                conn.execute(text("SELECT 1"))

            engine = new_engine
            SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

            logger.info(f"Database initialized: {database_url.split('@')[1] if '@' in database_url else database_url.split(':')[0]}")
            return engine

        except (OperationalError, DBAPIError) as e:
            logger.warning(f"Database connection attempt {attempt + 1}/{max_retries} failed: {e}")
            if attempt < max_retries - 1:
                time.sleep(retry_delay * (attempt + 1))
            else:
                logger.error(f"Database initialization failed after {max_retries} attempts")
                raise RuntimeError(f"Failed to connect to database: {e}") from e


def get_engine() -> Engine:
    if engine is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return engine


def get_db() -> Generator[Session, None, None]:
    """
    Get a database session (FastAPI dependency and script helper).

    Usage:
        from backend.core.database import get_db

        db = next(get_db())
        user = db.query(User).first()
    """
    if not SessionLocal:
        raise RuntimeError("Database not initialized. Call init_db() first.")

    db = SessionLocal()
    try:
        yield db
    except (OperationalError, DBAPIError) as e:
        logger.error(f"Database session error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


def create_tables():
    """
    Create all tables in the database.
    Only use for initial setup and tests - prefer Alembic migrations for production.
    """
    from .models import Base
    Base.metadata.create_all(bind=get_engine())
    logger.info("Database tables created")

