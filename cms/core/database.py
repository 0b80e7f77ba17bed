"""Database engine and session management (SQLite by default, PostgreSQL supported)."""

from collections.abc import Generator
from functools import lru_cache

from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker

from cms.core.config import get_settings


def build_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine for the given URL; SQLite connections get foreign keys enabled."""
    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            echo=echo,
        )

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _record) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine
    return create_engine(url, pool_pre_ping=True, echo=echo)


@lru_cache
def get_engine() -> Engine:
    """Engine for the configured DATABASE_URL, created on first use."""
    settings = get_settings()
    return build_engine(settings.DATABASE_URL, echo=settings.DEBUG)


@lru_cache
def get_session_factory() -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
