import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.pool import StaticPool

from .config import settings
from .core.exceptions import ConflictError, PersistenceError

logger = logging.getLogger("mythweaver")


def _engine_kwargs(url: str) -> dict:
    kwargs = {}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        # In-memory SQLite must share one connection or every session gets an empty db
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return kwargs


engine = create_engine(settings.database_url, echo=settings.debug, **_engine_kwargs(settings.database_url))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    Base.metadata.create_all(bind=engine)


@contextmanager
def _write_guard(db: Session):
    try:
        yield
    except StaleDataError as e:
        db.rollback()
        logger.warning(f"Rejected stale write: {e}")
        raise ConflictError("The record was changed by another request, reload and retry") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Persistence failure: {e}")
        raise PersistenceError() from e


def flush(db: Session) -> None:
    """Send pending changes without committing, so new rows get their ids."""
    with _write_guard(db):
        db.flush()


def commit(db: Session) -> None:
    """Commit the unit of work, rolling back on failure.

    Versioned rows (characters, sessions, combatants) are written with a
    compare-and-swap on their version column, so a concurrent writer that
    got there first surfaces here as a StaleDataError.
    """
    with _write_guard(db):
        db.commit()
