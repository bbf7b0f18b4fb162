from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.orm import sessionmaker

from streamgate.core.config import settings
from streamgate.core.errors import StorageUnavailableError


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # local runs and tests; sessions are request-scoped but may hop threads
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 20,
        "pool_recycle": 1800,  # recycle connections every 30 min (avoid stale)
        "connect_args": {"connect_timeout": 5},
    }


engine = create_engine(settings.database_url, **_engine_kwargs(settings.database_url))
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def storage_guard():
    """Re-raise connectivity failures as StorageUnavailableError (retryable, never NotFound)."""
    try:
        yield
    except (OperationalError, InterfaceError) as e:
        raise StorageUnavailableError(str(e.orig or e)) from e
