from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session, declarative_base
from contextlib import contextmanager
from typing import Generator

from hobbyhub.config.settings import get_settings

_db_settings = get_settings().database

_connect_args = {}
if _db_settings.url.startswith("sqlite"):
    # TestClient and the request handlers share the connection across threads
    _connect_args["check_same_thread"] = False

engine = create_engine(
    _db_settings.url,
    echo=_db_settings.echo,
    pool_pre_ping=True,
    future=True,
    connect_args=_connect_args,
)
SessionLocal = sessionmaker(
    bind=engine, autoflush=False, autocommit=False, expire_on_commit=False
)

# SQLAlchemy declarative base for models
Base = declarative_base()


@contextmanager
def db_session():
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency for database sessions."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """Create any missing tables for the registered models."""
    import hobbyhub.models  # noqa: F401  registers the mappers on Base.metadata

    Base.metadata.create_all(bind=engine)
