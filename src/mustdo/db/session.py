"""SQLAlchemy engine and session factory."""

from collections.abc import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session

from mustdo.core.config import settings
from mustdo.db.schema import Base


def build_engine(database_url: str, echo: bool = False) -> Engine:
    # SQLite connections are shared between the request threads and the poller.
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, echo=echo, connect_args=connect_args)


engine = build_engine(settings.database_url, echo=settings.debug)


def init_db(bind: Engine = engine) -> None:
    """Create the task and settings tables if missing."""
    Base.metadata.create_all(bind)


def new_session() -> Session:
    """Session for work outside a request (the reminder poller)."""
    return Session(engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a database session."""
    with Session(engine) as session:
        yield session
