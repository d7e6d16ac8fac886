"""Engine and session construction for the configured database."""

import logging
from collections.abc import Iterator
from functools import lru_cache

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from affiliation_scout.config import get_settings
from affiliation_scout.db.base import Base

logger = logging.getLogger(__name__)


def make_engine(database_url: str) -> Engine:
    """Create an engine; SQLite connections are shareable across threads.

    An in-memory SQLite URL gets a StaticPool so every session sees the
    same database.
    """
    if database_url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True)


@lru_cache
def get_engine() -> Engine:
    """Engine for the configured database_url, created once per process."""
    return make_engine(get_settings().database_url)


def init_db(engine: Engine | None = None) -> None:
    """Create the searches and results tables if they do not exist."""
    # Table modules register themselves on Base.metadata when imported.
    from affiliation_scout.sqlalchemy import results, searches  # noqa: F401

    engine = engine or get_engine()
    Base.metadata.create_all(bind=engine)
    logger.info("Database ready at %s", engine.url.render_as_string(hide_password=True))


def _make_session_factory() -> sessionmaker[Session]:
    return sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False)


def get_db() -> Iterator[Session]:
    """Yield a session and close it when the caller is done."""
    session = _make_session_factory()()
    try:
        yield session
    finally:
        session.close()
