"""Mini README: Engine and session factory helpers.

Structure:
    * create_database_engine - build an engine with SQLite specific tweaks.
    * create_session_factory - sessionmaker bound to an engine.
    * init_database - create any missing tables.

SQLite connections are opened with ``check_same_thread`` disabled because
FastAPI runs synchronous handlers on a worker thread pool, and every new
connection turns on ``PRAGMA foreign_keys`` so the foreign-key rules of the
schema are enforced by the database as well as by the repository. The bare
``sqlite://`` URL maps to a single shared in-memory connection.
"""

from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ..errors import StoreUnavailable
from ..logging_utils import get_logger
from .schema import Base

LOGGER = get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_database_engine(database_url: str, *, echo: bool = False) -> Engine:
    """Create an engine for ``database_url``."""

    kwargs = {"echo": echo}
    is_sqlite = database_url.startswith("sqlite")
    if is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in {"sqlite://", "sqlite:///:memory:"}:
            kwargs["poolclass"] = StaticPool

    engine = create_engine(database_url, **kwargs)
    if is_sqlite:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    LOGGER.debug("Created database engine for %s", engine.url.render_as_string(hide_password=True))
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    """Return a session factory whose objects survive commit for read-back."""

    return sessionmaker(bind=engine, expire_on_commit=False)


def init_database(engine: Engine) -> None:
    """Create every table that does not exist yet."""

    try:
        Base.metadata.create_all(engine)
    except SQLAlchemyError as error:
        raise StoreUnavailable(f"Could not initialise the database: {error}") from error
    LOGGER.info("Database schema ready (%s tables)", len(Base.metadata.tables))
