"""SQLite engine, sessions, and schema bootstrap for snapvc.

A repository's store is one SQLite file in its control directory;
tests use ``":memory:"``. Every engine turns on foreign keys so tree
entries, refs, and staging rows can never point at a missing blob or
commit.
"""

from __future__ import annotations

from sqlalchemy import Engine, create_engine, event, select
from sqlalchemy.orm import Session, sessionmaker

from snapvc.exceptions import SnapError
from snapvc.storage.schema import Base, SnapMetaRow

SCHEMA_VERSION = "1"
_VERSION_KEY = "schema_version"


def create_snap_engine(
    db_path: str = ":memory:",
    *,
    url: str | None = None,
) -> Engine:
    """Build the engine for a repository store.

    Args:
        db_path: SQLite file, or ``":memory:"`` for a throwaway store.
        url: Any SQLAlchemy URL; takes precedence over *db_path*.
    """
    if url is None:
        url = "sqlite://" if db_path == ":memory:" else f"sqlite:///{db_path}"
    engine = create_engine(url, echo=False)

    if engine.dialect.name == "sqlite":

        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_conn, connection_record):  # type: ignore[no-untyped-def]
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute("PRAGMA busy_timeout=5000")
            cursor.close()

    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Sessions keep loaded rows usable after commit (expire_on_commit=False)."""
    return sessionmaker(bind=engine, expire_on_commit=False)


def get_schema_version(engine: Engine) -> str | None:
    """The schema version recorded in the store, or None for a fresh one."""
    with create_session_factory(engine)() as session:
        return session.execute(
            select(SnapMetaRow.value).where(SnapMetaRow.key == _VERSION_KEY)
        ).scalar_one_or_none()


def init_db(engine: Engine) -> None:
    """Create missing tables and stamp the schema version.

    Raises:
        SnapError: If the store was written by a newer schema.
    """
    Base.metadata.create_all(engine)

    stored = get_schema_version(engine)
    if stored is None:
        with create_session_factory(engine)() as session:
            session.add(SnapMetaRow(key=_VERSION_KEY, value=SCHEMA_VERSION))
            session.commit()
    elif int(stored) > int(SCHEMA_VERSION):
        raise SnapError(
            f"Repository schema version {stored} is newer than supported ({SCHEMA_VERSION})"
        )
