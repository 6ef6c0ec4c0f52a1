"""Engine and session factory for the gitshelf stats cache.

Provides SQLite engine creation with performance pragmas,
session factory creation, and database initialization.
"""

from __future__ import annotations

from sqlalchemy import Engine, create_engine, event, select
from sqlalchemy.orm import Session, sessionmaker

from gitshelf.storage.schema import Base, ShelfMetaRow

SCHEMA_VERSION = "1"


def create_shelf_engine(db_path: str = ":memory:") -> Engine:
    """Create a SQLite engine for the stats cache.

    Args:
        db_path: Path to the SQLite database file, or ``":memory:"``.
    """
    if db_path == ":memory:":
        engine = create_engine("sqlite://", echo=False)
    else:
        engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def apply_pragmas(dbapi_conn, connection_record):  # type: ignore[no-untyped-def]
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA busy_timeout=5000")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.close()

    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a session factory bound to the given engine.

    Uses expire_on_commit=False so cached rows stay readable after commit.
    """
    return sessionmaker(bind=engine, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create all tables and record the schema version on a new database."""
    Base.metadata.create_all(engine)

    SessionLocal = create_session_factory(engine)
    with SessionLocal() as session:
        existing = session.execute(
            select(ShelfMetaRow).where(ShelfMetaRow.key == "schema_version")
        ).scalar_one_or_none()
        if existing is None:
            session.add(ShelfMetaRow(key="schema_version", value=SCHEMA_VERSION))
            session.commit()
