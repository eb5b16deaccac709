from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker

from config import DB_FILE
from db.models import Base

logger = logging.getLogger(__name__)

BOOTSTRAP_TIMEOUT_SECONDS = 5.0


def create_db_engine(echo: bool = False, *, db_file: str | Path = DB_FILE) -> Engine:
    """Open the SQLite database, check it answers and create the quotes table if absent."""
    path = Path(db_file)
    path.parent.mkdir(parents=True, exist_ok=True)

    # Request threads share the pool, so connections must not be pinned to a thread.
    engine = create_engine(
        f"sqlite:///{path}",
        echo=echo,
        connect_args={"check_same_thread": False, "timeout": BOOTSTRAP_TIMEOUT_SECONDS},
    )
    event.listen(engine, "connect", _enable_wal)

    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))
    Base.metadata.create_all(engine)

    logger.info("Database ready at %s", path)
    return engine


def init_db(echo: bool = False, *, db_file: str | Path = DB_FILE) -> sessionmaker[Session]:
    return sessionmaker(create_db_engine(echo, db_file=db_file))


def _enable_wal(dbapi_connection: object, connection_record: object) -> None:
    cursor = dbapi_connection.cursor()  # type: ignore[attr-defined]
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()
