from pathlib import Path
from typing import Generator

import pytest
from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from db.db import create_db_engine
from tests.helpers.clock import FakeClock


@pytest.fixture(scope="function")
def db_file(tmp_path: Path) -> Path:
    return tmp_path / "cotacao.db"


@pytest.fixture(scope="function")
def db_engine(db_file: Path) -> Generator[Engine, None, None]:
    engine = create_db_engine(db_file=db_file)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(db_engine)


@pytest.fixture(scope="function")
def clock() -> FakeClock:
    return FakeClock()
