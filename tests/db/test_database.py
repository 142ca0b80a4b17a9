"""Unit tests for src/db/database.py"""

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from src.core.config import Settings
from src.db.database import create_db_engine, get_db, session_factory

IN_MEMORY = Settings(database_url="sqlite:///:memory:", sql_echo=False, log_level="INFO")


def test_engine_creates_tables() -> None:
    engine = create_db_engine(IN_MEMORY)
    assert "games" in inspect(engine).get_table_names()
    engine.dispose()


def test_get_db_closes_session() -> None:
    engine = create_db_engine(IN_MEMORY)
    session_local = session_factory(engine)

    generator = get_db(session_local)
    db = next(generator)
    assert isinstance(db, Session)

    generator.close()
    # a closed session has no transaction in progress
    assert not db.in_transaction()
    engine.dispose()
