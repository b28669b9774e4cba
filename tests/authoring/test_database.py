"""
Tests for database setup.
"""

from sqlalchemy import create_engine, inspect

from authoring import database
from authoring.database import init_db


class TestInitDb:
    """init_db creates the audit tables on the engine it is given."""

    def test_creates_audit_tables(self, tmp_path):
        engine = create_engine(f"sqlite:///{tmp_path / 'audit.db'}")
        init_db(engine)

        assert {"suggestion_logs", "suggestion_decisions"} <= set(inspect(engine).get_table_names())
        engine.dispose()

    def test_is_idempotent(self, tmp_path):
        engine = create_engine(f"sqlite:///{tmp_path / 'audit.db'}")
        init_db(engine)
        init_db(engine)
        assert "suggestion_logs" in inspect(engine).get_table_names()
        engine.dispose()

    def test_sessions_come_from_the_session_factory(self):
        assert not hasattr(database, "get_db")
        assert database.SessionLocal.kw["bind"] is database.engine
