from __future__ import annotations

import pytest

from schoolassist.config import Settings
from schoolassist.db import Database, ExecuteResult
from schoolassist.db.init_db import init_db, reset_db
from schoolassist.models import Admin


def test_execute_returns_rows_and_results(db):
    inserted = db.execute(
        "INSERT INTO admins (first_name, last_name, created_at, updated_at) "
        "VALUES (:first, :last, CURRENT_TIMESTAMP, CURRENT_TIMESTAMP)",
        {"first": "Dana", "last": "Ruiz"},
    )

    assert isinstance(inserted, ExecuteResult)
    assert inserted.insert_id is not None
    assert inserted.affected_rows == 1

    rows = db.execute("SELECT first_name FROM admins WHERE id = :id", {"id": inserted.insert_id})
    assert rows == [{"first_name": "Dana"}]

    deleted = db.execute("DELETE FROM admins WHERE id = :id", {"id": 9999})
    assert deleted.affected_rows == 0


def test_run_in_transaction_commits(db):
    def work(session):
        session.add(Admin(first_name="Eli", last_name="Moss"))

    db.run_in_transaction(work)

    assert db.execute("SELECT COUNT(*) AS n FROM admins") == [{"n": 1}]


def test_run_in_transaction_rolls_back_on_error(db):
    def work(session):
        session.add(Admin(first_name="Eli", last_name="Moss"))
        session.flush()
        raise RuntimeError("abort")

    with pytest.raises(RuntimeError):
        db.run_in_transaction(work)

    assert db.execute("SELECT COUNT(*) AS n FROM admins") == [{"n": 0}]


def test_health_check(db):
    assert db.check_connection() is True

    health = db.health_check()

    assert health["is_connected"] is True
    assert health["response_time_ms"] >= 0
    assert health["query_stats"]["query_count"] >= 1


def test_from_settings_uses_database_url():
    settings = Settings(DATABASE_URL="sqlite://", DB_SLOW_QUERY_THRESHOLD=2.0)

    with Database.from_settings(settings) as database:
        assert database.url.get_backend_name() == "sqlite"
        assert database.slow_query_threshold == 2.0
        assert database.check_connection() is True


def test_init_db_is_idempotent_and_reset_clears_data(db, people):
    init_db(db)
    assert db.execute("SELECT COUNT(*) AS n FROM students") == [{"n": 2}]

    reset_db(db)

    assert db.execute("SELECT COUNT(*) AS n FROM students") == [{"n": 0}]
