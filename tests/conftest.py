"""Shared fixtures: a throwaway SQLite database per test."""

import pytest
from sqlalchemy import text

from peopleview.database import ConnectionManager, ensure_db
from peopleview.store import PersonStore


@pytest.fixture
def manager(tmp_path):
    """Connection manager on an empty, schema-only database."""
    mgr = ConnectionManager.from_url(f"sqlite:///{tmp_path / 'people.sqlite3'}")
    ensure_db(mgr, seed=False)
    yield mgr
    mgr.dispose()


@pytest.fixture
def store(manager):
    return PersonStore(manager)


@pytest.fixture
def table_rows(manager):
    """Return the current table contents as (id, first, last, birth) tuples."""

    def _rows():
        with manager.connect() as conn:
            return [
                tuple(r)
                for r in conn.execute(
                    text("SELECT personId, firstName, lastName, birthDate FROM personas ORDER BY personId")
                )
            ]

    return _rows
