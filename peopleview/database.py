"""
Connection management and schema bootstrap for the `personas` table.

No connection is kept between operations: the engine uses NullPool, so every
`connect()` / `begin()` opens a fresh DB-API connection and closes it on exit.
"""

from __future__ import annotations
from contextlib import contextmanager
from typing import Iterator
import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import NullPool

from .config import Settings

logger = logging.getLogger(__name__)

TABLE = "personas"

SEED_PEOPLE = [
    ("John",   "Lennon",    "1940-10-09"),
    ("Paul",   "McCartney", "1942-06-18"),
    ("George", "Harrison",  "1943-02-25"),
    ("Ringo",  "Starr",     "1940-07-07"),
]

SCHEMA_SQL_SQLITE = """
CREATE TABLE IF NOT EXISTS personas (
  personId  INTEGER PRIMARY KEY AUTOINCREMENT,
  firstName VARCHAR(100) NOT NULL,
  lastName  VARCHAR(100) NOT NULL,
  birthDate VARCHAR(100) NULL
);
"""

SCHEMA_SQL_MYSQL = """
CREATE TABLE IF NOT EXISTS personas (
  personId  INT AUTO_INCREMENT NOT NULL,
  firstName VARCHAR(100) NOT NULL,
  lastName  VARCHAR(100) NOT NULL,
  birthDate VARCHAR(100) NULL,
  CONSTRAINT personas_pk PRIMARY KEY (personId)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
"""

MYSQL_DIALECTS = ("mysql", "mariadb")


class ConnectionManager:
    """Hands out one scoped connection per store operation."""

    def __init__(self, engine: Engine):
        self.engine = engine

    @classmethod
    def from_url(cls, url) -> "ConnectionManager":
        return cls(create_engine(url, poolclass=NullPool, future=True))

    @classmethod
    def from_settings(cls, settings: Settings) -> "ConnectionManager":
        return cls.from_url(settings.url())

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    @contextmanager
    def connect(self) -> Iterator[Connection]:
        conn = self.engine.connect()
        logger.debug("Connection opened to %s", self.engine.url.database)
        try:
            yield conn
        finally:
            conn.close()
            logger.debug("Connection closed")

    @contextmanager
    def begin(self) -> Iterator[Connection]:
        """Connection inside a transaction: commit on success, rollback on error."""
        with self.connect() as conn:
            with conn.begin():
                yield conn

    def dispose(self) -> None:
        self.engine.dispose()


# =========================
# Statements shared by bootstrap and restore
# =========================
def insert_seed_rows(conn: Connection) -> int:
    """Insert the seed people with ids 1..n in a single statement; returns rows inserted."""
    placeholders = []
    params = {}
    for i, (first, last, born) in enumerate(SEED_PEOPLE):
        placeholders.append(f"(:id{i}, :f{i}, :l{i}, :b{i})")
        params.update({f"id{i}": i + 1, f"f{i}": first, f"l{i}": last, f"b{i}": born})
    sql = text(
        "INSERT INTO personas (personId, firstName, lastName, birthDate) VALUES "
        + ", ".join(placeholders)
    )
    return conn.execute(sql, params).rowcount


def reset_sequence_in_transaction(conn: Connection) -> None:
    """Reset the identity counter where the engine allows it inside a transaction."""
    if conn.dialect.name == "sqlite":
        has_sequence = conn.exec_driver_sql(
            "SELECT 1 FROM sqlite_master WHERE type='table' AND name='sqlite_sequence'"
        ).fetchone()
        if has_sequence:
            conn.execute(text("DELETE FROM sqlite_sequence WHERE name = :t"), {"t": TABLE})


def reset_sequence_after_commit(manager: ConnectionManager) -> None:
    # ALTER TABLE commits implicitly on MariaDB/MySQL, so it runs after the data commit
    if manager.dialect in MYSQL_DIALECTS:
        with manager.connect() as conn:
            conn.exec_driver_sql(f"ALTER TABLE {TABLE} AUTO_INCREMENT = 1")


# =========================
# Bootstrap
# =========================
def ensure_db(manager: ConnectionManager, seed: bool = True) -> None:
    # 1) Table
    ddl = SCHEMA_SQL_MYSQL if manager.dialect in MYSQL_DIALECTS else SCHEMA_SQL_SQLITE
    with manager.begin() as conn:
        conn.exec_driver_sql(ddl)

    # 2) Seed a fresh install
    if not seed:
        return
    with manager.begin() as conn:
        count = conn.exec_driver_sql(f"SELECT COUNT(*) FROM {TABLE}").scalar()
        if count == 0:
            inserted = insert_seed_rows(conn)
            logger.info("Fresh %s table seeded with %d people", TABLE, inserted)
