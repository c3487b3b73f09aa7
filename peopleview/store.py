"""
Data access for the `personas` table.

Each operation opens its own connection and returns an OpResult instead of
raising: `error` is only set when the database call itself failed, so
"matched nothing" and "broke" stay distinguishable.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from typing import Any
import logging

import pandas as pd
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from . import database
from .database import ConnectionManager
from .person import Person

logger = logging.getLogger(__name__)

SELECT_ALL = text("SELECT personId, firstName, lastName, birthDate FROM personas")
INSERT_ONE = text("INSERT INTO personas (firstName, lastName, birthDate) VALUES (:first, :last, :born)")
DELETE_ONE = text("DELETE FROM personas WHERE personId = :id")
DELETE_ALL = text("DELETE FROM personas")

FRAME_COLUMNS = ["personId", "firstName", "lastName", "birthDate"]


@dataclass
class OpResult:
    ok: bool
    message: str
    rows: int = 0
    value: Any = None
    error: Exception | None = field(default=None, repr=False)

    @property
    def failed(self) -> bool:
        """True when the database call raised, as opposed to matching no rows."""
        return self.error is not None

    def __bool__(self) -> bool:
        return self.ok


def parse_birth_date(raw: str | None) -> date | None:
    if raw is None or not str(raw).strip():
        return None
    return date.fromisoformat(str(raw).strip())


def format_birth_date(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None


def row_to_person(row) -> Person:
    return Person(row.firstName, row.lastName, parse_birth_date(row.birthDate), person_id=row.personId)


def people_frame(people: list[Person]) -> pd.DataFrame:
    """Grid/CSV view of the people, one row each, store column names."""
    df = pd.DataFrame(
        [(p.id, p.first_name, p.last_name, format_birth_date(p.birth_date)) for p in people],
        columns=FRAME_COLUMNS,
        dtype=object,
    )
    # object columns keep a missing birth date as None
    df["personId"] = df["personId"].astype("int64")
    return df


class PersonStore:
    def __init__(self, manager: ConnectionManager):
        self.manager = manager

    def list_all(self) -> OpResult:
        logger.debug("Loading people from the database")
        try:
            with self.manager.connect() as conn:
                rows = conn.execute(SELECT_ALL).fetchall()
            people = [row_to_person(r) for r in rows]
        except (SQLAlchemyError, ValueError) as e:
            logger.exception("Loading people failed")
            return OpResult(False, f"Load failed: {e}", value=[], error=e)
        logger.debug("Loaded %d people", len(people))
        return OpResult(True, f"Loaded {len(people)} people.", rows=len(people), value=people)

    def insert(self, person: Person) -> OpResult:
        logger.debug("Inserting %s", person)
        if not person.is_valid_person():
            logger.warning("Refusing to insert invalid person: %s", person)
            return OpResult(False, "First name and last name are required; birth date cannot be in the future.")
        params = {
            "first": person.first_name,
            "last": person.last_name,
            "born": format_birth_date(person.birth_date),
        }
        try:
            with self.manager.begin() as conn:
                inserted = conn.execute(INSERT_ONE, params).rowcount
        except SQLAlchemyError as e:
            logger.exception("Insert failed for %s", person)
            return OpResult(False, f"Insert failed: {e}", error=e)
        if inserted == 1:
            logger.info("Person added: %s", person)
            return OpResult(True, "Person added.", rows=inserted)
        logger.warning("Insert of %s affected %d rows", person, inserted)
        return OpResult(False, f"Insert affected {inserted} rows.", rows=inserted)

    def delete(self, person: Person) -> OpResult:
        logger.debug("Deleting %s", person)
        try:
            with self.manager.begin() as conn:
                deleted = conn.execute(DELETE_ONE, {"id": person.id}).rowcount
        except SQLAlchemyError as e:
            logger.exception("Delete failed for person id %s", person.id)
            return OpResult(False, f"Delete failed: {e}", error=e)
        if deleted == 1:
            logger.info("Person deleted: %s", person)
            return OpResult(True, "Person deleted.", rows=deleted)
        logger.warning("No person with id %s to delete", person.id)
        return OpResult(False, f"No person with id {person.id}.", rows=deleted)

    def restore_basic_data(self) -> OpResult:
        """
        Replace the whole table with the seed people in one transaction.
        Any failure rolls back and leaves the previous contents in place.
        """
        logger.info("Restoring basic data")
        expected = len(database.SEED_PEOPLE)
        try:
            with self.manager.begin() as conn:
                removed = conn.execute(DELETE_ALL).rowcount
                logger.debug("Removed %d existing rows", removed)
                database.reset_sequence_in_transaction(conn)
                inserted = database.insert_seed_rows(conn)
                if inserted != expected:
                    raise RuntimeError(f"expected {expected} seed rows, inserted {inserted}")
        except (SQLAlchemyError, RuntimeError) as e:
            logger.exception("Restore failed, transaction rolled back")
            return OpResult(False, f"Restore failed: {e}", error=e)

        try:
            database.reset_sequence_after_commit(self.manager)
        except SQLAlchemyError:
            logger.warning("Could not reset the id sequence after restore", exc_info=True)

        logger.info("Restore complete: %d people inserted", inserted)
        return OpResult(True, f"Restored {inserted} people.", rows=inserted)
