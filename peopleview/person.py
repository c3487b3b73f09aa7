"""
Person entity and its validation rules.

Setters never raise: an invalid value is rejected, logged as a warning and
reported back through a FieldChange so the caller can tell what happened.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import date
import itertools
import logging
import threading

logger = logging.getLogger(__name__)


class IdSequence:
    """Thread-safe counter handing out in-memory person ids."""

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            return next(self._counter)


DEFAULT_SEQUENCE = IdSequence()


@dataclass(frozen=True)
class FieldChange:
    accepted: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.accepted


ACCEPTED = FieldChange(True)


def is_valid_birth_date(value: date | None, today: date | None = None) -> bool:
    """A missing birth date is fine; a present one cannot be in the future."""
    if value is None:
        return True
    return value <= (today or date.today())


def _clean(value) -> str:
    return (value or "").strip()


def validate_form(first_name, last_name, birth_date: date | None) -> tuple[bool, str | None]:
    """
    Check raw form input before a Person is built.
    Returns (ok, message_key) where message_key names the first failing rule.
    """
    if not _clean(first_name):
        return False, "errorMissingFirstName"
    if not _clean(last_name):
        return False, "errorMissingLastName"
    if not is_valid_birth_date(birth_date):
        return False, "errorBirthDate"
    return True, None


class Person:
    def __init__(self, first_name: str | None = None, last_name: str | None = None,
                 birth_date: date | None = None, *, person_id: int | None = None,
                 ids: IdSequence | None = None):
        self._id = person_id if person_id is not None else (ids or DEFAULT_SEQUENCE).next()
        self._first_name: str | None = None
        self._last_name: str | None = None
        self._birth_date: date | None = None
        self.set_first_name(first_name)
        self.set_last_name(last_name)
        self.set_birth_date(birth_date)

    @property
    def id(self) -> int:
        return self._id

    @property
    def first_name(self) -> str | None:
        return self._first_name

    @property
    def last_name(self) -> str | None:
        return self._last_name

    @property
    def birth_date(self) -> date | None:
        return self._birth_date

    def set_id(self, person_id: int) -> FieldChange:
        if isinstance(person_id, int) and person_id > 0:
            self._id = person_id
            return ACCEPTED
        logger.warning("Invalid person id %r, keeping %s", person_id, self._id)
        return FieldChange(False, "invalid id")

    def _set_name(self, attr: str, label: str, value) -> FieldChange:
        cleaned = _clean(value)
        if cleaned:
            setattr(self, attr, cleaned)
            return ACCEPTED
        if getattr(self, attr) is not None:
            logger.warning("Refusing to blank the %s of person %s", label, self._id)
            return FieldChange(False, f"empty {label}")
        # still unset: leave it that way
        return ACCEPTED

    def set_first_name(self, value: str | None) -> FieldChange:
        return self._set_name("_first_name", "first name", value)

    def set_last_name(self, value: str | None) -> FieldChange:
        return self._set_name("_last_name", "last name", value)

    def set_birth_date(self, value: date | None, today: date | None = None) -> FieldChange:
        if is_valid_birth_date(value, today):
            self._birth_date = value
            return ACCEPTED
        logger.warning("Birth date %s is in the future, keeping %s for person %s",
                       value, self._birth_date, self._id)
        return FieldChange(False, "birth date in the future")

    def is_valid_person(self) -> bool:
        return (
            bool(_clean(self._first_name))
            and bool(_clean(self._last_name))
            and is_valid_birth_date(self._birth_date)
        )

    def __repr__(self) -> str:
        return (f"Person(id={self._id!r}, first_name={self._first_name!r}, "
                f"last_name={self._last_name!r}, birth_date={self._birth_date!r})")

    def __str__(self) -> str:
        return (f"Person ID: {self._id}, First Name: {self._first_name}, "
                f"Last Name: {self._last_name}, Birth Date: {self._birth_date}")
