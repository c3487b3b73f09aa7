"""Tests for PersonStore against a temporary SQLite database."""

from datetime import date

import pytest
from sqlalchemy import text

from peopleview import database
from peopleview.database import ConnectionManager, ensure_db
from peopleview.person import Person
from peopleview.store import INSERT_ONE, PersonStore, people_frame

SEED_ROWS = [
    (1, "John", "Lennon", "1940-10-09"),
    (2, "Paul", "McCartney", "1942-06-18"),
    (3, "George", "Harrison", "1943-02-25"),
    (4, "Ringo", "Starr", "1940-07-07"),
]


def fields(person):
    return (person.first_name, person.last_name, person.birth_date)


class TestBootstrap:
    def test_fresh_table_is_seeded(self, tmp_path):
        mgr = ConnectionManager.from_url(f"sqlite:///{tmp_path / 'fresh.sqlite3'}")
        ensure_db(mgr)
        result = PersonStore(mgr).list_all()
        assert [(p.id, p.first_name) for p in result.value] == [(r[0], r[1]) for r in SEED_ROWS]

    def test_existing_rows_are_not_reseeded(self, manager, store, table_rows):
        store.insert(Person("Yoko", "Ono", date(1933, 2, 18)))
        ensure_db(manager)
        assert len(table_rows()) == 1


class TestListAll:
    def test_empty_table(self, store):
        result = store.list_all()
        assert result.ok
        assert result.value == []

    def test_blank_birth_date_is_none(self, manager, store):
        with manager.begin() as conn:
            conn.execute(text("INSERT INTO personas (firstName, lastName, birthDate) VALUES ('A', 'B', '')"))
        [person] = store.list_all().value
        assert person.birth_date is None

    def test_failure_is_reported_not_raised(self, tmp_path):
        # no schema: the SELECT itself fails
        mgr = ConnectionManager.from_url(f"sqlite:///{tmp_path / 'empty.sqlite3'}")
        result = PersonStore(mgr).list_all()
        assert not result.ok
        assert result.failed
        assert result.value == []


class TestInsert:
    def test_round_trip(self, store):
        person = Person("George", "Harrison", date(1943, 2, 25))
        result = store.insert(person)
        assert result.ok
        assert result.rows == 1
        [loaded] = store.list_all().value
        assert fields(loaded) == ("George", "Harrison", date(1943, 2, 25))

    def test_round_trip_without_birth_date(self, store, table_rows):
        store.insert(Person("Stuart", "Sutcliffe", None))
        assert table_rows()[0][3] is None
        [loaded] = store.list_all().value
        assert loaded.birth_date is None

    def test_store_assigns_id(self, store):
        store.insert(Person("Pete", "Best", person_id=999))
        [loaded] = store.list_all().value
        assert loaded.id != 999

    def test_invalid_person_is_rejected(self, store, table_rows):
        result = store.insert(Person("Pete", None))
        assert not result.ok
        assert not result.failed
        assert table_rows() == []

    def test_database_error_is_reported(self, store, manager):
        with manager.begin() as conn:
            conn.exec_driver_sql("DROP TABLE personas")
        result = store.insert(Person("Pete", "Best"))
        assert not result.ok
        assert result.failed


class TestDelete:
    def test_missing_id_is_noop(self, store, table_rows):
        store.insert(Person("John", "Lennon", date(1940, 10, 9)))
        before = table_rows()
        result = store.delete(Person("Ghost", "Person", person_id=12345))
        assert not result.ok
        assert not result.failed
        assert result.rows == 0
        assert table_rows() == before

    def test_insert_three_delete_one(self, store):
        for first, last, born in [("John", "Lennon", date(1940, 10, 9)),
                                  ("Paul", "McCartney", date(1942, 6, 18)),
                                  ("George", "Harrison", None)]:
            assert store.insert(Person(first, last, born))
        people = store.list_all().value
        assert store.delete(people[1]).ok

        remaining = store.list_all().value
        assert [fields(p) for p in remaining] == [
            ("John", "Lennon", date(1940, 10, 9)),
            ("George", "Harrison", None),
        ]
        assert [p.id for p in remaining] == [people[0].id, people[2].id]

    def test_deleting_twice(self, store):
        store.insert(Person("John", "Lennon"))
        [person] = store.list_all().value
        assert store.delete(person).ok
        again = store.delete(person)
        assert not again.ok and not again.failed


class TestRestore:
    def test_from_empty_table(self, store, table_rows):
        result = store.restore_basic_data()
        assert result.ok
        assert result.rows == 4
        assert table_rows() == SEED_ROWS

    def test_from_many_rows(self, manager, store, table_rows):
        rows = [{"first": f"F{i}", "last": f"L{i}", "born": None} for i in range(2000)]
        with manager.begin() as conn:
            conn.execute(INSERT_ONE, rows)
        assert store.restore_basic_data().ok
        assert table_rows() == SEED_ROWS

    def test_sequence_restarts(self, store):
        for i in range(10):
            store.insert(Person(f"F{i}", f"L{i}"))
        store.restore_basic_data()
        store.insert(Person("Billy", "Preston"))
        ids = [p.id for p in store.list_all().value]
        assert ids == [1, 2, 3, 4, 5]

    def test_failure_rolls_back(self, store, table_rows, monkeypatch):
        store.insert(Person("Yoko", "Ono", date(1933, 2, 18)))
        store.insert(Person("Linda", "McCartney"))
        before = table_rows()

        broken = database.SEED_PEOPLE[:3] + [(None, "Starr", "1940-07-07")]
        monkeypatch.setattr(database, "SEED_PEOPLE", broken)
        result = store.restore_basic_data()

        assert not result.ok
        assert result.failed
        assert table_rows() == before


def test_people_frame():
    people = [Person("John", "Lennon", date(1940, 10, 9), person_id=1),
              Person("Paul", "McCartney", None, person_id=2)]
    df = people_frame(people)
    assert list(df.columns) == ["personId", "firstName", "lastName", "birthDate"]
    assert df.iloc[0].tolist() == [1, "John", "Lennon", "1940-10-09"]
    assert df.iloc[1]["birthDate"] is None
    assert df["birthDate"].dtype == object
    assert df["personId"].dtype == "int64"


def test_people_frame_empty():
    assert people_frame([]).empty
