"""
UI-agnostic controller: turns user actions into background store calls and
keeps the displayed list of people in step with the results.

`people` and `notices` are only touched from callbacks run by
`TaskCoordinator.process_completions()`, i.e. on the UI thread.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import date
import logging
import time

from .messages import get_text
from .person import IdSequence, Person, validate_form
from .store import OpResult, PersonStore
from .tasks import TaskCoordinator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notice:
    level: str  # "success" | "error" | "info"
    text: str


class PeopleController:
    def __init__(self, store: PersonStore, coordinator: TaskCoordinator | None = None,
                 locale: str = "en", simulate_delay_ms: int = 0):
        self.store = store
        self.coordinator = coordinator or TaskCoordinator()
        self.locale = locale
        self.simulate_delay_ms = simulate_delay_ms
        self.ids = IdSequence()
        self.people: list[Person] = []
        self.notices: list[Notice] = []
        self.busy: set[str] = set()

    # ---- helpers
    @property
    def last_notice(self) -> Notice | None:
        return self.notices[-1] if self.notices else None

    def _t(self, key: str, **fmt) -> str:
        return get_text(key, self.locale, **fmt)

    def _notify(self, level: str, text: str) -> None:
        log = logger.error if level == "error" else logger.info
        log(text)
        self.notices.append(Notice(level, text))

    def _pause(self) -> None:
        if self.simulate_delay_ms:
            time.sleep(self.simulate_delay_ms / 1000)

    def _dispatch(self, action: str, work, on_success, error_key: str) -> bool:
        if action in self.busy:
            logger.debug("%s already running, ignoring", action)
            return False
        self.busy.add(action)

        def done(result):
            self.busy.discard(action)
            on_success(result)

        def failed(exc):
            self.busy.discard(action)
            logger.error("%s failed: %s", action, exc, exc_info=exc)
            self._notify("error", self._t(error_key))

        self.coordinator.submit(work, done, failed)
        return True

    def wait(self, timeout: float | None = None) -> int:
        """Block the caller until dispatched work is applied."""
        return self.coordinator.process_completions(wait=True, timeout=timeout)

    # ---- actions
    def load(self) -> bool:
        def work():
            self._pause()
            return self.store.list_all()

        def apply(result: OpResult):
            self.people = list(result.value or [])
            if result.failed:
                self._notify("error", self._t("errorLoad"))

        return self._dispatch("load", work, apply, "errorLoad")

    def add_person(self, first_name: str | None, last_name: str | None,
                   birth_date: date | None) -> bool:
        ok, key = validate_form(first_name, last_name, birth_date)
        if not ok:
            text = self._t(key) + (str(birth_date) if key == "errorBirthDate" else "")
            self._notify("error", text)
            return False

        person = Person(first_name.strip(), last_name.strip(), birth_date, ids=self.ids)

        def work():
            self._pause()
            inserted = self.store.insert(person)
            # reload so the grid shows the id the database assigned
            return inserted, (self.store.list_all() if inserted.ok else None)

        def apply(outcome):
            inserted, listed = outcome
            if not inserted.ok:
                self._notify("error", self._t("errorAddPerson"))
                return
            self._notify("success", self._t("successAddPerson"))
            # only rows carrying a database id go into the grid
            if listed is not None and listed.ok:
                self.people = listed.value
            else:
                self._notify("error", self._t("errorLoad"))

        return self._dispatch("add", work, apply, "errorAddPerson")

    def delete_people(self, selected: list[Person]) -> bool:
        if not selected:
            self._notify("info", self._t("errorNoSelection"))
            return False
        targets = list(selected)
        logger.info("Deleting %d people", len(targets))

        def work():
            removed = []
            for person in targets:
                self._pause()
                if self.store.delete(person).ok:
                    removed.append(person.id)
            return removed

        def apply(removed_ids):
            if not removed_ids:
                self._notify("error", self._t("errorDeleteRows"))
                return
            gone = set(removed_ids)
            self.people = [p for p in self.people if p.id not in gone]
            self._notify("success", self._t("deleteSuccessMessage",
                                            deleted=len(removed_ids), remaining=len(self.people)))

        return self._dispatch("delete", work, apply, "errorDeleteRows")

    def delete_by_ids(self, ids) -> bool:
        wanted = set(ids)
        return self.delete_people([p for p in self.people if p.id in wanted])

    def restore(self) -> bool:
        previous = len(self.people)

        def work():
            self._pause()
            restored = self.store.restore_basic_data()
            return restored, (self.store.list_all() if restored.ok else None)

        def apply(outcome):
            restored, listed = outcome
            if not restored.ok:
                if restored.failed:
                    self._notify("error", self._t("errorRestore2") + str(restored.error))
                else:
                    self._notify("error", self._t("errorRestore"))
                return
            if listed is not None:
                self.people = list(listed.value or [])
            self._notify("success", "\n".join([
                self._t("restoreSuccessTitle"),
                self._t("restoreSuccessPrevious", count=previous),
                self._t("restoreSuccessNow", count=len(self.people)),
                self._t("restoreSuccessData"),
            ]))

        return self._dispatch("restore", work, apply, "errorRestore")

    def close(self) -> None:
        self.coordinator.shutdown()
