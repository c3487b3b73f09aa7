# app.py
# -------------------------------------------------
# People table backed by MariaDB (or SQLite for local use).
# - Add a person (first/last name required, birth date optional, never future)
# - Delete selected rows
# - Restore the four seed people in one transaction
# - Store calls run on a worker; results are applied on the script thread
#
# Run:  streamlit run app.py

from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime
import logging

import streamlit as st

from peopleview.config import ConfigurationError, load_settings
from peopleview.controller import PeopleController
from peopleview.database import ConnectionManager, ensure_db
from peopleview.logs import setup_logging
from peopleview.messages import get_text
from peopleview.store import PersonStore, people_frame
from peopleview.tasks import TaskCoordinator

logger = logging.getLogger(__name__)

MIN_BIRTH_DATE = date(1900, 1, 1)

st.set_page_config(page_title="People View", page_icon="👥", layout="centered")

# =========================
# Bootstrap (once per session)
# =========================
@st.cache_resource
def get_worker_pool() -> ThreadPoolExecutor:
    """One worker pool for every session of this server process."""
    return ThreadPoolExecutor(max_workers=4, thread_name_prefix="peopleview")


def get_controller() -> PeopleController:
    if "controller" in st.session_state:
        return st.session_state["controller"]

    setup_logging()
    try:
        settings = load_settings()
    except ConfigurationError as e:
        st.error(f"Configuration error: {e}")
        st.stop()

    manager = ConnectionManager.from_settings(settings)
    try:
        ensure_db(manager)
    except Exception as e:
        logger.exception("Database bootstrap failed")
        st.error(f"Database unavailable: {e}")
        st.stop()

    controller = PeopleController(
        PersonStore(manager),
        coordinator=TaskCoordinator(executor=get_worker_pool()),
        locale=settings.locale,
        simulate_delay_ms=settings.simulate_delay_ms,
    )
    controller.load()
    controller.wait()
    st.session_state["controller"] = controller
    # a failed first load still has to be shown
    st.session_state["shown_notices"] = 0
    return controller


def run_and_wait(controller: PeopleController, dispatched: bool) -> None:
    if dispatched:
        with st.spinner("Working…"):
            controller.wait()
    st.rerun()


def show_new_notices(controller: PeopleController) -> None:
    shown = st.session_state.get("shown_notices", 0)
    for notice in controller.notices[shown:]:
        if notice.level == "success":
            st.success(notice.text)
        elif notice.level == "error":
            st.error(notice.text)
        else:
            st.info(notice.text)
    st.session_state["shown_notices"] = len(controller.notices)


# =========================
# UI
# =========================
controller = get_controller()
t = lambda key: get_text(key, controller.locale)

st.title(f"👥 {t('title')}")

# ---- Add person
with st.expander("➕ Add person", expanded=True):
    with st.form("new_person", clear_on_submit=True):
        c1, c2 = st.columns(2)
        first_name = c1.text_input("First name *")
        last_name  = c2.text_input("Last name *")
        birth_date = st.date_input("Birth date", value=None, min_value=MIN_BIRTH_DATE)

        if st.form_submit_button("Add", disabled="add" in controller.busy):
            run_and_wait(controller, controller.add_person(first_name, last_name, birth_date))

st.divider()

# ---- Grid, delete, restore, export
people_df = people_frame(controller.people)
people_df.insert(0, "select", False)

edited = st.data_editor(
    people_df,
    use_container_width=True,
    num_rows="fixed",
    column_config={
        "select": st.column_config.CheckboxColumn("", width="small"),
        "personId": st.column_config.NumberColumn("ID", width="small"),
        "firstName": "First name",
        "lastName": "Last name",
        "birthDate": "Birth date",
    },
    disabled=["personId", "firstName", "lastName", "birthDate"],
    hide_index=True,
    key="people_grid",
)
selected_ids = [] if edited.empty else [int(i) for i in edited.loc[edited["select"].astype(bool), "personId"]]

b1, b2, b3 = st.columns(3)
if b1.button("🗑️ Delete selected", disabled="delete" in controller.busy):
    run_and_wait(controller, controller.delete_by_ids(selected_ids))
if b2.button("♻️ Restore basic data", disabled="restore" in controller.busy):
    run_and_wait(controller, controller.restore())

ts = datetime.now().strftime("%Y%m%d_%H%M%S")
b3.download_button(
    "⬇️ Download CSV",
    data=people_frame(controller.people).to_csv(index=False),
    file_name=f"people_{ts}.csv",
    mime="text/csv",
)

show_new_notices(controller)
st.caption(f"{len(controller.people)} people")
