"""People View - a people table persisted to MariaDB/SQLite."""

__version__ = "1.0.0"

from .config import ConfigurationError, Settings, load_settings
from .controller import Notice, PeopleController
from .database import ConnectionManager, ensure_db
from .person import FieldChange, IdSequence, Person, is_valid_birth_date, validate_form
from .store import OpResult, PersonStore, people_frame

__all__ = [
    "ConfigurationError", "Settings", "load_settings",
    "Notice", "PeopleController",
    "ConnectionManager", "ensure_db",
    "FieldChange", "IdSequence", "Person", "is_valid_birth_date", "validate_form",
    "OpResult", "PersonStore", "people_frame",
]
