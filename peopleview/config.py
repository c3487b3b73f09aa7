"""Connection settings loaded from configuration.properties plus env overrides."""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import logging
import os

from dotenv import dotenv_values
from sqlalchemy.engine import URL

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "configuration.properties"
CONFIG_ENV_VAR  = "PEOPLEVIEW_CONFIG"
ENV_PREFIX      = "PEOPLEVIEW_"

REQUIRED_KEYS  = ("host", "port", "user", "pass", "database")
DEFAULT_DRIVER = "mariadb+pymysql"
DEFAULT_LOCALE = "en"


class ConfigurationError(RuntimeError):
    """Raised when the database parameters cannot be assembled."""


@dataclass(frozen=True)
class Settings:
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    driver: str = DEFAULT_DRIVER
    override_url: str | None = None
    locale: str = DEFAULT_LOCALE
    simulate_delay_ms: int = 0

    def url(self) -> URL | str:
        if self.override_url:
            return self.override_url
        return URL.create(
            self.driver,
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
        )


def config_path(path: str | os.PathLike | None = None) -> Path:
    if path:
        return Path(path)
    return Path(os.getenv(CONFIG_ENV_VAR) or CONFIG_FILENAME)


def _read_values(path: Path) -> dict[str, str]:
    values = {}
    if path.exists():
        values = {k: v for k, v in dotenv_values(path).items() if v is not None}
        logger.debug("Read %d configuration keys from %s", len(values), path)
    else:
        logger.warning("Configuration file %s not found, using environment only", path)
    for key in (*REQUIRED_KEYS, "driver", "url", "locale", "simulate_delay_ms"):
        env_value = os.getenv(ENV_PREFIX + key.upper())
        if env_value is not None:
            values[key] = env_value
    return {k.strip(): v.strip() for k, v in values.items() if v and v.strip()}


def _as_int(values: dict[str, str], key: str, default: int | None = None) -> int | None:
    raw = values.get(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"Configuration key '{key}' must be an integer, got {raw!r}") from None


def load_settings(path: str | os.PathLike | None = None) -> Settings:
    """
    Build Settings from the properties file and PEOPLEVIEW_* environment variables.
    A full `url` replaces the five connection keys; otherwise all of them are required.
    """
    values = _read_values(config_path(path))
    locale = values.get("locale", DEFAULT_LOCALE)
    delay = _as_int(values, "simulate_delay_ms", 0)

    if "url" in values:
        return Settings(override_url=values["url"], locale=locale, simulate_delay_ms=delay)

    missing = [k for k in REQUIRED_KEYS if k not in values]
    if missing:
        for key in missing:
            logger.error("Key '%s' is not available in %s", key, CONFIG_FILENAME)
        raise ConfigurationError(f"Missing configuration keys: {', '.join(missing)}")

    return Settings(
        host=values["host"],
        port=_as_int(values, "port"),
        user=values["user"],
        password=values["pass"],
        database=values["database"],
        driver=values.get("driver", DEFAULT_DRIVER),
        locale=locale,
        simulate_delay_ms=delay,
    )
