"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from datetime import date
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_date(name: str, default: date) -> date:
    """Parse an ISO date from the environment, falling back to ``default``."""

    value = os.getenv(name)
    if not value:
        return default
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an ISO date (YYYY-MM-DD), got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "HomeBudget"
    DB_FILENAME = "homebudget.db"
    DEFAULT_FORTNIGHT_ANCHOR = date(2024, 1, 1)

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("HOMEBUDGET_DEV_MODE", default=True)
        self.LOG_LEVEL = os.getenv("HOMEBUDGET_LOG_LEVEL", "INFO").upper()
        self.DATABASE_URL = os.getenv("HOMEBUDGET_DATABASE_URL", self._build_sqlite_url())
        self.FORTNIGHT_ANCHOR = _env_date("HOMEBUDGET_FORTNIGHT_ANCHOR", self.DEFAULT_FORTNIGHT_ANCHOR)
        if self.FORTNIGHT_ANCHOR.weekday() != 0:
            raise ValueError("HOMEBUDGET_FORTNIGHT_ANCHOR must fall on a Monday.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        path = Path(os.getenv("HOMEBUDGET_DATA_DIR", "instance")).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {"pool_pre_ping": True}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Configuration for the test suite: in-memory database, quiet logs."""

    DEBUG = False
    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.DATABASE_URL = "sqlite://"
        self.DEV_MODE = False
