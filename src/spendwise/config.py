"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from decimal import Decimal
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from .models.money import STORED_PLACES as MAX_STORED_PLACES

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, failing loudly on junk."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


def _env_decimal(name: str, default: str) -> Decimal:
    value = os.getenv(name) or default
    try:
        return Decimal(value.strip())
    except ArithmeticError as exc:
        raise ValueError(f"{name} must be a number, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "Spendwise"
    DB_FILENAME = "spendwise.db"

    def __init__(self, data_dir: Path | None = None) -> None:
        self.DATA_DIR = self._resolve_data_dir(data_dir)
        self.DEV_MODE = _env_bool("SPENDWISE_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("SPENDWISE_DATABASE_URL", self._build_sqlite_url())
        self.TIMEZONE = os.getenv("SPENDWISE_TIMEZONE", "UTC")
        self.CURRENCY_PLACES = _env_int("SPENDWISE_CURRENCY_PLACES", 2)
        self.MAX_RANGE_BUCKETS = _env_int("SPENDWISE_MAX_RANGE_BUCKETS", 3660)
        self.RATING_MIN = _env_decimal("SPENDWISE_RATING_MIN", "0")
        self.RATING_MAX = _env_decimal("SPENDWISE_RATING_MAX", "5")
        self.RATING_PLACES = _env_int("SPENDWISE_RATING_PLACES", 2)
        self._validate()

    def _validate(self) -> None:
        try:
            ZoneInfo(self.TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"SPENDWISE_TIMEZONE is not a known zone: {self.TIMEZONE!r}") from exc
        if not 0 <= self.CURRENCY_PLACES <= MAX_STORED_PLACES:
            raise ValueError(f"SPENDWISE_CURRENCY_PLACES must be between 0 and {MAX_STORED_PLACES}.")
        if not 0 <= self.RATING_PLACES <= MAX_STORED_PLACES:
            raise ValueError(f"SPENDWISE_RATING_PLACES must be between 0 and {MAX_STORED_PLACES}.")
        if self.MAX_RANGE_BUCKETS < 1:
            raise ValueError("SPENDWISE_MAX_RANGE_BUCKETS must be at least 1.")
        if self.RATING_MIN >= self.RATING_MAX:
            raise ValueError("SPENDWISE_RATING_MIN must be below SPENDWISE_RATING_MAX.")

    def _resolve_data_dir(self, data_dir: Path | None = None) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = data_dir or os.getenv("SPENDWISE_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if not self.DATABASE_URL.startswith("sqlite"):
            return {}
        return {"connect_args": {"check_same_thread": False}}

    def timezone(self) -> ZoneInfo:
        """Zone used to decide which calendar day an instant belongs to."""

        return ZoneInfo(self.TIMEZONE)

    def money_quantum(self) -> Decimal:
        """Smallest currency unit, e.g. ``Decimal("0.01")`` for cents."""

        return Decimal(1).scaleb(-self.CURRENCY_PLACES)

    def rating_scale(self):
        """Build the rating scale described by the RATING_* settings."""

        from .services.ratings import RatingScale

        return RatingScale(
            minimum=self.RATING_MIN,
            maximum=self.RATING_MAX,
            places=self.RATING_PLACES,
        )


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Configuration for the test suite: throwaway database, UTC calendar."""

    __test__ = False  # keep pytest from collecting this class

    DEBUG = False
    TESTING = True

    def __init__(self, data_dir: Path | None = None) -> None:
        super().__init__(data_dir)
        self.DATABASE_URL = f"sqlite:///{self.DATA_DIR / 'test.db'}"
        self.TIMEZONE = "UTC"
