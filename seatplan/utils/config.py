"""Runtime settings resolved from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class Settings:
    app_name: str
    app_version: str
    log_level: str
    host: str
    port: int
    default_algorithm: str
    report_date_format: str


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build settings once per process; tests derive variants with replace()."""
    return Settings(
        app_name=os.getenv("SEATPLAN_APP_NAME", "Exam Seating Planner"),
        app_version=os.getenv("SEATPLAN_APP_VERSION", "1.0.0"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        host=os.getenv("SEATPLAN_HOST", "127.0.0.1"),
        port=_env_int("SEATPLAN_PORT", 8000),
        default_algorithm=os.getenv("SEATPLAN_DEFAULT_ALGORITHM", "greedy"),
        report_date_format=os.getenv("SEATPLAN_REPORT_DATE_FORMAT", "%d/%m/%Y"),
    )
