from __future__ import annotations

import os
from pathlib import Path

# backend/syncnotes/config.py -> repository root
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[2] / "data"

DEFAULT_BASE_URL = "http://localhost:3000"


def _getenv_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return int(value)


def _getenv_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return float(value)


def data_dir() -> Path:
    return Path(os.getenv("APP_DATA_DIR", str(DEFAULT_DATA_DIR)))


def note_ttl_seconds() -> int:
    # 28 days
    return _getenv_int("NOTE_TTL_SECONDS", 28 * 24 * 3600)


def request_ttl_seconds() -> int:
    return _getenv_int("REQUEST_TTL_SECONDS", 3600)


def gc_interval_seconds() -> int:
    return _getenv_int("GC_INTERVAL_SECONDS", 300)


def base_url() -> str:
    return os.getenv("SYNCNOTES_BASE_URL", DEFAULT_BASE_URL).rstrip("/")


def timeout_seconds() -> float:
    return _getenv_float("SYNCNOTES_TIMEOUT_SECONDS", 10.0)
