from dataclasses import dataclass
import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from tasktrack.constants import STORAGE_KEY

load_dotenv()


@dataclass(frozen=True)
class Settings:
    db_path: Path
    timezone: str
    storage_key: str
    store_timeout: float
    log_level: str


def load_settings() -> Settings:
    db_raw = os.getenv("DB_PATH", "data/tasks.db").strip()
    tz = os.getenv("TZ", "Europe/Helsinki").strip()
    key = os.getenv("STORAGE_KEY", STORAGE_KEY).strip()
    timeout_raw = os.getenv("STORE_TIMEOUT", "5.0").strip()
    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()

    if not db_raw:
        raise RuntimeError("DB_PATH is empty in .env")
    if not key:
        raise RuntimeError("STORAGE_KEY is empty in .env")
    try:
        ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError):
        raise RuntimeError(f"TZ {tz!r} is not a known timezone") from None
    try:
        timeout = float(timeout_raw)
    except ValueError:
        raise RuntimeError(f"STORE_TIMEOUT must be a number, got {timeout_raw!r}") from None
    if timeout <= 0:
        raise RuntimeError("STORE_TIMEOUT must be positive")
    if log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise RuntimeError(f"LOG_LEVEL {log_level!r} is not a logging level")

    # db_path stays relative; main() creates its parent directory
    return Settings(
        db_path=Path(db_raw),
        timezone=tz,
        storage_key=key,
        store_timeout=timeout,
        log_level=log_level,
    )
