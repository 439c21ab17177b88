from __future__ import annotations

import asyncio
import logging
import os

from tasktrack.config import Settings, load_settings
from tasktrack.domain.tasks.session import TaskSession
from tasktrack.domain.tasks.store import TaskStore
from tasktrack.infra.clock.system_clock import SystemClock
from tasktrack.infra.db.kv_sqlite import SqliteKeyValueStore
from tasktrack.infra.ids.timestamp_gen import TimestampIdGenerator
from tasktrack.infra.persistence.json_tasks import JsonTaskPersistence

logger = logging.getLogger(__name__)


async def build_session(settings: Settings) -> TaskSession:
    """Wire the sqlite-backed store, load the saved collection, return the session."""
    os.makedirs(os.path.dirname(settings.db_path) or ".", exist_ok=True)

    kv = SqliteKeyValueStore(str(settings.db_path), timeout=settings.store_timeout)
    await kv.init()

    clock = SystemClock(settings.timezone)
    persistence = JsonTaskPersistence(kv, key=settings.storage_key, timeout=settings.store_timeout)
    store = TaskStore(persistence, clock, TimestampIdGenerator(clock))
    await store.bootstrap()
    logger.debug("Session ready: %d task(s), today is %s in %s", len(store), clock.now().date(), clock.tz_name)
    return TaskSession(store, clock)


async def run() -> None:
    settings = load_settings()

    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - [PID:%(process)d] - %(message)s'
    )

    logger.info(f"Opening task store at {settings.db_path} (TZ={settings.timezone})")
    try:
        session = await build_session(settings)
    except Exception:
        logger.error("Task engine failed to start", exc_info=True)
        raise

    summary = session.compute_view().summary
    logger.info(
        "Tasks: %d remaining, %d completed, %d total",
        summary.remaining,
        summary.completed,
        summary.total,
    )


def main() -> None:
    asyncio.run(run())


if __name__ == "__main__":
    main()
