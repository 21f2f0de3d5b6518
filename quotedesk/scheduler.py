"""Background scheduler — server-side quotation expiry.

Runs a tick loop every `expiry_sweep_minutes`. Each tick persists
pending/sent → expired for quotations whose validUntil has passed, so
the stored status catches up with the status every read already derives.
"""

import asyncio
import logging
from datetime import datetime, timezone

log = logging.getLogger(__name__)


async def start_scheduler(startup_delay: float = 10):
    """Launch the background scheduler loop. Call once on app startup."""
    from .config import settings

    interval = settings.expiry_sweep_minutes * 60
    log.info(f"Background scheduler started — expiry sweep every {settings.expiry_sweep_minutes} min")

    # Let the app finish booting before the first tick
    await asyncio.sleep(startup_delay)

    while True:
        try:
            await _scheduler_tick()
        except Exception as e:
            log.error(f"Scheduler tick error: {e}")
        await asyncio.sleep(interval)


async def _scheduler_tick() -> int:
    """Run the expiry sweep once. Returns the number of rows expired."""
    from .database import SessionLocal
    from .services.quotation_service import expire_overdue_quotations

    db = SessionLocal()
    try:
        return expire_overdue_quotations(db, datetime.now(timezone.utc))
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
