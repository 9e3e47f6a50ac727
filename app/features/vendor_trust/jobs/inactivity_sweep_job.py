"""
Inactivity sweep job.

Periodically clears the "online now" flag on vendors whose last activity
is older than the configured threshold. Runs inside the worker service:

    python -m app.jobs.worker inactivity_sweep
"""

import asyncio

from app.config import settings
from app.db.pool import db_pool
from app.features.vendor_trust.services.activity_service import ActivityService, activity_service
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

ERROR_BACKOFF_SECONDS = 60


async def run_inactivity_sweep(service: ActivityService = activity_service) -> int:
    """Run a single sweep and return the number of vendors marked inactive."""
    return await service.sweep_inactive()


async def start_inactivity_sweep_scheduler(
    service: ActivityService = activity_service, max_cycles: int | None = None
) -> None:
    """
    Run the sweep on a fixed interval until cancelled.

    Args:
        service: Activity service to sweep with
        max_cycles: Stop after this many cycles (None runs forever)
    """
    interval_seconds = settings.ACTIVITY_SWEEP_INTERVAL_MINUTES * 60
    logger.info(
        "Starting inactivity sweep scheduler",
        interval_minutes=settings.ACTIVITY_SWEEP_INTERVAL_MINUTES,
        threshold_minutes=settings.INACTIVITY_THRESHOLD_MINUTES,
    )

    cycles = 0
    while max_cycles is None or cycles < max_cycles:
        cycles += 1
        try:
            updated = await run_inactivity_sweep(service)
            logger.debug("Inactivity sweep cycle completed", cycle=cycles, updated=updated)
            delay = interval_seconds
        except Exception as e:
            logger.error(
                "Error in inactivity sweep scheduler", error=str(e), error_type=type(e).__name__
            )
            # Back off to avoid a tight error loop
            delay = max(interval_seconds, ERROR_BACKOFF_SECONDS)

        if max_cycles is None or cycles < max_cycles:
            await asyncio.sleep(delay)


async def run_inactivity_sweep_worker() -> None:
    """Worker entrypoint: owns the database pool for the lifetime of the scheduler."""
    await db_pool.initialize()
    try:
        await start_inactivity_sweep_scheduler()
    finally:
        await db_pool.close()
