import asyncio
import logging

from clinicslots.application.services.booking_coordinator import BookingCoordinator
from clinicslots.core.config import BookingSettings

logger = logging.getLogger("clinicslots")


async def _reconcile_once(coordinator: BookingCoordinator) -> int:
    """
    Perform a single pass over capacity releases that failed after a cancellation.
    """
    pending = coordinator.pending_releases
    if not pending:
        return 0

    logger.info(
        "[ReleaseReconciler] Retrying %d pending releases across %d schedules",
        sum(pending.values()),
        len(pending),
    )
    released = await coordinator.retry_pending_releases()
    remaining = coordinator.pending_releases
    if remaining:
        logger.warning(
            "[ReleaseReconciler] %d releases still pending after pass (schedules=%s)",
            sum(remaining.values()),
            ",".join(sorted(remaining)),
        )
    else:
        logger.info("[ReleaseReconciler] Pending release queue drained (released=%d)", released)
    return released


async def run_release_reconciler_forever(
    coordinator: BookingCoordinator, settings: BookingSettings
) -> None:
    """
    Retry pending capacity releases in a loop until cancelled.
    """
    if not settings.release_retry_enabled:
        logger.info("[ReleaseReconciler] Disabled via BOOKING_RELEASE_RETRY_ENABLED")
        return

    interval = settings.release_retry_interval_seconds
    logger.info("[ReleaseReconciler] Starting (interval=%ss)", interval)

    while True:
        try:
            await _reconcile_once(coordinator)
        except Exception as e:  # noqa: PERF203
            logger.error("[ReleaseReconciler] Reconcile iteration failed: %s", e, exc_info=True)
        await asyncio.sleep(interval)
