"""
SCHEDULER BOOTSTRAP

Initializes and manages the APScheduler instance.
Scheduler is orchestration-only and contains no business logic.
"""

import logging

import pytz
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from dca_dashboard.services.dashboard_service import DashboardService

_logger = logging.getLogger(__name__)

PRICE_REFRESH_JOB_ID = "live_price_refresh_job"


class PriceRefreshScheduler:
    """
    Periodic live-price refresh.
    The sheet itself is only reloaded by a manual refresh.
    """

    def __init__(self, dashboard: DashboardService, interval_seconds: int, timezone: str):
        self.dashboard = dashboard
        self.interval_seconds = interval_seconds
        self.scheduler = AsyncIOScheduler(timezone=pytz.timezone(timezone))

    async def run_price_refresh_job(self) -> None:
        ran = await self.dashboard.refresh_prices()
        if not ran:
            _logger.debug("Price refresh skipped (busy)")

    def start(self) -> None:
        # ------------------------------------------------------------
        # LIVE PRICE REFRESH
        # Every PRICE_REFRESH_SECONDS; ticks never overlap
        # ------------------------------------------------------------
        self.scheduler.add_job(
            self.run_price_refresh_job,
            trigger=IntervalTrigger(seconds=self.interval_seconds),
            id=PRICE_REFRESH_JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self.scheduler.start()
        _logger.info("✅ Scheduler started: live prices every %ss", self.interval_seconds)

    def stop(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            _logger.info("🛑 Scheduler shut down")

    @property
    def running(self) -> bool:
        return bool(self.scheduler.running)
