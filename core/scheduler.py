import logging
from typing import Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from features.pipeline.services.pipeline_service import PipelineService
from features.reports.services.cleanup_service import CleanupService
from core.config import settings

logger = logging.getLogger(__name__)

class Scheduler:
    def __init__(self, pipeline: PipelineService, cleanup: CleanupService):
        self.scheduler = AsyncIOScheduler(timezone=settings.timezone)
        self.pipeline = pipeline
        self.cleanup = cleanup

    async def morning_reports(self):
        """Full refresh and first report for every location."""
        for location in self.pipeline.locations.all_locations():
            try:
                outcome = await self.pipeline.run_first_report_with_retry(location.location_id)
                logger.info(f"✅ Morning report for {location.name}: {outcome['attempts']} attempt(s)")
            except Exception as e:
                logger.error(f"❌ Morning report for {location.name} failed: {str(e)}")

    async def intraday_refresh(self):
        result = await self.pipeline.run_intraday_all()
        logger.info(f"🔄 Intraday refresh: {result.message}")

    async def retention_cleanup(self):
        result = await self.cleanup.cleanup()
        logger.info(f"Retention cleanup removed {result['total_deleted']} rows")

    def start(self):
        """Start the scheduler with configured jobs."""
        logger.info("Starting scheduler")

        self.scheduler.add_job(
            self.morning_reports,
            CronTrigger(hour=settings.daily_report_hour, minute=0, timezone=settings.timezone),
            id="daily_report",
            name="daily_report",
            max_instances=1,
            coalesce=True
        )
        self.scheduler.add_job(
            self.intraday_refresh,
            IntervalTrigger(minutes=settings.intraday_interval_minutes),
            id="intraday_refresh",
            name="intraday_refresh",
            max_instances=1,
            coalesce=True
        )
        self.scheduler.add_job(
            self.retention_cleanup,
            CronTrigger(hour=settings.cleanup_hour, minute=0, timezone=settings.timezone),
            id="retention_cleanup",
            name="retention_cleanup"
        )

        self.scheduler.start()
        logger.info("Scheduler started successfully")

    def get_next_run_time(self, job_id: str) -> Optional[str]:
        """Get the next run time for a scheduled job."""
        job = self.scheduler.get_job(job_id)
        if job and job.next_run_time:
            return job.next_run_time.isoformat()
        return None

    def shutdown(self):
        """Shutdown the scheduler."""
        if self.scheduler.running:
            logger.info("Shutting down scheduler")
            self.scheduler.shutdown()
            logger.info("Scheduler shutdown complete")
