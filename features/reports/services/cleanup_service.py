import logging
from typing import Dict, Any

from features.common.utils.dates import est_date, Clock, utc_now
from repositories.surf_repository import SurfRepository
from core.config import settings

logger = logging.getLogger(__name__)

# Past observations are kept for the retention window; forward-looking
# tables only ever need today onwards.
RETAINED_TABLES = ("surf_reports", "surf_conditions", "weather_data")
FORWARD_TABLES = ("weather_forecast", "tide_data", "surf_predictions")

class CleanupService:
    def __init__(self, repository: SurfRepository, clock: Clock = utc_now):
        self.repository = repository
        self._clock = clock

    async def cleanup(self) -> Dict[str, Any]:
        now = self._clock()
        today = est_date(now)
        cutoff = est_date(now, days_offset=-settings.retention_days)
        logger.info(f"🔄 Cleaning up rows before {cutoff} (history) and {today} (forecasts)")

        results = {}
        for table in RETAINED_TABLES:
            results[table] = await self.repository.delete_before(table, cutoff)
        for table in FORWARD_TABLES:
            results[table] = await self.repository.delete_before(table, today)

        total = sum(results.values())
        logger.info(f"✅ Deleted {total} old records: {results}")
        return {
            "today": today,
            "cutoff_date": cutoff,
            "results": results,
            "total_deleted": total
        }
