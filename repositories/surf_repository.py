import asyncio
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple, Any
from pydantic import BaseModel, ValidationError

from features.surf.models.surf_types import SurfConditions
from features.trends.models.trend_types import SurfPrediction
from features.weather.models.weather_types import CurrentWeather, ForecastDay
from features.tides.models.tide_types import TideEvent
from features.reports.models.report_types import SurfReport
from features.common.exceptions.pipeline_exceptions import PersistenceError

logger = logging.getLogger(__name__)

Key = Tuple[str, str]  # (location, date)

TABLES = (
    "surf_conditions",
    "surf_predictions",
    "weather_data",
    "weather_forecast",
    "tide_data",
    "surf_reports"
)

@contextmanager
def _write_guard(table: str):
    try:
        yield
    except (ValidationError, ValueError, TypeError) as e:
        logger.error(f"❌ Write to {table} failed: {str(e)}")
        raise PersistenceError(f"Failed to write {table}: {str(e)}")

class SurfRepository:
    """In-process store for the pipeline's tables.

    Rows are keyed by (location, date) so repeated writes for the same
    date overwrite (last writer wins). Tides and forecast days are
    replaced per location as a whole.
    """

    def __init__(self):
        self._rows: Dict[str, Dict[Key, Any]] = {table: {} for table in TABLES}
        self._tides: Dict[str, List[TideEvent]] = {}
        self._lock = asyncio.Lock()

    @staticmethod
    def _stamp(row: BaseModel, field: str = "updated_at") -> BaseModel:
        return row.model_copy(update={field: datetime.now(timezone.utc)})

    def _latest(self, table: str, location: str) -> Optional[Any]:
        rows = self._ordered(table, location)
        return rows[-1] if rows else None

    def _ordered(self, table: str, location: str) -> List[Any]:
        rows = [row for (loc, _), row in self._rows[table].items() if loc == location]
        return sorted(rows, key=lambda r: r.date)

    # surf_conditions

    async def upsert_surf_conditions(self, row: SurfConditions) -> SurfConditions:
        async with self._lock:
            with _write_guard("surf_conditions"):
                stored = self._stamp(SurfConditions.model_validate(row.model_dump()))
                self._rows["surf_conditions"][(row.location, row.date)] = stored
        return stored

    async def get_surf_conditions(self, location: str, date: str) -> Optional[SurfConditions]:
        return self._rows["surf_conditions"].get((location, date))

    async def get_latest_surf_conditions(self, location: str) -> Optional[SurfConditions]:
        return self._latest("surf_conditions", location)

    async def get_surf_history(self, location: str, since: str) -> List[SurfConditions]:
        """Observations on or after `since`, oldest first."""
        return [row for row in self._ordered("surf_conditions", location) if row.date >= since]

    # surf_predictions

    async def upsert_predictions(self, rows: List[SurfPrediction]) -> List[SurfPrediction]:
        async with self._lock:
            with _write_guard("surf_predictions"):
                stored = []
                for row in rows:
                    saved = self._stamp(SurfPrediction.model_validate(row.model_dump()), "created_at")
                    self._rows["surf_predictions"][(row.location, row.date)] = saved
                    stored.append(saved)
        return stored

    async def get_predictions(self, location: str, since: Optional[str] = None) -> List[SurfPrediction]:
        rows = self._ordered("surf_predictions", location)
        return [row for row in rows if since is None or row.date >= since]

    # weather_data / weather_forecast

    async def upsert_weather(self, row: CurrentWeather) -> CurrentWeather:
        async with self._lock:
            with _write_guard("weather_data"):
                stored = self._stamp(CurrentWeather.model_validate(row.model_dump()))
                self._rows["weather_data"][(row.location, row.date)] = stored
        return stored

    async def get_weather(self, location: str, date: str) -> Optional[CurrentWeather]:
        return self._rows["weather_data"].get((location, date))

    async def get_latest_weather(self, location: str) -> Optional[CurrentWeather]:
        return self._latest("weather_data", location)

    async def replace_forecast(self, location: str, days: List[ForecastDay]) -> int:
        async with self._lock:
            with _write_guard("weather_forecast"):
                validated = [self._stamp(ForecastDay.model_validate(d.model_dump())) for d in days]
                table = self._rows["weather_forecast"]
                for key in [k for k in table if k[0] == location]:
                    del table[key]
                for day in validated:
                    table[(location, day.date)] = day
        return len(validated)

    async def get_forecast(self, location: str) -> List[ForecastDay]:
        return self._ordered("weather_forecast", location)

    # tide_data

    async def replace_tides(self, location: str, events: List[TideEvent]) -> int:
        async with self._lock:
            with _write_guard("tide_data"):
                validated = [TideEvent.model_validate(e.model_dump()) for e in events]
                self._tides[location] = sorted(validated, key=lambda e: (e.date, e.time))
        return len(validated)

    async def get_tides(self, location: str, date: Optional[str] = None) -> List[TideEvent]:
        events = self._tides.get(location, [])
        return [e for e in events if date is None or e.date == date]

    # surf_reports

    async def save_report(self, report: SurfReport) -> SurfReport:
        """Insert or fully replace the report for its date."""
        async with self._lock:
            with _write_guard("surf_reports"):
                stored = self._stamp(SurfReport.model_validate(report.model_dump()))
                self._rows["surf_reports"][(report.location, report.date)] = stored
        return stored

    async def update_report(
        self,
        location: str,
        date: str,
        fields: Dict[str, Any],
        expected_updated_at: Optional[datetime] = None
    ) -> Optional[SurfReport]:
        """Patch selected fields of an existing report.

        When `expected_updated_at` is given the write only happens if the
        stored row has not changed since it was read.
        """
        async with self._lock:
            current = self._rows["surf_reports"].get((location, date))
            if current is None:
                return None
            if expected_updated_at is not None and current.updated_at != expected_updated_at:
                raise PersistenceError(
                    f"Report {location}/{date} changed concurrently; refresh skipped"
                )
            with _write_guard("surf_reports"):
                merged = SurfReport.model_validate({**current.model_dump(), **fields})
                stored = self._stamp(merged)
                self._rows["surf_reports"][(location, date)] = stored
        return stored

    async def get_report(self, location: str, date: str) -> Optional[SurfReport]:
        return self._rows["surf_reports"].get((location, date))

    # retention

    async def delete_before(self, table: str, cutoff: str) -> int:
        """Delete rows dated strictly before `cutoff`; returns the count."""
        async with self._lock:
            if table == "tide_data":
                deleted = 0
                for location, events in self._tides.items():
                    kept = [e for e in events if e.date >= cutoff]
                    deleted += len(events) - len(kept)
                    self._tides[location] = kept
                return deleted
            rows = self._rows[table]
            stale = [key for key in rows if key[1] < cutoff]
            for key in stale:
                del rows[key]
            return len(stale)
