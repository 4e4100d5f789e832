from datetime import datetime, timezone

import pytest

from features.reports.models.report_types import SurfReport
from features.surf.models.surf_types import SurfConditions
from features.tides.models.tide_types import TideEvent
from features.weather.models.weather_types import CurrentWeather
from features.common.exceptions.pipeline_exceptions import PersistenceError
from conftest import TODAY

async def test_upsert_is_last_writer_wins(repository):
    await repository.upsert_surf_conditions(
        SurfConditions(date=TODAY, location="folly-beach", buoy_id="41004", wave_height_ft=2.0)
    )
    await repository.upsert_surf_conditions(
        SurfConditions(date=TODAY, location="folly-beach", buoy_id="41004", wave_height_ft=3.0)
    )
    history = await repository.get_surf_history("folly-beach", since="2026-07-01")
    assert [row.wave_height_ft for row in history] == [3.0]

async def test_update_report_detects_concurrent_write(repository):
    stored = await repository.save_report(SurfReport(date=TODAY, location="folly-beach", conditions="x"))
    assert stored.updated_at is not None

    with pytest.raises(PersistenceError):
        await repository.update_report(
            "folly-beach",
            TODAY,
            {"rating": 5},
            expected_updated_at=datetime(2000, 1, 1, tzinfo=timezone.utc)
        )

    updated = await repository.update_report(
        "folly-beach", TODAY, {"rating": 5}, expected_updated_at=stored.updated_at
    )
    assert updated.rating == 5
    assert await repository.update_report("folly-beach", "2026-01-01", {"rating": 5}) is None

async def test_invalid_write_raises_persistence_error(repository):
    await repository.save_report(SurfReport(date=TODAY, location="folly-beach"))
    with pytest.raises(PersistenceError):
        await repository.update_report("folly-beach", TODAY, {"rating": "high"})

async def test_cleanup_cutoffs(cleanup_service, repository):
    for date in ("2026-07-01", TODAY):
        await repository.upsert_surf_conditions(
            SurfConditions(date=date, location="folly-beach", buoy_id="41004")
        )
        await repository.upsert_weather(CurrentWeather(date=date, location="folly-beach"))
    await repository.replace_tides("folly-beach", [
        TideEvent(date="2026-07-14", time="04:00", type="High", height=5.0),
        TideEvent(date=TODAY, time="04:50", type="High", height=5.1),
    ])

    result = await cleanup_service.cleanup()

    assert result["today"] == TODAY
    assert result["cutoff_date"] == "2026-07-08"
    assert result["results"]["surf_conditions"] == 1
    assert result["results"]["weather_data"] == 1
    assert result["results"]["tide_data"] == 1
    assert result["total_deleted"] == 3
    assert len(await repository.get_tides("folly-beach")) == 1
