from features.surf.models.surf_types import SurfConditions

async def test_predicts_next_seven_days(trend_service, repository, location):
    for day, height in zip(range(8, 15), (2.0, 2.5, 3.0, 2.8, 3.2, 3.5, 3.1)):
        await repository.upsert_surf_conditions(SurfConditions(
            date=f"2026-07-{day:02d}",
            location="folly-beach",
            buoy_id="41004",
            wave_height_ft=height,
            period_s=9
        ))

    predictions, statistics = await trend_service.analyze(location)

    assert [p.days_ahead for p in predictions] == list(range(1, 8))
    assert predictions[0].date == "2026-07-16"
    assert predictions[-1].date == "2026-07-22"
    assert statistics.historical_count == 7
    assert statistics.predictions_generated == 7
    assert all(p.predicted_surf_min <= p.predicted_surf_max for p in predictions)
    confidences = [p.confidence for p in predictions]
    assert confidences == sorted(confidences, reverse=True)

    stored = await repository.get_predictions("folly-beach", since="2026-07-16")
    assert len(stored) == 7
    assert stored[0].factors.avg_wave_height == predictions[0].factors.avg_wave_height
