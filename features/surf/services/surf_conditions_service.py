import logging

from features.surf.models.surf_types import BuoyObservation, SurfConditions
from features.surf.services.ndbc_buoy_client import NDBCBuoyClient
from features.surf.services.surf_height import estimate_from_feet, OBSERVATION_CAP
from features.common.models.location_types import SurfLocation
from features.common.utils.conversions import UnitConversions
from features.common.utils.dates import est_date, Clock, utc_now
from repositories.surf_repository import SurfRepository

logger = logging.getLogger(__name__)

def build_surf_conditions(
    observation: BuoyObservation,
    location: SurfLocation,
    date: str
) -> SurfConditions:
    """Project a parsed buoy record into the stored row with display strings."""
    wave_height_ft = UnitConversions.meters_to_feet(observation.wave_height_m)
    if wave_height_ft is not None:
        # bounds are capped against the stored height
        wave_height_ft = round(wave_height_ft, 1)
    wind_speed_mph = UnitConversions.ms_to_mph(observation.wind_speed_ms)
    water_temp_f = UnitConversions.celsius_to_fahrenheit(observation.water_temp_c)
    estimate = estimate_from_feet(wave_height_ft, observation.period_s, OBSERVATION_CAP)

    return SurfConditions(
        date=date,
        location=location.location_id,
        buoy_id=location.buoy_id,
        wave_height_ft=wave_height_ft,
        surf_height_min_ft=estimate.min_feet if estimate else None,
        surf_height_max_ft=estimate.max_feet if estimate else None,
        period_s=observation.period_s,
        swell_direction_deg=observation.swell_direction_deg,
        wind_speed_mph=round(wind_speed_mph) if wind_speed_mph is not None else None,
        wind_direction_deg=observation.wind_direction_deg,
        water_temp_f=round(water_temp_f) if water_temp_f is not None else None,
        wave_height=f"{wave_height_ft:.1f} ft" if wave_height_ft is not None else "N/A",
        surf_height=estimate.display if estimate else "N/A",
        wave_period=f"{observation.period_s:.0f} sec" if observation.period_s is not None else "N/A",
        swell_direction=UnitConversions.format_direction(observation.swell_direction_deg),
        wind_speed=f"{wind_speed_mph:.0f} mph" if wind_speed_mph is not None else "N/A",
        wind_direction=UnitConversions.format_direction(observation.wind_direction_deg),
        water_temp=f"{water_temp_f:.0f}°F" if water_temp_f is not None else "N/A"
    )

class SurfConditionsService:
    """Fetches the latest buoy reading and stores today's surf conditions."""

    def __init__(
        self,
        buoy_client: NDBCBuoyClient,
        repository: SurfRepository,
        clock: Clock = utc_now
    ):
        self.buoy_client = buoy_client
        self.repository = repository
        self._clock = clock

    async def fetch_and_store(self, location: SurfLocation) -> SurfConditions:
        observation = await self.buoy_client.get_latest_observation(location.buoy_id)
        today = est_date(self._clock())
        conditions = build_surf_conditions(observation, location, today)

        if not observation.has_wave_data:
            logger.warning(f"⚠️ {location.name}: buoy {location.buoy_id} has no wave data")

        stored = await self.repository.upsert_surf_conditions(conditions)
        logger.info(
            f"✅ {location.name}: stored surf conditions for {today} "
            f"(surf {stored.surf_height}, wave {stored.wave_height}, period {stored.wave_period})"
        )
        return stored
