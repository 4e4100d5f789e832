import asyncio
import sys
from pathlib import Path
sys.path.append(str(Path(__file__).parent.parent))

from features.common.services.http_client import HttpClient
from features.common.services.location_service import LocationService
from features.surf.services.ndbc_buoy_client import NDBCBuoyClient
from features.surf.services.surf_conditions_service import build_surf_conditions
from features.common.utils.dates import est_date

async def main():
    location_id = sys.argv[1] if len(sys.argv) > 1 else None
    location = LocationService().get_location(location_id)

    http = HttpClient()
    client = NDBCBuoyClient(http)

    try:
        observation = await client.get_latest_observation(location.buoy_id)
        conditions = build_surf_conditions(observation, location, est_date())

        print(f"\nLocation: {location.name} (buoy {location.buoy_id})")
        print(f"Observed: {observation.observed_at}\n")
        print(f"Surf:        {conditions.surf_height}")
        print(f"Waves:       {conditions.wave_height} @ {conditions.wave_period}")
        print(f"Swell from:  {conditions.swell_direction}")
        print(f"Wind:        {conditions.wind_speed} {conditions.wind_direction}")
        print(f"Water:       {conditions.water_temp}")
    finally:
        await http.close()

if __name__ == "__main__":
    asyncio.run(main())
