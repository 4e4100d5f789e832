import logging
from datetime import datetime, timezone
from typing import List, Optional

from features.surf.models.surf_types import BuoyObservation
from features.common.exceptions.pipeline_exceptions import ParseError

logger = logging.getLogger(__name__)

# Fixed column order of the realtime2 standard meteorological file:
# YY MM DD hh mm WDIR WSPD GST WVHT DPD APD MWD PRES ATMP WTMP DEWP VIS TIDE
COL_WDIR = 5
COL_WSPD = 6
COL_WVHT = 8
COL_DPD = 9
COL_MWD = 11
COL_WTMP = 14

MISSING_TOKENS = {"MM", "missing", "N/A", ""}
SENTINEL_VALUES = {99.0, 999.0, 9999.0}

def parse_value(value: Optional[str]) -> Optional[float]:
    """Parse an NDBC field, mapping missing markers and sentinels to None."""
    if value is None or value in MISSING_TOKENS:
        return None
    try:
        number = float(value)
    except (ValueError, TypeError):
        return None
    if number != number or number in SENTINEL_VALUES:  # NaN or sentinel
        return None
    return number

def _column(fields: List[str], index: int) -> Optional[float]:
    if index >= len(fields):
        return None
    return parse_value(fields[index])

def _parse_time(fields: List[str]) -> Optional[datetime]:
    try:
        year, month, day, hour, minute = (int(f) for f in fields[:5])
        return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)
    except (ValueError, TypeError):
        return None

def parse_buoy_text(text: str) -> BuoyObservation:
    """Parse the most recent reading out of a realtime2 .txt payload.

    The payload starts with two header lines (names, units); the first
    data row is the latest observation.
    """
    lines = [line for line in (text or "").strip().split("\n") if line.strip()]
    if len(lines) < 3:
        logger.error(f"❌ Insufficient buoy data ({len(lines)} lines)")
        raise ParseError("Insufficient buoy data")

    fields = lines[2].strip().split()
    if len(fields) <= COL_WVHT:
        raise ParseError(f"Malformed buoy record: {len(fields)} fields")

    observation = BuoyObservation(
        observed_at=_parse_time(fields),
        wave_height_m=_column(fields, COL_WVHT),
        period_s=_column(fields, COL_DPD),
        wind_speed_ms=_column(fields, COL_WSPD),
        wind_direction_deg=_column(fields, COL_WDIR),
        water_temp_c=_column(fields, COL_WTMP),
        swell_direction_deg=_column(fields, COL_MWD)
    )
    logger.debug(f"Parsed buoy record: {observation.model_dump()}")
    return observation
