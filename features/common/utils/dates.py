from datetime import date, datetime, timedelta, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from core.config import settings

Clock = Callable[[], datetime]

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

def local_zone() -> ZoneInfo:
    return ZoneInfo(settings.timezone)

def to_local(moment: datetime) -> datetime:
    """Convert an aware (or naive UTC) datetime to the local data timezone."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(local_zone())

def est_date(moment: Optional[datetime] = None, days_offset: int = 0) -> str:
    """Calendar day (YYYY-MM-DD) in America/New_York, used as the row key."""
    local = to_local(moment or utc_now())
    return (local.date() + timedelta(days=days_offset)).isoformat()

def est_date_from_iso(timestamp: str) -> str:
    """EST calendar day of an ISO-8601 timestamp such as an NWS period start."""
    return est_date(datetime.fromisoformat(timestamp))

def est_time(moment: Optional[datetime] = None) -> str:
    """Wall-clock HH:MM in the local data timezone."""
    return to_local(moment or utc_now()).strftime("%H:%M")

def parse_date(value: str) -> date:
    return date.fromisoformat(value)

def days_since_epoch(value: str) -> int:
    return (parse_date(value) - date(1970, 1, 1)).days
