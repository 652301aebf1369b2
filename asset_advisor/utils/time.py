"""Time utilities (IST)."""

from datetime import datetime, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

IST = ZoneInfo("Asia/Kolkata")


def now_ist() -> datetime:
    """Current time in IST, timezone-aware."""
    return datetime.now(IST)


def to_ist(dt: datetime, naive_assumed_tz: tzinfo = timezone.utc) -> datetime:
    """Convert datetime to IST timezone-aware value."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=naive_assumed_tz)
    return dt.astimezone(IST)


def today_key(now: Optional[datetime] = None) -> str:
    """
    Calendar-day key (YYYY-MM-DD) in IST.

    Spend is bucketed per Indian trading day, so the key rolls over at
    IST midnight rather than UTC midnight.
    """
    current = to_ist(now) if now is not None else now_ist()
    return current.date().isoformat()


def format_ist(dt: Optional[datetime] = None) -> str:
    """Render a timestamp as 'YYYY-MM-DD HH:MM:SS IST'."""
    current = to_ist(dt) if dt is not None else now_ist()
    return current.strftime("%Y-%m-%d %H:%M:%S") + " IST"
