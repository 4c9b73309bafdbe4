"""
Time utilities for rendering CloudWatch Logs event timestamps.
"""

from datetime import datetime, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
    """
    Resolve a time zone name to a tzinfo.

    Accepts:
    - None or "local" (render in the machine's local zone, returns None)
    - "UTC" / "Z" (any case)
    - IANA names such as "America/New_York"
    """
    if name is None:
        return None

    match name.strip():
        case "" | "local":
            return None
        case zone if zone.upper() in ("UTC", "Z"):
            return timezone.utc
        case zone:
            try:
                return ZoneInfo(zone)
            except (ZoneInfoNotFoundError, ValueError):
                raise ValueError(f"Unknown time zone: {name}")


def format_event_time(timestamp_ms: int, tz: Optional[tzinfo] = None) -> str:
    """Render epoch milliseconds as 'YYYY-MM-DD HH:MM:SS ZONE'."""
    # Sub-second precision is dropped, not rounded
    moment = datetime.fromtimestamp(timestamp_ms // 1000, tz=timezone.utc)
    local = moment.astimezone(tz) if tz is not None else moment.astimezone()
    return local.strftime("%Y-%m-%d %H:%M:%S %Z")
