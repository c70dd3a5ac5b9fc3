# src/pr_digest/utils/helpers.py

from datetime import datetime, timedelta, timezone
from typing import Optional


def parse_datetime(dt_str: Optional[str]) -> Optional[datetime]:
    """Parses an ISO datetime string, handling 'Z' suffix for UTC."""
    if not dt_str:
        return None
    return datetime.fromisoformat(dt_str.replace("Z", "+00:00")).astimezone(
        timezone.utc
    )


def now_utc() -> datetime:
    """Returns the current time in UTC."""
    return datetime.now(timezone.utc)


def window_start(now: datetime, hours: float = 0, days: float = 0) -> datetime:
    """Returns the start of the trailing window ending at ``now``."""
    return now - timedelta(hours=hours, days=days)


def is_after(moment: Optional[datetime], cutoff: datetime) -> bool:
    """True if ``moment`` is known and strictly later than ``cutoff``."""
    return moment is not None and moment > cutoff


def is_before(moment: Optional[datetime], cutoff: datetime) -> bool:
    """True if ``moment`` is known and strictly earlier than ``cutoff``."""
    return moment is not None and moment < cutoff
