"""
Date and timestamp helpers.

Stored timestamps are UTC with millisecond precision, e.g.
'2026-10-17T02:15:00.000Z', so string order matches time order.
Filter dates are calendar days in the admin's local zone.
"""
from datetime import date, datetime, time, timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

STORE_FORMAT = '%Y-%m-%dT%H:%M:%S.%fZ'
FILTER_DATE_FORMAT = '%Y-%m-%d'

END_OF_DAY = time(23, 59, 59, 999000)


def get_zone(name: Optional[str]):
    """ZoneInfo for an IANA name, or None for the server's local zone."""
    if not name:
        return None
    return ZoneInfo(name)


def _localize(naive: datetime, tz) -> datetime:
    if tz is None:
        return naive.astimezone()
    return naive.replace(tzinfo=tz)


def parse_filter_date(text: str) -> date:
    """Parse a YYYY-MM-DD filter value. Raises ValueError when malformed."""
    return datetime.strptime(text.strip(), FILTER_DATE_FORMAT).date()


def day_bounds(day: date, tz=None) -> Tuple[datetime, datetime]:
    """First and last millisecond of a local calendar day, in UTC."""
    start = _localize(datetime.combine(day, time.min), tz)
    end = _localize(datetime.combine(day, END_OF_DAY), tz)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def to_store_timestamp(dt: datetime) -> str:
    """Format for storage. Naive values are taken as server-local time."""
    if dt.tzinfo is None:
        dt = dt.astimezone()
    utc = dt.astimezone(timezone.utc)
    return utc.strftime(STORE_FORMAT)[:-4] + 'Z'


def parse_store_timestamp(text: str) -> datetime:
    """Inverse of to_store_timestamp. Any other layout raises ValueError."""
    return datetime.strptime(text, STORE_FORMAT).replace(tzinfo=timezone.utc)


def now_timestamp() -> str:
    return to_store_timestamp(datetime.now(timezone.utc))


def local_today(tz=None) -> date:
    return datetime.now(tz).date() if tz is not None else date.today()


def to_local(dt: datetime, tz=None) -> datetime:
    return dt.astimezone(tz) if tz is not None else dt.astimezone()
