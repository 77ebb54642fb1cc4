"""Calendar helpers. Entry dates are zero-padded ``YYYY-MM-DD`` strings."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from moodlog.config.settings import APP_TIMEZONE

DATE_FORMAT = "%Y-%m-%d"


def local_now(tz_name: str = APP_TIMEZONE, now: Optional[datetime] = None) -> datetime:
    """``now`` (default: current UTC time) converted to ``tz_name``."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(ZoneInfo(tz_name))


def today_in_timezone(tz_name: str = APP_TIMEZONE, now: Optional[datetime] = None) -> str:
    return local_now(tz_name, now).strftime(DATE_FORMAT)


def current_hhmm(tz_name: str = APP_TIMEZONE, now: Optional[datetime] = None) -> str:
    return local_now(tz_name, now).strftime("%H:%M")


def parse_date(value: str) -> date:
    return datetime.strptime(value, DATE_FORMAT).date()


def shift_date(value: str, days: int) -> str:
    return (parse_date(value) + timedelta(days=days)).strftime(DATE_FORMAT)


def period_days(first: str, last: str) -> int:
    """Inclusive day span between two dates, 0 if either is missing."""
    if not first or not last:
        return 0
    return (parse_date(last) - parse_date(first)).days + 1
