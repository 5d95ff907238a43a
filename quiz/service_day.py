# quiz/service_day.py - Service-day boundaries for the daily reset

import datetime
from typing import Callable, Optional

import pytz


def _as_utc(now: Optional[datetime.datetime]) -> datetime.datetime:
    if now is None:
        return datetime.datetime.now(pytz.utc)
    if now.tzinfo is None:
        return pytz.utc.localize(now)
    return now.astimezone(pytz.utc)


def service_date(
    now: Optional[datetime.datetime] = None,
    reset_hour: int = 0,
    reset_minute: int = 30,
    timezone: str = "America/New_York",
) -> str:
    """Return the service date (YYYY-MM-DD) that contains `now`.

    A service day starts at the reset time-of-day in the reference timezone,
    so any instant before that time belongs to the previous calendar date.
    Naive datetimes are treated as UTC.
    """
    tz = pytz.timezone(timezone)
    local = _as_utc(now).astimezone(tz)
    day = local.date()
    if (local.hour, local.minute) < (reset_hour, reset_minute):
        day -= datetime.timedelta(days=1)
    return day.isoformat()


def next_reset_time(
    now: Optional[datetime.datetime] = None,
    reset_hour: int = 0,
    reset_minute: int = 30,
    timezone: str = "America/New_York",
) -> datetime.datetime:
    """Return the next reset instant after `now`, in UTC"""
    tz = pytz.timezone(timezone)
    local = _as_utc(now).astimezone(tz)
    reset_at = datetime.time(reset_hour, reset_minute)

    candidate = tz.localize(datetime.datetime.combine(local.date(), reset_at))
    if candidate <= local:
        tomorrow = local.date() + datetime.timedelta(days=1)
        candidate = tz.localize(datetime.datetime.combine(tomorrow, reset_at))
    return candidate.astimezone(pytz.utc)


class ServiceClock:
    """Wall clock bound to the configured reset time, shared by every component"""

    def __init__(self, settings, now_func: Optional[Callable[[], datetime.datetime]] = None):
        self.reset_hour = settings.reset_hour
        self.reset_minute = settings.reset_minute
        self.timezone = settings.reset_timezone
        self._now_func = now_func or (lambda: datetime.datetime.now(pytz.utc))

    def now(self) -> datetime.datetime:
        return _as_utc(self._now_func())

    def timestamp(self) -> float:
        return self.now().timestamp()

    def service_date(self, at: Optional[datetime.datetime] = None) -> str:
        return service_date(at or self.now(), self.reset_hour, self.reset_minute, self.timezone)

    def previous_service_date(self, at: Optional[datetime.datetime] = None) -> str:
        day = datetime.date.fromisoformat(self.service_date(at))
        return (day - datetime.timedelta(days=1)).isoformat()

    def next_reset(self, at: Optional[datetime.datetime] = None) -> datetime.datetime:
        return next_reset_time(at or self.now(), self.reset_hour, self.reset_minute, self.timezone)
