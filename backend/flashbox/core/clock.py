from datetime import date, datetime
from typing import Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    def today(self) -> date:
        ...


class SystemClock:
    """Wall clock reduced to the calendar day in a fixed time zone."""

    def __init__(self, tz_name: str = "UTC"):
        self.tz = ZoneInfo(tz_name)

    def today(self) -> date:
        return datetime.now(self.tz).date()


class FixedClock:
    def __init__(self, day: date):
        self.day = day

    def today(self) -> date:
        return self.day
