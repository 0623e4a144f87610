"""
Opening hours for listings.

OSM ``opening_hours`` values use a small rule language (``Mo-Fr 09:00-18:00;
Sa 10:00-14:00; PH off``). Normalizers only depend on ``OpeningHoursParser``;
the default implementation ignores the raw value and reports a fixed
schedule, so a real parser can be dropped in later without touching them.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

DayHours = Dict[str, object]
WeekHours = Dict[str, DayHours]


class OpeningHoursParser(ABC):
    @abstractmethod
    def parse(self, raw: Optional[str]) -> WeekHours:
        """Map a raw ``opening_hours`` tag value to ``{weekday: {open, close, closed}}``."""


class StaticOpeningHoursParser(OpeningHoursParser):
    """Every day open ``open``-``close``, never closed, whatever the tag says."""

    def __init__(self, open_time: str = "09:00", close_time: str = "21:00"):
        self.open_time = open_time
        self.close_time = close_time

    def parse(self, raw: Optional[str]) -> WeekHours:
        return {
            day: {"open": self.open_time, "close": self.close_time, "closed": False}
            for day in WEEKDAYS
        }
