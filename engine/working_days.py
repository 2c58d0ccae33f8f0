"""
Working-day calendar - weekends plus national holidays
"""
import logging
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, Set, Union

import yaml
from dateutil.rrule import DAILY, rrule

from config import settings
from utils.helpers import parse_iso_date, to_iso

logger = logging.getLogger(__name__)

WorkingDayPredicate = Callable[[str], bool]


def load_holidays(path: Optional[str] = None) -> Set[str]:
    """
    Load holiday dates from the YAML calendar (``{year: [YYYY-MM-DD, ...]}``).
    Returns an empty set when the file does not exist.
    """
    holidays_path = Path(path or settings.HOLIDAYS_PATH)
    try:
        with open(holidays_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Holiday calendar not found at %s; only weekends are excluded", holidays_path)
        return set()

    holidays: Set[str] = set()
    for year_dates in data.values():
        for value in year_dates or []:
            parsed = parse_iso_date(str(value))
            if parsed:
                holidays.add(to_iso(parsed))

    return holidays


class HolidayCalendar:
    """
    Answers whether a calendar day counts toward decree day totals
    (Monday to Friday and not a holiday).
    """

    def __init__(self, holidays: Iterable[str] = ()):
        self.holidays = frozenset(holidays)

    @classmethod
    def from_yaml(cls, path: Optional[str] = None) -> "HolidayCalendar":
        return cls(load_holidays(path))

    def is_holiday(self, value: Union[str, date]) -> bool:
        parsed = parse_iso_date(value)
        return parsed is not None and to_iso(parsed) in self.holidays

    def is_working_day(self, value: Union[str, date]) -> bool:
        parsed = parse_iso_date(value)
        if parsed is None:
            return False
        # 5 = Saturday, 6 = Sunday
        if parsed.weekday() >= 5:
            return False
        return to_iso(parsed) not in self.holidays


@lru_cache(maxsize=1)
def default_calendar() -> HolidayCalendar:
    """Calendar loaded once from settings.HOLIDAYS_PATH"""
    return HolidayCalendar.from_yaml()


def is_working_day(value: Union[str, date]) -> bool:
    """Default working-day oracle backed by the configured holiday calendar"""
    return default_calendar().is_working_day(value)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Every calendar day in the inclusive range [start, end]"""
    for dt in rrule(DAILY, dtstart=start, until=end):
        yield dt.date()


def count_working_days(start: date, end: date, predicate: WorkingDayPredicate) -> int:
    """
    Count days in [start, end] for which the predicate holds.
    The predicate is called once per calendar day with an ISO date string.
    """
    return sum(1 for day in iter_days(start, end) if predicate(to_iso(day)))
