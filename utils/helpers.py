"""
Helper utility functions
"""
from datetime import datetime, date
from typing import Optional, Union
import math
import re
import unicodedata

_ISO_PREFIX = re.compile(r"^(\d{4}-\d{2}-\d{2})")
_NUMERIC_DATE = re.compile(r"^(\d{1,2})[/-](\d{1,2})[/-](\d{4})$")
_LONG_DATE = re.compile(r"(\d{1,2})\s+de\s+(\w+)\s+de\s+(\d{4})", re.IGNORECASE)

SPANISH_MONTHS = {
    "enero": 1, "febrero": 2, "marzo": 3, "abril": 4,
    "mayo": 5, "junio": 6, "julio": 7, "agosto": 8,
    "septiembre": 9, "octubre": 10, "noviembre": 11, "diciembre": 12,
}


def parse_iso_date(value) -> Optional[date]:
    """
    Parse an ISO calendar date ("2024-03-04", optionally followed by a time
    part) or a date object. Returns None for anything else, never raises.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    if not isinstance(value, str):
        return None

    match = _ISO_PREFIX.match(value.strip())
    if not match:
        return None

    try:
        return datetime.strptime(match.group(1), "%Y-%m-%d").date()
    except ValueError:
        return None


def to_iso(value: date) -> str:
    """Format a date as YYYY-MM-DD"""
    return value.strftime("%Y-%m-%d")


def parse_sheet_date(value) -> str:
    """
    Parse a date cell from a decree sheet export into an ISO string.

    Accepted forms:
      - ISO, with or without time part: "2026-01-06", "2026-01-06T00:00:00"
      - numeric day first: "06/01/2026", "6-1-2026"
      - Spanish long form: "martes, 06 de enero de 2026"
      - date / datetime objects (Excel cells)

    Returns "" when the value is empty or not recognised.
    """
    if value is None:
        return ""

    if isinstance(value, date):
        return to_iso(parse_iso_date(value))

    text = str(value).strip()
    if not text or text.lower() == "nan":
        return ""

    if _ISO_PREFIX.match(text):
        parsed = parse_iso_date(text)
        return to_iso(parsed) if parsed else ""

    numeric = _NUMERIC_DATE.match(text)
    if numeric:
        day, month, year = (int(g) for g in numeric.groups())
        return _safe_iso(year, month, day)

    long_form = _LONG_DATE.search(text)
    if long_form:
        month = SPANISH_MONTHS.get(long_form.group(2).lower())
        if month is None:
            return ""
        return _safe_iso(int(long_form.group(3)), month, int(long_form.group(1)))

    return ""


def _safe_iso(year: int, month: int, day: int) -> str:
    try:
        return to_iso(date(year, month, day))
    except ValueError:
        return ""


def normalize_number(value: Union[str, float, int, None], fallback: float) -> float:
    """
    Parse a numeric cell, accepting comma decimals ("1,5").
    Returns fallback for empty or unparsable values.
    """
    if isinstance(value, bool):
        return fallback

    if isinstance(value, (int, float)):
        return fallback if math.isnan(value) else float(value)

    text = str(value or "").strip().replace(",", ".")
    try:
        number = float(text)
    except ValueError:
        return fallback

    return fallback if math.isnan(number) else number


def normalize_period(value, today: Optional[date] = None) -> str:
    """Return a four-digit year string, defaulting to the current year"""
    text = str(value or "").strip()
    if re.fullmatch(r"\d{4}", text):
        return text
    return str((today or date.today()).year)


def format_days(value: Optional[float]) -> str:
    """Format a day count without trailing zeros (3.0 -> "3", 2.5 -> "2.5")"""
    if value is None:
        return "0"
    return f"{value:g}"


def normalize_search_text(value: Optional[str]) -> str:
    """Lowercase, trimmed and accent-free text for matching"""
    decomposed = unicodedata.normalize("NFD", str(value or ""))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.lower().strip()


def clean_text(value) -> str:
    """Stringify a cell, mapping empty/NaN cells to an empty string"""
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()
