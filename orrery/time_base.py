"""
Conversion between calendar dates and the continuous Julian Date scale.

Calendar dates are ``datetime.date`` values; their string form is ISO-8601
``YYYY-MM-DD``. Midnight (00:00 UTC) of a calendar day falls on a Julian Date
ending in ``.5``, so ``2000-01-01`` maps to ``2451544.5`` and J2000.0
(2000-01-01 12:00) is ``2451545.0``.

Supported range is the proleptic Gregorian calendar from year 1 to 9999.
"""
import functools
import math
import re
from datetime import date, datetime, time, timedelta, timezone

from orrery.constants import DAY, J2000, JD_GREGORIAN_ORDINAL_OFFSET
from orrery.errors import InvalidDate

_ISO_DATE = re.compile(r"(\d{4})-(\d{2})-(\d{2})")


def parse_date(text: str) -> date:
    """
    Parse an ISO ``YYYY-MM-DD`` string into a calendar date.

    Raises:
        InvalidDate: if the string is not of that form or names a day that
            does not exist (``2023-02-29``, ``0000-01-01``).
    """
    if not isinstance(text, str):
        raise InvalidDate(f"Expected a YYYY-MM-DD string, got {type(text).__name__}")
    match = _ISO_DATE.fullmatch(text.strip())
    if match is None:
        raise InvalidDate(f"Expected a YYYY-MM-DD date, got {text!r}")
    year, month, day = (int(g) for g in match.groups())
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise InvalidDate(f"{text!r} is not a valid calendar date: {exc}") from exc


def date_to_julian(calendar_date) -> float:
    """
    Julian Date at the start (00:00 UTC) of a calendar date.

    Args:
        calendar_date: a ``date``, a ``datetime`` (its time of day is kept as a
            fractional day, see `datetime_to_julian`), or a ``YYYY-MM-DD`` string.

    Returns:
        The Julian Date as a float.
    """
    if isinstance(calendar_date, str):
        calendar_date = parse_date(calendar_date)
    if isinstance(calendar_date, datetime):
        return datetime_to_julian(calendar_date)
    if not isinstance(calendar_date, date):
        raise InvalidDate(f"Cannot convert {type(calendar_date).__name__} to a Julian Date")
    return float(calendar_date.toordinal()) + JD_GREGORIAN_ORDINAL_OFFSET


def datetime_to_julian(dt: datetime) -> float:
    """Convert a datetime (naive values are taken as UTC) to a fractional Julian Date."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    try:
        dt = dt.astimezone(timezone.utc)
    except OverflowError as exc:
        raise InvalidDate(f"{dt.isoformat()} is outside the supported range") from exc
    seconds = dt.hour * 3600.0 + dt.minute * 60.0 + dt.second + dt.microsecond * 1e-6
    return date_to_julian(dt.date()) + seconds / DAY


def _round_half_away(x: float) -> int:
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def check_julian_date(jd) -> float:
    """Coerce a Julian Date to float, raising `InvalidDate` unless it is a finite number."""
    try:
        jd = float(jd)
    except (TypeError, ValueError) as exc:
        raise InvalidDate(f"Julian Date must be a number, got {jd!r}") from exc
    if not math.isfinite(jd):
        raise InvalidDate(f"Julian Date must be finite, got {jd}")
    return jd


def julian_to_date(jd: float) -> date:
    """
    Calendar date nearest to a Julian Date.

    Exact inverse of `date_to_julian` on day boundaries. Fractional dates round
    to the nearest midnight, halves away from zero, so noon belongs to the
    following day.
    """
    jd = check_julian_date(jd)
    ordinal = _round_half_away(jd - JD_GREGORIAN_ORDINAL_OFFSET)
    try:
        return date.fromordinal(ordinal)
    except (ValueError, OverflowError) as exc:
        raise InvalidDate(f"Julian Date {jd} is outside the supported calendar range") from exc


def julian_to_datetime(jd: float) -> datetime:
    """Convert a Julian Date to a UTC datetime, keeping the fractional day to the microsecond."""
    jd = check_julian_date(jd)
    days = jd - JD_GREGORIAN_ORDINAL_OFFSET
    ordinal = math.floor(days)
    microseconds = round((days - ordinal) * DAY * 1e6)
    try:
        midnight = datetime.combine(date.fromordinal(ordinal), time(), tzinfo=timezone.utc)
        return midnight + timedelta(microseconds=microseconds)
    except (ValueError, OverflowError) as exc:
        raise InvalidDate(f"Julian Date {jd} is outside the supported calendar range") from exc


def format_date(jd: float) -> str:
    """``YYYY-MM-DD`` label for a Julian Date; round-trips through `parse_date`."""
    return julian_to_date(jd).isoformat()


def days_since_j2000(jd: float) -> float:
    return jd - J2000


@functools.lru_cache(maxsize=None)
def now() -> date:
    """UTC calendar date at the first call; later calls return the same value."""
    return datetime.now(timezone.utc).date()
