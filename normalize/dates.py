"""
Date normalization for spreadsheet exports.

Raw dates arrive as spreadsheet serial numbers (days since 1899-12-30),
ISO or RFC 2822 strings, or day-first strings with '/', '.' or '-'
separators. Every successfully parsed value becomes a calendar day pinned to
12:00 so that day keys do not drift across timezone or DST boundaries.
"""

import email.utils
import logging
import math
import re
from datetime import datetime, timedelta
from numbers import Real
from typing import Any, Optional, Union

from dateutil import parser as dtparser

from normalize.models import UNKNOWN

logger = logging.getLogger(__name__)

# serial 25569 is 1970-01-01 in the 1900 spreadsheet date system
SERIAL_EPOCH_OFFSET = 25569
UNIX_EPOCH = datetime(1970, 1, 1)
NEUTRAL_HOUR = 12

_SEPARATORS = re.compile(r"[/.\-]")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_SERIAL_TEXT = re.compile(r"^\d+(\.\d+)?$")

_MONTH_NAME = re.compile(r"[A-Za-z]{3}")
_DIGIT = re.compile(r"\d")


class DateMissing:
    """Raw value was empty or the literal "Unknown"."""

    def __init__(self, raw: Any = None):
        self.raw = raw

    def __bool__(self):
        return False

    def __repr__(self):
        return f"DateMissing({self.raw!r})"


class DateUnparseable:
    """Raw value was present but could not be read as a date."""

    def __init__(self, raw: Any):
        self.raw = raw

    def __bool__(self):
        return False

    def __repr__(self):
        return f"DateUnparseable({self.raw!r})"


DateResult = Union[datetime, DateMissing, DateUnparseable]


def pin_to_noon(d: datetime) -> datetime:
    return datetime(d.year, d.month, d.day, NEUTRAL_HOUR, 0, 0, 0)


def serial_to_date(serial: float) -> datetime:
    """Convert a spreadsheet serial to a calendar day; the time-of-day fraction is discarded."""
    millis = round((float(serial) - SERIAL_EPOCH_OFFSET) * 86400 * 1000)
    return pin_to_noon(UNIX_EPOCH + timedelta(milliseconds=millis))


def _leading_int(text: str) -> Optional[int]:
    m = _LEADING_INT.match(text)
    return int(m.group(1)) if m else None


def _parse_standard(text: str) -> Optional[datetime]:
    """Direct parse of standard forms: ISO 8601, RFC 2822, then named-month text ("5 Mar 2024").

    The written calendar day is kept even when an offset is present.
    """
    try:
        return dtparser.isoparse(text)
    except (ValueError, OverflowError):
        pass
    try:
        return email.utils.parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        pass
    if not (_MONTH_NAME.search(text) and _DIGIT.search(text)):
        return None
    try:
        return dtparser.parse(text, dayfirst=True)
    except (ValueError, OverflowError):
        return None


def _parse_positional(text: str) -> Optional[datetime]:
    """Read 'day<sep>month<sep>year'; two-digit years are taken as 20xx.

    A four-digit leading part is read as year-first (e.g. "2024-3-5").
    """
    parts = _SEPARATORS.split(text)
    if len(parts) < 3:
        return None
    first, second, third = (_leading_int(p) for p in parts[:3])
    if first is None or second is None or third is None:
        return None
    if len(parts[0].strip()) == 4:
        year, month, day = first, second, third
    else:
        day, month, year = first, second, third
    if 0 <= year < 100:
        year += 2000
    try:
        return datetime(year, month, day)
    except (ValueError, OverflowError):
        return None


def parse_date(raw: Any) -> DateResult:
    """Parse a raw date value.

    Returns a datetime pinned to noon, DateMissing for empty/"Unknown" values
    or DateUnparseable for anything else that cannot be read. Never raises.
    """
    if raw is None or raw == '' or raw == UNKNOWN:
        return DateMissing(raw)
    if isinstance(raw, datetime):
        return pin_to_noon(raw)
    if isinstance(raw, bool):
        return DateUnparseable(raw)
    if isinstance(raw, Real):
        if not math.isfinite(float(raw)):
            return DateUnparseable(raw)
        try:
            return serial_to_date(raw)
        except (OverflowError, ValueError):
            return DateUnparseable(raw)
    if not isinstance(raw, str):
        return DateUnparseable(raw)

    text = raw.strip()
    if not text or text == UNKNOWN:
        return DateMissing(raw)
    if _SERIAL_TEXT.match(text):
        # serials exported as text, e.g. "46044"
        return parse_date(float(text))
    parsed = _parse_standard(text) or _parse_positional(text)
    if parsed is None:
        logger.debug("Unparseable date value: %r", raw)
        return DateUnparseable(raw)
    return pin_to_noon(parsed)


def normalize_date(raw: Any) -> Optional[datetime]:
    """Like parse_date but collapses both failure kinds to None."""
    result = parse_date(raw)
    return result if isinstance(result, datetime) else None


def day_key(d: datetime) -> str:
    """YYYY-MM-DD key from the local calendar fields of d."""
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def raw_day_key(raw: Any) -> Optional[str]:
    """Day key for a raw date value, or None when it does not normalize."""
    d = normalize_date(raw)
    return day_key(d) if d else None


def format_day_label(key: str, with_year: bool = True) -> str:
    """Render a day key as DD-Mon-YYYY (or DD-Mon) for display; anything else is returned unchanged."""
    try:
        d = datetime.strptime(str(key), "%Y-%m-%d")
    except ValueError:
        return str(key)
    label = f"{d.day:02d}-{d.strftime('%b')}"
    return f"{label}-{d.year}" if with_year else label
