"""Expiry date parsing and day arithmetic.

Purchase data mixes several regional date formats, so :func:`parse_expiry` is
deliberately lenient.  It never raises: anything it cannot read becomes
``None`` and the batch is reported with an unknown status.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, timedelta
from typing import Optional

from .models import ExpiryStatus

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[/.]")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_YEAR_MONTH_DAY = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})(?:[T ].*)?$")
_YEAR_MONTH = re.compile(r"^(\d{4})-(\d{1,2})$")


def _lenient_int(part: str) -> Optional[int]:
    # "15abc" reads as 15, "abc" does not read at all
    match = _LEADING_INT.match(part)
    return int(match.group(1)) if match else None


def _short_year(year: int) -> int:
    return year + 2000 if year < 100 else year


def _month_start(year: int, month: int) -> date:
    """First day of ``month``, rolling months outside 1..12 into other years."""

    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    return date(year, month, 1)


def _parse_iso(text: str) -> Optional[date]:
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    # unpadded "2024-6-5"; impossible dates raise and read as unparseable
    match = _YEAR_MONTH_DAY.match(text)
    if match:
        return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    match = _YEAR_MONTH.match(text)
    if match:
        year, month = int(match.group(1)), int(match.group(2))
        if 1 <= month <= 12:
            return date(year, month, 1)
    return None


def _parse_day_month_year(day: int, month: int, year: int) -> date:
    return _month_start(_short_year(year), month) + timedelta(days=day - 1)


def _parse_month_year(month: int, year: int) -> date:
    # last day of the month: the day before the next month starts
    return _month_start(_short_year(year), month + 1) - timedelta(days=1)


def parse_expiry(text: Optional[str]) -> Optional[date]:
    """Parse an expiry string into a date.

    Accepted shapes, in order of precedence:

    * anything containing ``-`` is read as ISO (``2024-06-30``, ``2024-06``);
    * three parts separated by ``/`` or ``.`` are ``DD/MM/YYYY``;
    * two parts are ``MM/YYYY`` and resolve to the last day of that month.

    Two-digit years are taken as 20xx.  Returns ``None`` for anything else.
    """

    if text is None:
        return None
    value = str(text).strip()
    if not value:
        return None

    try:
        if "-" in value:
            parsed = _parse_iso(value)
        else:
            numbers = [_lenient_int(p) for p in _SEPARATORS.split(value)]
            if None in numbers:
                parsed = None
            elif len(numbers) == 3:
                parsed = _parse_day_month_year(*numbers)
            elif len(numbers) == 2:
                parsed = _parse_month_year(*numbers)
            else:
                parsed = None
    except (ValueError, OverflowError):
        parsed = None

    if parsed is None:
        logger.debug("Unparseable expiry date %r", value)
    return parsed


def days_left(expiry: Optional[date], today: date) -> Optional[int]:
    """Whole days from ``today`` until the end of ``expiry``.

    A batch expiring today has 0 days left, one that expired yesterday -1.
    Returns ``None`` when there is no expiry date.
    """

    if expiry is None:
        return None
    return (expiry - today).days


def classify(days: Optional[int], threshold: int) -> ExpiryStatus:
    if days is None:
        return ExpiryStatus.UNKNOWN
    if days < 0:
        return ExpiryStatus.EXPIRED
    if days <= threshold:
        return ExpiryStatus.NEAR
    return ExpiryStatus.SAFE


__all__ = ["classify", "days_left", "parse_expiry"]
