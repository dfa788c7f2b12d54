from __future__ import annotations

import calendar
from datetime import date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.config import settings


try:
    LOCAL_ZONE = ZoneInfo(settings.TIMEZONE)
except ZoneInfoNotFoundError:
    LOCAL_ZONE = ZoneInfo("Asia/Seoul")


def today_local() -> date:
    """Return today's date in the configured local timezone."""
    return datetime.now(LOCAL_ZONE).date()


def _add_month(year: int, month: int, delta: int) -> tuple[int, int]:
    total = year * 12 + (month - 1) + delta
    return total // 12, total % 12 + 1


def add_months(start: date, months: int) -> date:
    """Shift ``start`` by whole calendar months.

    The day of month is kept when the target month has it; otherwise it is
    clamped to the target month's last day (Jan 31 + 1 month -> Feb 28/29).
    """
    year, month = _add_month(start.year, start.month, months)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(start.day, last_day))


def months_between(start: date, end: date) -> int:
    """Calendar-month distance from ``start`` to ``end`` ignoring the day of month.

    May be negative when ``end`` precedes ``start``.
    """
    return (end.year - start.year) * 12 + (end.month - start.month)
