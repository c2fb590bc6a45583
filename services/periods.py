"""
Analytics window resolution for the adherence and trends endpoints
"""

from typing import Optional, Tuple
from datetime import datetime, date, time, timedelta, timezone

from config import engine_config
from engine.units import ensure_utc, utcnow


def day_start(day: date) -> datetime:
    """Midnight UTC at the start of `day`"""
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def day_after(day: date) -> datetime:
    """Midnight UTC at the end of `day`, the exclusive bound for a day range"""
    if day >= date.max:
        return datetime.max.replace(tzinfo=timezone.utc)
    return day_start(day + timedelta(days=1))


def resolve_window(
    period: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    now: Optional[datetime] = None,
    default: str = engine_config.ADHERENCE_DEFAULT_PERIOD
) -> Tuple[datetime, datetime]:
    """
    Turn query parameters into a half-open [start, end) UTC window.

    An explicit start_date and end_date cover both days in full, so the window
    ends at the midnight after end_date and spans a whole number of days.
    Otherwise the window ends now and reaches back the number of days named by
    `period`, falling back to `default` for unknown or missing periods.
    """
    if start_date and end_date:
        return day_start(start_date), day_after(end_date)

    end = ensure_utc(now) if now else utcnow()
    days = engine_config.PERIOD_DAYS.get(period or default, engine_config.PERIOD_DAYS[default])
    return end - timedelta(days=days), end
