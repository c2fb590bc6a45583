"""
Unit conversion and time-window helpers shared by the analyzers
"""

import math
from datetime import datetime, date, timedelta, timezone

from config import engine_config


_POUND_UNITS = ("lbs", "pounds")


def convert_weight(value: float, from_unit: str, to_unit: str) -> float:
    """
    Convert a weight between kg, lbs and pounds.

    Kilograms are the intermediate. An unknown source unit returns the value
    unchanged; an unknown target unit returns the kilogram value.
    """
    source = (from_unit or "").lower()
    target = (to_unit or "").lower()

    if source == "kg":
        value_kg = value
    elif source in _POUND_UNITS:
        value_kg = value * engine_config.LBS_TO_KG
    else:
        return value

    if target in _POUND_UNITS:
        return value_kg * engine_config.KG_TO_LBS
    return value_kg


def ensure_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC and normalize aware ones to UTC"""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def calendar_day(moment: datetime) -> date:
    """UTC calendar day of a timestamp"""
    return ensure_utc(moment).date()


def window_minutes(start: datetime, end: datetime) -> float:
    return (ensure_utc(end) - ensure_utc(start)).total_seconds() / 60


def window_days(start: datetime, end: datetime) -> int:
    """Whole days covered by a window, rounded up"""
    return math.ceil((ensure_utc(end) - ensure_utc(start)) / timedelta(days=1))


def week_start(day: date) -> date:
    """Sunday on or before the given day"""
    # weekday(): Monday=0 .. Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def last_day(window_end: datetime) -> date:
    """Last UTC day a half-open window still covers"""
    return calendar_day(ensure_utc(window_end) - timedelta(microseconds=1))
