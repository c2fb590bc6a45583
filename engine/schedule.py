"""
Schedule Calculator
Works out when a medicine is next due from its schedule and last intake
"""

from typing import Optional
from datetime import datetime, timedelta

from engine.types import (
    MedicineInput,
    IntakeRecord,
    IntervalSchedule,
    IntervalNextDose,
    MealBasedNextDose,
    NextDoseInfo,
)
from engine.units import ensure_utc, utcnow


def next_dose(
    medicine: MedicineInput,
    last_log: Optional[IntakeRecord] = None,
    now: Optional[datetime] = None
) -> NextDoseInfo:
    """
    Compute the next expected dose for a medicine.

    Interval schedules are due `interval_minutes` after the last intake, or
    immediately when nothing has been logged yet. Meal-based schedules have no
    clock time; the configured meal timings are echoed back instead.

    Args:
        medicine: Validated medicine
        last_log: Most recent intake for this medicine, if any
        now: Reference time (default: current UTC time)

    Returns:
        IntervalNextDose or MealBasedNextDose
    """
    now = ensure_utc(now) if now else utcnow()
    last_dose_at = ensure_utc(last_log.taken_at) if last_log else None
    schedule = medicine.schedule

    if isinstance(schedule, IntervalSchedule):
        if last_dose_at is None:
            return IntervalNextDose(
                next_dose_at=now,
                interval_minutes=schedule.interval_minutes,
                interval_days=schedule.interval_days,
                last_dose_at=None,
                is_overdue=False
            )

        next_at = last_dose_at + timedelta(minutes=schedule.interval_minutes)
        return IntervalNextDose(
            next_dose_at=next_at,
            interval_minutes=schedule.interval_minutes,
            interval_days=schedule.interval_days,
            last_dose_at=last_dose_at,
            is_overdue=next_at < now
        )

    return MealBasedNextDose(
        meal_timing=schedule.meal_timing,
        last_dose_at=last_dose_at
    )
