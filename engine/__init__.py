"""
Engine Package
Pure scheduling and analytics functions for MedTracker
"""

from .types import (
    ScheduleType,
    MealTiming,
    WeightUnit,
    Trend,
    IntervalSchedule,
    MealBasedSchedule,
    Schedule,
    schedule_from_fields,
    MedicineInput,
    IntakeRecord,
    WeightRecord,
    IntervalNextDose,
    MealBasedNextDose,
    NextDoseInfo,
    MedicineAdherence,
    DailyStat,
    AdherenceReport,
    WeeklyAverage,
    TimelineEntry,
    TrendReport,
)

from .units import (
    convert_weight,
    ensure_utc,
    utcnow,
    window_days,
    window_minutes,
    week_start,
    last_day,
)

from .schedule import next_dose

from .adherence import adherence

from .trends import trends, classify_trend

from .validation import (
    validate_medicine,
    validate_medicine_log,
    validate_weight_log,
    parse_timestamp,
    duplicate_window,
    find_duplicates,
)

__all__ = [
    # Types
    "ScheduleType",
    "MealTiming",
    "WeightUnit",
    "Trend",
    "IntervalSchedule",
    "MealBasedSchedule",
    "Schedule",
    "schedule_from_fields",
    "MedicineInput",
    "IntakeRecord",
    "WeightRecord",
    "IntervalNextDose",
    "MealBasedNextDose",
    "NextDoseInfo",
    "MedicineAdherence",
    "DailyStat",
    "AdherenceReport",
    "WeeklyAverage",
    "TimelineEntry",
    "TrendReport",

    # Units and windows
    "convert_weight",
    "ensure_utc",
    "utcnow",
    "window_days",
    "window_minutes",
    "week_start",
    "last_day",

    # Analyzers
    "next_dose",
    "adherence",
    "trends",
    "classify_trend",

    # Validation
    "validate_medicine",
    "validate_medicine_log",
    "validate_weight_log",
    "parse_timestamp",
    "duplicate_window",
    "find_duplicates",
]
