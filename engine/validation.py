"""
Validation
Field rules for medicines, medicine logs and weight logs.

Every validator returns the full list of violated rules (empty when valid)
so callers can report all problems in one response. Validators never raise.
"""

from typing import Any, Iterable, List, Mapping, Optional, Tuple
from datetime import datetime, timedelta, timezone

from config import engine_config
from engine.types import ScheduleType, MealTiming, WeightUnit
from engine.units import ensure_utc, utcnow


SCHEDULE_TYPES = [s.value for s in ScheduleType]
MEAL_TIMINGS = [t.value for t in MealTiming]
WEIGHT_UNITS = [u.value for u in WeightUnit]

EARLIEST_MEASUREMENT = datetime(engine_config.WEIGHT_EARLIEST_YEAR, 1, 1, tzinfo=timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 string or datetime into an aware UTC datetime"""
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return ensure_utc(datetime.fromisoformat(text))
        except ValueError:
            return None
    return None


def _to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _check_text(errors: List[str], value: Any, label: str, max_length: int) -> None:
    if value is None:
        return
    if not isinstance(value, str):
        errors.append(f"{label} must be text")
    elif len(value) > max_length:
        errors.append(f"{label} must be at most {max_length} characters")


# ==================== MEDICINE ====================

def validate_medicine(data: Mapping[str, Any]) -> List[str]:
    """
    Validate a complete medicine definition.

    Keys: name, dose, schedule_type, interval_minutes, interval_days,
    meal_timing, instructions, notes
    """
    errors: List[str] = []

    name = data.get("name")
    if _is_blank(name):
        errors.append("Medicine name is required")
    elif not isinstance(name, str):
        errors.append("Medicine name must be text")
    elif len(name.strip()) > engine_config.NAME_MAX_LENGTH:
        errors.append(f"Medicine name must be at most {engine_config.NAME_MAX_LENGTH} characters")

    dose = data.get("dose")
    if _is_blank(dose):
        errors.append("Dose information is required")
    elif not isinstance(dose, str):
        errors.append("Dose must be text")
    elif len(dose.strip()) > engine_config.DOSE_MAX_LENGTH:
        errors.append(f"Dose must be at most {engine_config.DOSE_MAX_LENGTH} characters")

    schedule_type = data.get("schedule_type")
    if isinstance(schedule_type, ScheduleType):
        schedule_type = schedule_type.value
    if schedule_type not in SCHEDULE_TYPES:
        errors.append(f"Schedule type must be one of: {', '.join(SCHEDULE_TYPES)}")

    if schedule_type == ScheduleType.INTERVAL.value:
        errors.extend(_interval_errors(data.get("interval_minutes"), data.get("interval_days")))

    if schedule_type == ScheduleType.MEAL_BASED.value:
        errors.extend(_meal_timing_errors(data.get("meal_timing")))

    _check_text(errors, data.get("instructions"), "Instructions", engine_config.TEXT_MAX_LENGTH)
    _check_text(errors, data.get("notes"), "Notes", engine_config.TEXT_MAX_LENGTH)

    return errors


def _interval_errors(interval_minutes: Any, interval_days: Any) -> List[str]:
    errors: List[str] = []

    if interval_minutes is None:
        errors.append("Interval minutes required for interval-based schedules")
    elif isinstance(interval_minutes, bool) or not isinstance(interval_minutes, int):
        errors.append("Interval minutes must be a whole number")
    elif interval_minutes <= 0:
        errors.append("Interval minutes must be a positive number")
    elif interval_minutes > engine_config.INTERVAL_MINUTES_MAX:
        errors.append(
            f"Interval minutes cannot exceed 30 days ({engine_config.INTERVAL_MINUTES_MAX} minutes)"
        )

    if interval_days is not None:
        if isinstance(interval_days, bool) or not isinstance(interval_days, int) or interval_days <= 0:
            errors.append("Interval days must be a positive whole number if specified")

    return errors


def _meal_timing_errors(meal_timing: Any) -> List[str]:
    if not meal_timing or not isinstance(meal_timing, (list, tuple)):
        return ["Meal timing is required for meal-based schedules"]

    errors: List[str] = []
    for index, timing in enumerate(meal_timing):
        if isinstance(timing, MealTiming):
            timing = timing.value
        if timing not in MEAL_TIMINGS:
            errors.append(
                f"Invalid meal timing at position {index + 1}. "
                f"Must be one of: {', '.join(MEAL_TIMINGS)}"
            )

    if len(meal_timing) > engine_config.MEAL_TIMING_MAX:
        errors.append(f"Maximum {engine_config.MEAL_TIMING_MAX} meal timings allowed")

    return errors


# ==================== MEDICINE LOG ====================

def validate_medicine_log(
    data: Mapping[str, Any],
    now: Optional[datetime] = None,
    require_medicine: bool = True
) -> List[str]:
    """
    Validate a medicine intake.

    Keys: medicine_id, taken_at, dosage_taken, notes. taken_at may be
    omitted (the caller defaults it to now).
    """
    errors: List[str] = []
    now = ensure_utc(now) if now else utcnow()

    if require_medicine and _is_blank(data.get("medicine_id")):
        errors.append("Medicine ID is required")

    taken_at = data.get("taken_at")
    if taken_at is not None:
        parsed = parse_timestamp(taken_at)
        if parsed is None:
            errors.append("Invalid timestamp format")
        elif parsed > now:
            errors.append("Cannot log medicine for future dates")
        elif parsed < now - timedelta(days=engine_config.LOG_MAX_AGE_DAYS):
            errors.append("Cannot log medicine older than 1 year")

    _check_text(errors, data.get("dosage_taken"), "Dosage taken", engine_config.DOSAGE_TAKEN_MAX_LENGTH)
    _check_text(errors, data.get("notes"), "Notes", engine_config.TEXT_MAX_LENGTH)

    return errors


def duplicate_window(
    taken_at: datetime,
    minutes: int = engine_config.DUPLICATE_LOG_WINDOW_MINUTES
) -> Tuple[datetime, datetime]:
    """Inclusive range around an intake in which another intake is a duplicate"""
    taken_at = ensure_utc(taken_at)
    delta = timedelta(minutes=minutes)
    return taken_at - delta, taken_at + delta


def find_duplicates(
    existing: Iterable[Any],
    taken_at: datetime,
    minutes: int = engine_config.DUPLICATE_LOG_WINDOW_MINUTES
) -> List[Any]:
    """Existing intakes that fall inside the duplicate window of taken_at"""
    start, end = duplicate_window(taken_at, minutes)
    return [log for log in existing if start <= ensure_utc(log.taken_at) <= end]


# ==================== WEIGHT LOG ====================

def validate_weight_log(
    data: Mapping[str, Any],
    now: Optional[datetime] = None
) -> List[str]:
    """
    Validate a weight measurement as entered by the user.

    Keys: weight (in `unit`), unit, logged_at, body_fat_percentage,
    muscle_mass, notes
    """
    errors: List[str] = []
    now = ensure_utc(now) if now else utcnow()

    weight = data.get("weight")
    if _is_blank(weight):
        errors.append("Weight value is required")
    else:
        value = _to_number(weight)
        if value is None:
            errors.append("Weight must be a valid number")
        elif value <= 0:
            errors.append("Weight must be greater than 0")
        elif value > engine_config.WEIGHT_MAX:
            errors.append(f"Weight must be at most {engine_config.WEIGHT_MAX:g}")

    unit = data.get("unit")
    if isinstance(unit, WeightUnit):
        unit = unit.value
    if not isinstance(unit, str) or unit.lower() not in WEIGHT_UNITS:
        errors.append(f"Unit must be one of: {', '.join(WEIGHT_UNITS)}")

    logged_at = data.get("logged_at")
    if logged_at is not None:
        parsed = parse_timestamp(logged_at)
        if parsed is None:
            errors.append("Invalid measurement timestamp format")
        elif parsed > now:
            errors.append("Cannot log weight for future dates")
        elif parsed < EARLIEST_MEASUREMENT:
            errors.append("Measurement date is too far in the past")

    body_fat = data.get("body_fat_percentage")
    if body_fat is not None:
        value = _to_number(body_fat)
        if value is None or value < 0 or value > 100:
            errors.append("Body fat percentage must be between 0 and 100")

    muscle_mass = data.get("muscle_mass")
    if muscle_mass is not None:
        value = _to_number(muscle_mass)
        if value is None or value < 0:
            errors.append("Muscle mass must be a positive number")

    _check_text(errors, data.get("notes"), "Notes", engine_config.TEXT_MAX_LENGTH)

    return errors
