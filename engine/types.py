"""
Engine Types
Plain records consumed and produced by the scheduling and analytics engine
"""

from typing import Dict, List, Optional, Any, Tuple, Union
from dataclasses import dataclass, field
from datetime import datetime, date
from enum import Enum

from .units import last_day


class ScheduleType(str, Enum):
    """How a medicine's doses are scheduled"""
    INTERVAL = "interval"
    MEAL_BASED = "meal_based"


class MealTiming(str, Enum):
    """Timing relative to meals"""
    BEFORE_MEAL = "before_meal"
    AFTER_MEAL = "after_meal"
    WITH_MEAL = "with_meal"


class WeightUnit(str, Enum):
    """Accepted weight units"""
    KG = "kg"
    LBS = "lbs"
    POUNDS = "pounds"


class Trend(str, Enum):
    """Direction of weight change over a window"""
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"
    NO_DATA = "no_data"


# ==================== SCHEDULES ====================

@dataclass(frozen=True)
class IntervalSchedule:
    """Doses every fixed number of minutes"""
    interval_minutes: int
    interval_days: Optional[int] = None

    @property
    def type(self) -> ScheduleType:
        return ScheduleType.INTERVAL


@dataclass(frozen=True)
class MealBasedSchedule:
    """Doses tied to meals; ordered, duplicates allowed"""
    meal_timing: Tuple[MealTiming, ...]

    @property
    def type(self) -> ScheduleType:
        return ScheduleType.MEAL_BASED


Schedule = Union[IntervalSchedule, MealBasedSchedule]


def schedule_from_fields(
    schedule_type: str,
    interval_minutes: Optional[int] = None,
    interval_days: Optional[int] = None,
    meal_timing: Optional[List[str]] = None
) -> Schedule:
    """
    Build a Schedule from the flat column representation.

    Expects fields that already passed validate_medicine.
    """
    if ScheduleType(schedule_type) == ScheduleType.INTERVAL:
        return IntervalSchedule(
            interval_minutes=int(interval_minutes),
            interval_days=interval_days
        )
    return MealBasedSchedule(
        meal_timing=tuple(MealTiming(t) for t in (meal_timing or []))
    )


# ==================== INPUT RECORDS ====================

@dataclass(frozen=True)
class MedicineInput:
    """A medicine as seen by the engine"""
    id: str
    name: str
    schedule: Schedule
    dose: Optional[str] = None

    @property
    def schedule_type(self) -> ScheduleType:
        return self.schedule.type

    @classmethod
    def from_row(cls, row: Any) -> "MedicineInput":
        """Build from any object exposing the medicines table columns"""
        return cls(
            id=str(row.id),
            name=row.name,
            dose=getattr(row, "dose", None),
            schedule=schedule_from_fields(
                row.schedule_type,
                interval_minutes=row.interval_minutes,
                interval_days=row.interval_days,
                meal_timing=row.meal_timing
            )
        )


@dataclass(frozen=True)
class IntakeRecord:
    """A single medicine intake event"""
    medicine_id: str
    taken_at: datetime
    id: Optional[str] = None

    @classmethod
    def from_row(cls, row: Any) -> "IntakeRecord":
        return cls(
            id=str(row.id) if row.id is not None else None,
            medicine_id=str(row.medicine_id),
            taken_at=row.taken_at
        )


@dataclass(frozen=True)
class WeightRecord:
    """A weight measurement stored in canonical kilograms"""
    weight_kg: float
    logged_at: datetime
    id: Optional[str] = None
    notes: Optional[str] = None
    body_fat_percentage: Optional[float] = None
    muscle_mass: Optional[float] = None

    @classmethod
    def from_row(cls, row: Any) -> "WeightRecord":
        return cls(
            id=str(row.id) if row.id is not None else None,
            weight_kg=float(row.weight_kg),
            logged_at=row.logged_at,
            notes=row.notes,
            body_fat_percentage=row.body_fat_percentage,
            muscle_mass=row.muscle_mass
        )


# ==================== NEXT DOSE ====================

@dataclass
class IntervalNextDose:
    """Next dose for an interval schedule"""
    next_dose_at: datetime
    interval_minutes: int
    is_overdue: bool
    interval_days: Optional[int] = None
    last_dose_at: Optional[datetime] = None
    type: ScheduleType = ScheduleType.INTERVAL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "next_dose_at": self.next_dose_at.isoformat(),
            "interval_minutes": self.interval_minutes,
            "interval_days": self.interval_days,
            "last_dose_at": self.last_dose_at.isoformat() if self.last_dose_at else None,
            "is_overdue": self.is_overdue
        }


@dataclass
class MealBasedNextDose:
    """Meal-based schedules have no clock time, only the configured timings"""
    meal_timing: Tuple[MealTiming, ...]
    last_dose_at: Optional[datetime] = None
    instructions: str = "Take as scheduled with meals"
    type: ScheduleType = ScheduleType.MEAL_BASED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "meal_timing": [t.value for t in self.meal_timing],
            "instructions": self.instructions,
            "last_dose_at": self.last_dose_at.isoformat() if self.last_dose_at else None
        }


NextDoseInfo = Union[IntervalNextDose, MealBasedNextDose]


# ==================== ADHERENCE ====================

@dataclass
class MedicineAdherence:
    """Adherence figures for one medicine over a window"""
    medicine_id: str
    medicine_name: str
    schedule_type: ScheduleType
    total_taken: int
    expected_doses: int
    days_active: int
    total_days: int
    adherence_rate: float
    interval_minutes: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "medicine_id": self.medicine_id,
            "medicine_name": self.medicine_name,
            "schedule_type": self.schedule_type.value,
            "interval_minutes": self.interval_minutes,
            "total_taken": self.total_taken,
            "expected_doses": self.expected_doses,
            "days_active": self.days_active,
            "total_days": self.total_days,
            "adherence_rate": self.adherence_rate
        }


@dataclass
class DailyStat:
    """Doses logged on one calendar day across all medicines"""
    date: date
    total_taken: int

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date.isoformat(), "total_taken": self.total_taken}


@dataclass
class AdherenceReport:
    """Per-medicine adherence plus daily totals"""
    window_start: datetime
    window_end: datetime
    total_days: int
    medicines: List[MedicineAdherence] = field(default_factory=list)
    daily_stats: List[DailyStat] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period": {
                "start": self.window_start.date().isoformat(),
                "end": last_day(self.window_end).isoformat(),
                "total_days": self.total_days
            },
            "medicines": [m.to_dict() for m in self.medicines],
            "daily_stats": [d.to_dict() for d in self.daily_stats]
        }


# ==================== WEIGHT TRENDS ====================

@dataclass
class WeeklyAverage:
    """Mean weight for a Sunday-aligned week"""
    week_start: date
    average_weight: float
    entry_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "week_start": self.week_start.isoformat(),
            "average_weight": self.average_weight,
            "entry_count": self.entry_count
        }


@dataclass
class TimelineEntry:
    """One measurement converted to the display unit"""
    weight: float
    logged_at: datetime
    id: Optional[str] = None
    notes: Optional[str] = None
    body_fat_percentage: Optional[float] = None
    muscle_mass: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "weight": self.weight,
            "logged_at": self.logged_at.isoformat(),
            "notes": self.notes,
            "body_fat_percentage": self.body_fat_percentage,
            "muscle_mass": self.muscle_mass
        }


@dataclass
class TrendReport:
    """Weight summary, trend and charting series"""
    window_start: datetime
    window_end: datetime
    unit: str
    total_entries: int = 0
    average_weight: float = 0.0
    weight_change: float = 0.0
    trend: Trend = Trend.NO_DATA
    first_weight: Optional[float] = None
    last_weight: Optional[float] = None
    min_weight: Optional[float] = None
    max_weight: Optional[float] = None
    weekly_averages: List[WeeklyAverage] = field(default_factory=list)
    timeline: List[TimelineEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period": {
                "start": self.window_start.date().isoformat(),
                "end": last_day(self.window_end).isoformat()
            },
            "analytics": {
                "total_entries": self.total_entries,
                "first_weight": self.first_weight,
                "last_weight": self.last_weight,
                "weight_change": self.weight_change,
                "average_weight": self.average_weight,
                "min_weight": self.min_weight,
                "max_weight": self.max_weight,
                "trend": self.trend.value,
                "unit": self.unit
            },
            "timeline": [t.to_dict() for t in self.timeline],
            "weekly_averages": [w.to_dict() for w in self.weekly_averages]
        }
