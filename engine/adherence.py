"""
Adherence Analyzer
Expected vs. taken doses per medicine over a caller-supplied window
"""

import logging
import math
from typing import Dict, List, Iterable, Set
from collections import defaultdict
from datetime import datetime, date

from config import engine_config
from engine.types import (
    MedicineInput,
    IntakeRecord,
    IntervalSchedule,
    MedicineAdherence,
    DailyStat,
    AdherenceReport,
)
from engine.units import calendar_day, window_days, window_minutes, ensure_utc


logger = logging.getLogger(__name__)


def expected_doses(medicine: MedicineInput, minutes: float, total_days: int) -> int:
    """Doses a medicine should have had over a window"""
    schedule = medicine.schedule
    if isinstance(schedule, IntervalSchedule):
        return math.floor(minutes / schedule.interval_minutes)
    # Fixed three-meals-a-day estimate, independent of how many timings are set
    return total_days * engine_config.MEAL_BASED_DOSES_PER_DAY


def adherence_rate(taken: int, expected: int) -> float:
    """Percentage of expected doses taken, clamped to [0, 100], one decimal"""
    if expected <= 0:
        return 0.0
    rate = taken / expected * 100
    return round(min(100.0, max(0.0, rate)), 1)


def adherence(
    medicines: Iterable[MedicineInput],
    logs: Iterable[IntakeRecord],
    window_start: datetime,
    window_end: datetime,
    include_idle: bool = False
) -> AdherenceReport:
    """
    Build an adherence report for a window.

    The per-medicine list is driven by the logs: a medicine only appears when
    it has at least one intake in the window, unless include_idle is set, in
    which case every medicine is reported and those without intakes show
    zero. Logs for medicines missing from `medicines` count towards
    daily_stats only.

    Args:
        medicines: Medicines under analysis
        logs: Intakes with taken_at inside [window_start, window_end]
        window_start: Window start
        window_end: Window end
        include_idle: Report medicines that have no intakes

    Returns:
        AdherenceReport
    """
    window_start = ensure_utc(window_start)
    window_end = ensure_utc(window_end)
    total_days = window_days(window_start, window_end)
    minutes = window_minutes(window_start, window_end)

    by_id: Dict[str, MedicineInput] = {m.id: m for m in medicines}
    taken: Dict[str, int] = defaultdict(int)
    days_active: Dict[str, Set[date]] = defaultdict(set)
    daily: Dict[date, int] = defaultdict(int)
    order: List[str] = []

    for log in logs:
        day = calendar_day(log.taken_at)
        daily[day] += 1

        if log.medicine_id not in by_id:
            logger.debug(f"Intake {log.id} references unknown medicine {log.medicine_id}")
            continue

        if log.medicine_id not in taken:
            order.append(log.medicine_id)
        taken[log.medicine_id] += 1
        days_active[log.medicine_id].add(day)

    if include_idle:
        order.extend(mid for mid in by_id if mid not in taken)

    report = AdherenceReport(
        window_start=window_start,
        window_end=window_end,
        total_days=total_days
    )

    for medicine_id in order:
        medicine = by_id[medicine_id]
        expected = expected_doses(medicine, minutes, total_days)
        schedule = medicine.schedule

        report.medicines.append(MedicineAdherence(
            medicine_id=medicine.id,
            medicine_name=medicine.name,
            schedule_type=medicine.schedule_type,
            interval_minutes=schedule.interval_minutes if isinstance(schedule, IntervalSchedule) else None,
            total_taken=taken.get(medicine_id, 0),
            expected_doses=expected,
            days_active=len(days_active.get(medicine_id, ())),
            total_days=total_days,
            adherence_rate=adherence_rate(taken.get(medicine_id, 0), expected)
        ))

    report.daily_stats = [
        DailyStat(date=day, total_taken=count)
        for day, count in sorted(daily.items())
    ]

    return report
