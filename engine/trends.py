"""
Weight Trend Analyzer
Summary statistics, trend direction and weekly series for weight logs
"""

from typing import Dict, List, Iterable
from collections import defaultdict
from datetime import datetime, date

from config import engine_config
from engine.types import (
    WeightRecord,
    Trend,
    TrendReport,
    WeeklyAverage,
    TimelineEntry,
)
from engine.units import convert_weight, calendar_day, week_start, ensure_utc


def classify_trend(weight_change: float) -> Trend:
    """Stable within the threshold, otherwise the sign of the change"""
    if abs(weight_change) <= engine_config.TREND_STABLE_THRESHOLD:
        return Trend.STABLE
    return Trend.INCREASING if weight_change > 0 else Trend.DECREASING


def trends(
    weights: Iterable[WeightRecord],
    window_start: datetime,
    window_end: datetime,
    display_unit: str = "kg"
) -> TrendReport:
    """
    Analyze weight measurements over a window.

    Args:
        weights: Measurements inside the window (canonical kg)
        window_start: Window start
        window_end: Window end
        display_unit: Unit for every reported weight (kg, lbs, pounds)

    Returns:
        TrendReport; trend is NO_DATA when there are no measurements
    """
    unit = (display_unit or "kg").lower()
    report = TrendReport(
        window_start=ensure_utc(window_start),
        window_end=ensure_utc(window_end),
        unit=unit
    )

    entries = sorted(weights, key=lambda w: ensure_utc(w.logged_at))
    if not entries:
        return report

    converted = [convert_weight(w.weight_kg, "kg", unit) for w in entries]

    first_weight = converted[0]
    last_weight = converted[-1]
    weight_change = last_weight - first_weight
    average_weight = sum(converted) / len(converted)

    report.total_entries = len(entries)
    report.first_weight = round(first_weight, 2)
    report.last_weight = round(last_weight, 2)
    report.weight_change = round(weight_change, 2)
    report.average_weight = round(average_weight, 2)
    report.min_weight = round(min(converted), 2)
    report.max_weight = round(max(converted), 2)
    report.trend = classify_trend(weight_change)

    weekly_groups: Dict[date, List[float]] = defaultdict(list)
    for entry, value in zip(entries, converted):
        weekly_groups[week_start(calendar_day(entry.logged_at))].append(value)

        report.timeline.append(TimelineEntry(
            id=entry.id,
            weight=round(value, 2),
            logged_at=ensure_utc(entry.logged_at),
            notes=entry.notes,
            body_fat_percentage=entry.body_fat_percentage,
            muscle_mass=entry.muscle_mass
        ))

    report.weekly_averages = [
        WeeklyAverage(
            week_start=week,
            average_weight=round(sum(values) / len(values), 2),
            entry_count=len(values)
        )
        for week, values in sorted(weekly_groups.items())
    ]

    return report
