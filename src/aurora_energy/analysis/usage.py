"""Aggregate meter reading histories into usage statistics.

All functions are pure: the caller supplies the readings and the reference
instant ("now"), nothing here reads the clock.
"""

import logging
import math
from datetime import date, datetime, timedelta
from typing import Iterable

from ..models import (
    SME_BANDS,
    AggregatedStats,
    Category,
    EfficiencyBands,
    HourlyUsage,
    HOUSEHOLD_BANDS,
    Household,
    Industry,
    MeterReading,
    PeakHour,
    SME,
    ValidationError,
    WeekdayUsage,
    resolve_category,
)

logger = logging.getLogger(__name__)

WEEK_DAYS = 7
PEAK_HOURS_LIMIT = 3
TREND_UPPER = 1.1  # > previous * 1.1 -> 'up'
TREND_LOWER = 0.9  # < previous * 0.9 -> 'down'
DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def validate_readings(readings: Iterable[MeterReading]) -> list[MeterReading]:
    """Check each reading and return them as a new list."""
    checked = []
    for i, reading in enumerate(readings):
        prefix = f"readings[{i}]"
        if not isinstance(reading, MeterReading):
            raise ValidationError(prefix, f"expected a MeterReading, got {type(reading).__name__}")
        if not isinstance(reading.timestamp, datetime):
            raise ValidationError(f"{prefix}.timestamp", f"expected a datetime, got {reading.timestamp!r}")
        for name in ("kwh_consumed", "total_cost"):
            value = getattr(reading, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise ValidationError(f"{prefix}.{name}", f"expected a finite number, got {value!r}")
            if value < 0:
                raise ValidationError(f"{prefix}.{name}", f"must be >= 0, got {value!r}")
        if not isinstance(reading.meter_id, str):
            raise ValidationError(f"{prefix}.meter_id", f"expected a string, got {reading.meter_id!r}")
        checked.append(reading)
    return checked


def to_local(ts: datetime, reference: datetime) -> datetime:
    """Naive wall-clock time of a timestamp in the reference's timezone.

    Aware timestamps are converted when the reference is aware too; if either
    side is naive, wall-clock values are used as-is.
    """
    if ts.tzinfo is not None and reference.tzinfo is not None:
        ts = ts.astimezone(reference.tzinfo)
    return ts.replace(tzinfo=None)


def daily_totals(readings: list[MeterReading], reference: datetime) -> dict[date, tuple[float, float]]:
    """Sum (kWh, cost) per local calendar date."""
    totals: dict[date, tuple[float, float]] = {}
    for r in readings:
        day = to_local(r.timestamp, reference).date()
        kwh, cost = totals.get(day, (0.0, 0.0))
        totals[day] = (kwh + r.kwh_consumed, cost + r.total_cost)
    return totals


def weekly_average(totals: dict[date, tuple[float, float]], today: date) -> float:
    """Average daily kWh over the trailing seven days, today included.

    Days without readings count as zero rather than being skipped.
    """
    start = today - timedelta(days=WEEK_DAYS - 1)
    week_kwh = sum(kwh for day, (kwh, _) in totals.items() if start <= day <= today)
    return week_kwh / WEEK_DAYS


def rank_peak_hours(readings: list[MeterReading], reference: datetime) -> tuple[PeakHour, ...]:
    """Top hours of the day by summed usage, earlier hour first on ties."""
    buckets: dict[int, float] = {}
    for r in readings:
        hour = to_local(r.timestamp, reference).hour
        buckets[hour] = buckets.get(hour, 0.0) + r.kwh_consumed

    ranked = sorted(buckets.items(), key=lambda item: (-item[1], item[0]))
    return tuple(PeakHour(hour=hour, usage_kwh=usage) for hour, usage in ranked[:PEAK_HOURS_LIMIT])


def bands_for(category: Category) -> EfficiencyBands:
    """Efficiency bands for a category.

    Industry uses the caller-supplied bands for its sub-type and falls back
    to the SME bands when none were given.
    """
    if isinstance(category, Household):
        return HOUSEHOLD_BANDS
    if isinstance(category, SME):
        return SME_BANDS
    if isinstance(category, Industry) and category.bands is not None:
        return category.bands
    return SME_BANDS


def efficiency_score(weekly_average_kwh: float, category: Category) -> int:
    """Coarse 0-100 efficiency band for a weekly average."""
    return bands_for(category).score_for(weekly_average_kwh)


def classify_cost_trend(today_cost: float, previous_cost: float | None) -> str:
    """Classify cost movement with a +/-10% hysteresis band."""
    if previous_cost is None:
        return "stable"
    if today_cost > previous_cost * TREND_UPPER:
        return "up"
    if today_cost < previous_cost * TREND_LOWER:
        return "down"
    return "stable"


def hourly_pattern(readings: list[MeterReading], reference: datetime) -> tuple[HourlyUsage, ...]:
    """Average usage and cost per reading for each hour that has readings."""
    buckets: dict[int, list[float]] = {}
    for r in readings:
        hour = to_local(r.timestamp, reference).hour
        usage, cost, count = buckets.get(hour, [0.0, 0.0, 0])
        buckets[hour] = [usage + r.kwh_consumed, cost + r.total_cost, count + 1]

    return tuple(
        HourlyUsage(hour=hour, usage_kwh=usage / count, cost=cost / count)
        for hour, (usage, cost, count) in sorted(buckets.items())
    )


def weekly_trend(readings: list[MeterReading], reference: datetime) -> tuple[WeekdayUsage, ...]:
    """Average usage and cost per reading for each day of the week, Mon..Sun."""
    buckets = [[0.0, 0.0, 0] for _ in DAY_NAMES]
    for r in readings:
        weekday = to_local(r.timestamp, reference).weekday()
        buckets[weekday][0] += r.kwh_consumed
        buckets[weekday][1] += r.total_cost
        buckets[weekday][2] += 1

    return tuple(
        WeekdayUsage(
            day=name,
            usage_kwh=usage / count if count else 0.0,
            cost=cost / count if count else 0.0,
        )
        for name, (usage, cost, count) in zip(DAY_NAMES, buckets)
    )


def aggregate(
    readings: Iterable[MeterReading],
    reference: datetime,
    category: Category | str,
) -> AggregatedStats:
    """Aggregate a reading history as of a reference instant.

    Args:
        readings: Meter readings in any order (not modified)
        reference: The instant treated as "now"; its date is "today"
        category: Subscriber category, or its name

    Returns:
        AggregatedStats; an empty history gives all-zero stats
    """
    if not isinstance(reference, datetime):
        raise ValidationError("reference", f"expected a datetime, got {reference!r}")
    category = resolve_category(category)
    checked = sorted(validate_readings(readings), key=lambda r: to_local(r.timestamp, reference))

    if not checked:
        return AggregatedStats(weekly_trend=weekly_trend([], reference))

    now = to_local(reference, reference)
    today = now.date()
    totals = daily_totals(checked, reference)
    daily_kwh, daily_cost = totals.get(today, (0.0, 0.0))
    average = weekly_average(totals, today)

    previous_days = [day for day in totals if day < today]
    previous_cost = None
    if today in totals and previous_days:
        previous_cost = totals[max(previous_days)][1]

    up_to_now = [r for r in checked if to_local(r.timestamp, reference) <= now]
    current_usage = up_to_now[-1].kwh_consumed if up_to_now else 0.0
    monthly_kwh = sum(
        kwh for day, (kwh, _) in totals.items()
        if day.year == today.year and day.month == today.month and day <= today
    )

    stats = AggregatedStats(
        daily_total_kwh=daily_kwh,
        daily_cost=daily_cost,
        weekly_average_kwh=average,
        efficiency_score=efficiency_score(average, category),
        cost_trend=classify_cost_trend(daily_cost, previous_cost),
        peak_hours=rank_peak_hours(checked, reference),
        current_usage_kwh=current_usage,
        monthly_total_kwh=monthly_kwh,
        hourly_pattern=hourly_pattern(checked, reference),
        weekly_trend=weekly_trend(checked, reference),
    )
    logger.debug(
        "Aggregated %d readings for %s: daily=%.3f kWh weekly_avg=%.3f score=%d trend=%s",
        len(checked),
        today,
        stats.daily_total_kwh,
        stats.weekly_average_kwh,
        stats.efficiency_score,
        stats.cost_trend,
    )
    return stats
