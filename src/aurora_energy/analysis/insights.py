"""Rule-based insights from aggregated usage statistics."""

import logging

from ..models import (
    HOUSEHOLD_BENCHMARK,
    INDUSTRY_BENCHMARKS,
    SEVERITY_ORDER,
    SME_BENCHMARK,
    AggregatedStats,
    Category,
    Household,
    Industry,
    Insight,
    SME,
    UsageBenchmark,
    category_display_name,
    resolve_category,
)

logger = logging.getLogger(__name__)

EFFICIENCY_IMPROVEMENT_BELOW = 85
EFFICIENCY_EXCELLENT_FROM = 90
USAGE_PATTERN_RATIO = 1.2  # weekly average vs today's total
BUDGET_PROJECTION_DAYS = 30

# Habitual peak hours per category; a top hour inside these is worth shifting
HOUSEHOLD_PEAK_HOURS = {18, 19, 20, 21}
SME_PEAK_HOURS = {8, 9, 14, 15, 16}
INDUSTRY_PEAK_HOURS = {
    "heavyduty": {6, 7, 8, 14, 15, 22},
    "medium": {7, 8, 9, 15, 16},
    "light": {8, 9, 14, 15},
}


def habitual_peak_hours(category: Category) -> set[int]:
    """Hours of the day when this kind of subscriber usually peaks."""
    if isinstance(category, Household):
        return HOUSEHOLD_PEAK_HOURS
    if isinstance(category, Industry) and category.industry_type in INDUSTRY_PEAK_HOURS:
        return INDUSTRY_PEAK_HOURS[category.industry_type]
    return SME_PEAK_HOURS


def benchmark_for(category: Category) -> UsageBenchmark:
    """Daily usage range and budget to compare against; untyped industry uses SME."""
    if isinstance(category, Household):
        return HOUSEHOLD_BENCHMARK
    if isinstance(category, Industry) and category.industry_type in INDUSTRY_BENCHMARKS:
        return INDUSTRY_BENCHMARKS[category.industry_type]
    return SME_BENCHMARK


def high_usage_recommendation(category: Category) -> str:
    if isinstance(category, Household):
        return "Check for energy-hungry appliances, improve insulation, and consider LED lighting upgrades."
    if isinstance(category, SME):
        return "Audit office equipment, optimize HVAC schedules, and implement energy-efficient practices."
    if category.industry_type == "heavyduty":
        return "Review machinery efficiency, implement load scheduling, and consider power factor correction."
    return "Optimize production schedules, maintain equipment regularly, and consider energy recovery systems."


def peak_hour_recommendation(category: Category) -> str:
    if isinstance(category, Household):
        return "Shift laundry, dishwashing, and water heating to off-peak hours (10 PM - 6 AM) to save on costs."
    if isinstance(category, SME):
        return "Schedule non-critical operations during off-peak hours and implement flexible work arrangements."
    if category.industry_type == "heavyduty":
        return "Implement load shifting strategies and consider energy storage for peak shaving."
    return "Schedule maintenance and non-critical processes during off-peak hours."


def efficiency_recommendation(category: Category) -> str:
    if isinstance(category, Household):
        return "Upgrade to LED bulbs, use energy-efficient appliances, and improve home insulation."
    if isinstance(category, SME):
        return "Conduct an energy audit, upgrade office equipment, and train staff on energy-saving practices."
    if category.industry_type == "heavyduty":
        return "Implement energy management systems, optimize machinery operation, and consider waste heat recovery."
    return "Regular equipment maintenance, process optimization, and energy-efficient technology upgrades."


def cost_recommendation(category: Category) -> str:
    if isinstance(category, Household):
        return (
            "Use appliances during off-peak hours (10 PM - 6 AM), unplug devices when not in use, "
            "and consider solar water heating."
        )
    if isinstance(category, SME):
        return (
            "Implement time-of-use scheduling, upgrade to energy-efficient equipment, "
            "and consider demand response programs."
        )
    if category.industry_type == "heavyduty":
        return "Negotiate better tariff rates, implement power factor correction, and consider on-site renewable energy."
    return "Optimize production schedules for off-peak hours and implement energy management systems."


def _peak_hour_insight(stats: AggregatedStats, category: Category) -> Insight | None:
    if not stats.peak_hours:
        return None
    top = stats.peak_hours[0]
    habitual = top.hour in habitual_peak_hours(category)
    name = category_display_name(category).lower()
    if habitual:
        description = (
            f"Your highest energy usage occurs at {top.hour:02d}:00 ({top.usage_kwh:.1f} kWh), "
            f"which aligns with typical {name} peak hours. Consider load shifting to reduce costs."
        )
    else:
        description = (
            f"Your highest energy usage occurs at {top.hour:02d}:00 ({top.usage_kwh:.1f} kWh). "
            "Consider shifting some activities to off-peak hours."
        )
    return Insight(
        id="peak-hour",
        severity="warning" if habitual else "info",
        title="Peak Usage Optimization",
        description=description,
        recommendation=peak_hour_recommendation(category),
    )


def _high_usage_insight(stats: AggregatedStats, category: Category) -> Insight | None:
    benchmark = benchmark_for(category)
    if not stats.daily_total_kwh > benchmark.daily_high_kwh:
        return None
    name = category_display_name(category)
    return Insight(
        id="high-usage",
        severity="alert",
        title=f"High {name} Usage",
        description=(
            f"Your daily usage of {stats.daily_total_kwh:.1f} kWh is above the typical "
            f"{name.lower()} range of {benchmark.daily_normal_kwh:g} kWh."
        ),
        recommendation=high_usage_recommendation(category),
    )


def _low_usage_insight(stats: AggregatedStats, category: Category) -> Insight | None:
    if not 0 < stats.daily_total_kwh < benchmark_for(category).daily_low_kwh:
        return None
    name = category_display_name(category)
    return Insight(
        id="low-usage",
        severity="success",
        title=f"Efficient {name} Usage",
        description=(
            f"Your daily usage of {stats.daily_total_kwh:.1f} kWh is below typical "
            f"{name.lower()} usage. Great job!"
        ),
    )


def _high_cost_insight(stats: AggregatedStats, category: Category) -> Insight | None:
    budget = benchmark_for(category).monthly_budget
    projected = stats.daily_cost * BUDGET_PROJECTION_DAYS
    if stats.daily_cost <= 0 or projected <= budget:
        return None
    return Insight(
        id="high-cost",
        severity="warning",
        title="Budget Exceeded",
        description=(
            f"At KSh {stats.daily_cost:,.2f}/day, your monthly cost will be KSh {projected:,.2f}, "
            f"exceeding the typical {category_display_name(category).lower()} budget of KSh {budget:,.0f}."
        ),
        recommendation=cost_recommendation(category),
    )


def _efficiency_insight(stats: AggregatedStats, category: Category) -> Insight | None:
    if not 0 < stats.efficiency_score < EFFICIENCY_IMPROVEMENT_BELOW:
        return None
    return Insight(
        id="efficiency-improvement",
        severity="warning",
        title="Efficiency Improvement Needed",
        description=(
            f"Your efficiency score of {stats.efficiency_score}% is below the "
            f"{EFFICIENCY_IMPROVEMENT_BELOW}% expected for {category_display_name(category).lower()} usage."
        ),
        recommendation=efficiency_recommendation(category),
    )


def _rising_cost_insight(stats: AggregatedStats, category: Category) -> Insight | None:
    if stats.cost_trend != "up" or stats.daily_cost <= 0:
        return None
    return Insight(
        id="rising-cost",
        severity="alert",
        title="Rising Energy Costs",
        description=(
            f"Today's cost of KSh {stats.daily_cost:,.2f} is more than 10% above the previous period. "
            "This may indicate increased usage or equipment inefficiency."
        ),
        recommendation=cost_recommendation(category),
    )


def _falling_cost_insight(stats: AggregatedStats, category: Category) -> Insight | None:
    if stats.cost_trend != "down":
        return None
    return Insight(
        id="cost-trend-down",
        severity="success",
        title="Decreasing Energy Costs",
        description=(
            f"Your {category_display_name(category).lower()} energy costs are trending downward. "
            "Keep up the excellent energy management!"
        ),
    )


def _usage_pattern_insight(stats: AggregatedStats, category: Category) -> Insight | None:
    if not stats.weekly_average_kwh > stats.daily_total_kwh * USAGE_PATTERN_RATIO:
        return None
    return Insight(
        id="usage-pattern",
        severity="warning",
        title="Usage Pattern Optimization",
        description=(
            f"Your weekly average of {stats.weekly_average_kwh:.1f} kWh/day is well above "
            f"today's {stats.daily_total_kwh:.1f} kWh. Some days are much heavier than others."
        ),
        recommendation="Spread energy-intensive tasks across the week to avoid high-usage days.",
    )


def _excellence_insight(stats: AggregatedStats, category: Category) -> Insight | None:
    if stats.efficiency_score < EFFICIENCY_EXCELLENT_FROM:
        return None
    return Insight(
        id="excellent-efficiency",
        severity="success",
        title=f"Excellent {category_display_name(category)} Efficiency",
        description=(
            f"Your efficiency score of {stats.efficiency_score}% is excellent for "
            f"{category_display_name(category).lower()} usage. Keep it up!"
        ),
    )


def _fallback_insight(category: Category) -> Insight:
    name = category_display_name(category)
    return Insight(
        id="building-profile",
        severity="info",
        title="Building Your Energy Profile",
        description=(
            f"We're learning your {name.lower()} usage patterns. "
            "Insights will appear here as more readings come in."
        ),
        recommendation="Keep your meter connected so readings are recorded regularly.",
    )


RULES = [
    _peak_hour_insight,
    _high_usage_insight,
    _low_usage_insight,
    _high_cost_insight,
    _efficiency_insight,
    _rising_cost_insight,
    _falling_cost_insight,
    _usage_pattern_insight,
    _excellence_insight,
]


def generate(
    stats: AggregatedStats,
    category: Category | str,
    industry_type: str | None = None,
) -> list[Insight]:
    """Evaluate every rule against the stats.

    Returns insights ordered alert > warning > success > info; when no rule
    fires a single 'building profile' insight is returned instead.
    """
    category = resolve_category(category, industry_type)

    insights = []
    for rule in RULES:
        insight = rule(stats, category)
        if insight is not None:
            insights.append(insight)

    if not insights:
        insights.append(_fallback_insight(category))

    logger.debug("Generated insights: %s", ", ".join(i.id for i in insights))
    return sorted(insights, key=lambda i: SEVERITY_ORDER[i.severity])
