"""Render bills, stats and insights for callers.

The dict forms use the camelCase field names that dashboard and notification
code bind to; renaming a key there is a breaking change.
"""

from ..models import AggregatedStats, BillBreakdown, Insight


def format_kes(amount: float) -> str:
    """Format an amount in Kenyan Shillings, e.g. 'KSh 3,247.80'."""
    return f"KSh {amount:,.2f}"


def format_kwh(kwh: float) -> str:
    """Format an energy amount, e.g. '1,000.0 kWh'."""
    return f"{kwh:,.1f} kWh"


def bill_to_dict(bill: BillBreakdown) -> dict:
    """Full-precision bill breakdown keyed by the public field names."""
    return {
        "energyCharge": bill.energy_charge,
        "energyChargeRate": bill.energy_charge_rate,
        "energyChargeKwh": bill.total_kwh,
        "fuelLevy": bill.fuel_levy,
        "fuelLevyRate": bill.fuel_levy_rate,
        "forexLevy": bill.forex_levy,
        "forexLevyRate": bill.forex_levy_rate,
        "inflationAdjustment": bill.inflation_adjustment,
        "inflationAdjustmentRate": bill.inflation_adjustment_rate,
        "epraLevy": bill.epra_levy,
        "epraLevyRate": bill.epra_levy_rate,
        "wraLevy": bill.wra_levy,
        "wraLevyRate": bill.wra_levy_rate,
        "repLevy": bill.rep_levy,
        "repLevyRate": bill.rep_levy_rate,
        "subtotalBeforeVat": bill.subtotal_before_vat,
        "vatBase": bill.vat_base,
        "vatRate": bill.vat_rate,
        "vatAmount": bill.vat_amount,
        "finalTotal": bill.final_total,
        "totalKwh": bill.total_kwh,
        "costPerKwh": bill.cost_per_kwh,
    }


def stats_to_dict(stats: AggregatedStats) -> dict:
    """Aggregated stats keyed by the public field names."""
    return {
        "dailyTotalKwh": stats.daily_total_kwh,
        "dailyCost": stats.daily_cost,
        "weeklyAverageKwh": stats.weekly_average_kwh,
        "efficiencyScore": stats.efficiency_score,
        "costTrend": stats.cost_trend,
        "peakHours": [{"hour": p.hour, "usageKwh": p.usage_kwh} for p in stats.peak_hours],
        "currentUsageKwh": stats.current_usage_kwh,
        "monthlyTotalKwh": stats.monthly_total_kwh,
        "hourlyPattern": [
            {"hour": h.hour, "usageKwh": h.usage_kwh, "cost": h.cost} for h in stats.hourly_pattern
        ],
        "weeklyTrend": [
            {"day": d.day, "usageKwh": d.usage_kwh, "cost": d.cost} for d in stats.weekly_trend
        ],
    }


def insight_to_dict(insight: Insight) -> dict:
    data = {
        "id": insight.id,
        "severity": insight.severity,
        "title": insight.title,
        "description": insight.description,
    }
    if insight.recommendation is not None:
        data["recommendation"] = insight.recommendation
    return data


def format_bill_text(bill: BillBreakdown) -> str:
    """Format a bill breakdown as human-readable text."""
    lines = [
        f"Electricity Bill for {format_kwh(bill.total_kwh)}",
        "",
        "1. Energy Charge",
        f"   {bill.total_kwh:g} x {bill.energy_charge_rate:.2f} = {format_kes(bill.energy_charge)}",
        "",
        "2. Levies & Adjustments",
    ]
    for label, amount, rate in [
        ("Fuel Levy", bill.fuel_levy, bill.fuel_levy_rate),
        ("Forex Levy", bill.forex_levy, bill.forex_levy_rate),
        ("Inflation Adjustment", bill.inflation_adjustment, bill.inflation_adjustment_rate),
        ("EPRA Levy", bill.epra_levy, bill.epra_levy_rate),
        ("WRA Levy", bill.wra_levy, bill.wra_levy_rate),
        ("REP Levy", bill.rep_levy, bill.rep_levy_rate),
    ]:
        lines.append(f"   {label}: {bill.total_kwh:g} x {rate:.2f} = {format_kes(amount)}")

    lines.extend([
        f"   Subtotal (before VAT): {format_kes(bill.subtotal_before_vat)}",
        "",
        "3. VAT",
        f"   VAT base: {format_kes(bill.vat_base)}",
        f"   VAT ({bill.vat_rate * 100:.0f}%): {format_kes(bill.vat_amount)}",
        "",
        f"Total: {format_kes(bill.final_total)}",
        f"Cost per kWh: {format_kes(bill.cost_per_kwh)}",
    ])
    return "\n".join(lines)


def format_stats_text(stats: AggregatedStats) -> str:
    """Format aggregated stats as human-readable text."""
    lines = [
        "Usage Summary",
        f"- Today: {format_kwh(stats.daily_total_kwh)} ({format_kes(stats.daily_cost)})",
        f"- Weekly average: {format_kwh(stats.weekly_average_kwh)}/day",
        f"- This month: {format_kwh(stats.monthly_total_kwh)}",
        f"- Efficiency score: {stats.efficiency_score}%",
        f"- Cost trend: {stats.cost_trend}",
    ]

    if stats.peak_hours:
        peaks = ", ".join(f"{p.hour:02d}:00 ({format_kwh(p.usage_kwh)})" for p in stats.peak_hours)
        lines.append(f"- Peak hours: {peaks}")
    else:
        lines.append("- Peak hours: No data")

    return "\n".join(lines)


def format_insights_text(insights: list[Insight]) -> str:
    """Format insights as a bulleted list."""
    lines = []
    for insight in insights:
        lines.append(f"[{insight.severity.upper()}] {insight.title}")
        lines.append(f"  {insight.description}")
        if insight.recommendation:
            lines.append(f"  -> {insight.recommendation}")
    return "\n".join(lines)
