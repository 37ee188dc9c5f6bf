"""Tests for bill, stats and insight rendering."""

from aurora_energy.analysis.summary import (
    bill_to_dict,
    format_bill_text,
    format_insights_text,
    format_kes,
    format_kwh,
    format_stats_text,
    insight_to_dict,
    stats_to_dict,
)
from aurora_energy.models import AggregatedStats, Insight, PeakHour
from aurora_energy.tariffs import compute_bill


def test_formatters():
    assert format_kes(3247.8) == "KSh 3,247.80"
    assert format_kes(0) == "KSh 0.00"
    assert format_kwh(1000) == "1,000.0 kWh"


def test_bill_to_dict_keys(schedule):
    data = bill_to_dict(compute_bill(100, schedule))

    for key in (
        "energyCharge", "fuelLevy", "forexLevy", "inflationAdjustment", "epraLevy",
        "wraLevy", "repLevy", "subtotalBeforeVat", "vatBase", "vatAmount",
        "finalTotal", "costPerKwh",
    ):
        assert key in data
    assert data["energyChargeRate"] == 25.0
    assert data["totalKwh"] == 100
    # Full precision, no rounding
    assert abs(data["costPerKwh"] - 32.478) < 1e-9


def test_stats_to_dict():
    stats = AggregatedStats(efficiency_score=87, peak_hours=(PeakHour(hour=19, usage_kwh=4.2),))

    data = stats_to_dict(stats)

    assert data["efficiencyScore"] == 87
    assert data["costTrend"] == "stable"
    assert data["peakHours"] == [{"hour": 19, "usageKwh": 4.2}]
    assert data["weeklyTrend"] == []


def test_insight_to_dict_omits_missing_recommendation():
    insight = Insight(id="x", severity="info", title="T", description="D")

    assert insight_to_dict(insight) == {"id": "x", "severity": "info", "title": "T", "description": "D"}

    with_rec = Insight(id="x", severity="info", title="T", description="D", recommendation="R")
    assert insight_to_dict(with_rec)["recommendation"] == "R"


def test_format_bill_text(schedule):
    text = format_bill_text(compute_bill(100, schedule))

    assert "Electricity Bill for 100.0 kWh" in text
    assert "VAT base: KSh 2,780.00" in text
    assert "VAT (16%): KSh 444.80" in text
    assert "Total: KSh 3,247.80" in text


def test_format_stats_text():
    assert "Peak hours: No data" in format_stats_text(AggregatedStats())

    text = format_stats_text(AggregatedStats(peak_hours=(PeakHour(hour=7, usage_kwh=3.0),)))
    assert "07:00 (3.0 kWh)" in text


def test_format_insights_text():
    text = format_insights_text([
        Insight(id="a", severity="alert", title="Rising", description="Up", recommendation="Do less"),
    ])

    assert text.splitlines() == ["[ALERT] Rising", "  Up", "  -> Do less"]
