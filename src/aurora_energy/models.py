"""Data models for meter readings, tariffs, bills and insights."""

import math
from dataclasses import dataclass
from datetime import datetime

SEVERITY_ORDER = {"alert": 0, "warning": 1, "success": 2, "info": 3}
COST_TRENDS = ("up", "down", "stable")
INDUSTRY_TYPES = ("heavyduty", "medium", "light")


class ValidationError(ValueError):
    """Raised when an input field is out of range or malformed."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


@dataclass(frozen=True)
class MeterReading:
    """A single timestamped meter observation."""

    timestamp: datetime
    kwh_consumed: float
    total_cost: float
    meter_id: str


@dataclass(frozen=True)
class RateSchedule:
    """Regulator/provider tariff configuration, all rates per kWh."""

    energy_rate_per_kwh: float
    fuel_levy_rate_per_kwh: float
    forex_levy_rate_per_kwh: float
    inflation_adjustment_rate_per_kwh: float
    epra_levy_rate_per_kwh: float
    wra_levy_rate_per_kwh: float
    rep_levy_rate_per_kwh: float
    vat_rate: float  # fraction, e.g. 0.16


@dataclass(frozen=True)
class BillBreakdown:
    """Itemized bill for one billing period."""

    total_kwh: float

    energy_charge: float
    energy_charge_rate: float

    # Levies & adjustments
    fuel_levy: float
    fuel_levy_rate: float
    forex_levy: float
    forex_levy_rate: float
    inflation_adjustment: float
    inflation_adjustment_rate: float
    epra_levy: float
    epra_levy_rate: float
    wra_levy: float
    wra_levy_rate: float
    rep_levy: float
    rep_levy_rate: float

    subtotal_before_vat: float

    vat_base: float
    vat_rate: float
    vat_amount: float

    final_total: float
    cost_per_kwh: float


@dataclass(frozen=True)
class EfficiencyBands:
    """Step function from weekly average kWh to an efficiency score.

    Steps are (upper_limit_kwh, score) pairs in ascending limit order; the
    first limit strictly greater than the average wins, else `fallback`.
    """

    steps: tuple[tuple[float, int], ...]
    fallback: int

    def __post_init__(self):
        limits = [limit for limit, _ in self.steps]
        for limit in limits:
            if not math.isfinite(limit) or limit < 0:
                raise ValidationError("steps", f"limit must be a finite number >= 0, got {limit!r}")
        if limits != sorted(limits):
            raise ValidationError("steps", "limits must be in ascending order")
        for _, score in self.steps:
            if not 0 <= score <= 100:
                raise ValidationError("steps", f"score must be within [0, 100], got {score!r}")
        if not 0 <= self.fallback <= 100:
            raise ValidationError("fallback", f"score must be within [0, 100], got {self.fallback!r}")

    def score_for(self, weekly_average_kwh: float) -> int:
        for limit, score in self.steps:
            if weekly_average_kwh < limit:
                return score
        return self.fallback


HOUSEHOLD_BANDS = EfficiencyBands(steps=((10.0, 95), (20.0, 87)), fallback=75)
SME_BANDS = EfficiencyBands(steps=((50.0, 90), (100.0, 80)), fallback=70)


@dataclass(frozen=True)
class UsageBenchmark:
    """Typical daily usage range and monthly budget for a kind of subscriber."""

    daily_low_kwh: float
    daily_normal_kwh: float
    daily_high_kwh: float
    monthly_budget: float  # KSh


HOUSEHOLD_BENCHMARK = UsageBenchmark(daily_low_kwh=5, daily_normal_kwh=15, daily_high_kwh=25, monthly_budget=3000)
SME_BENCHMARK = UsageBenchmark(daily_low_kwh=20, daily_normal_kwh=50, daily_high_kwh=100, monthly_budget=15000)
INDUSTRY_BENCHMARKS = {
    "heavyduty": UsageBenchmark(daily_low_kwh=200, daily_normal_kwh=500, daily_high_kwh=1000, monthly_budget=150000),
    "medium": UsageBenchmark(daily_low_kwh=100, daily_normal_kwh=250, daily_high_kwh=500, monthly_budget=75000),
    "light": UsageBenchmark(daily_low_kwh=50, daily_normal_kwh=120, daily_high_kwh=250, monthly_budget=37500),
}


@dataclass(frozen=True)
class Household:
    name = "household"


@dataclass(frozen=True)
class SME:
    name = "SME"


@dataclass(frozen=True)
class Industry:
    """Industrial subscriber; bands are supplied per industry sub-type."""

    industry_type: str | None = None
    bands: EfficiencyBands | None = None
    name = "industry"


Category = Household | SME | Industry


def resolve_category(value: "Category | str", industry_type: str | None = None) -> Category:
    """Turn a category name (or an existing category) into a Category value."""
    if isinstance(value, Industry):
        _check_industry_type(value.industry_type)
        if industry_type and value.industry_type is None:
            _check_industry_type(industry_type)
            return Industry(industry_type=industry_type, bands=value.bands)
        return value
    if isinstance(value, (Household, SME)):
        return value

    if not isinstance(value, str):
        raise ValidationError("category", f"expected a category name, got {value!r}")

    key = value.strip().lower()
    if key == "household":
        return Household()
    if key == "sme":
        return SME()
    if key == "industry":
        _check_industry_type(industry_type)
        return Industry(industry_type=industry_type)
    raise ValidationError("category", f"must be household, SME or industry, got {value!r}")


def _check_industry_type(industry_type: str | None) -> None:
    if industry_type is not None and industry_type not in INDUSTRY_TYPES:
        raise ValidationError(
            "industry_type", f"must be one of {', '.join(INDUSTRY_TYPES)}, got {industry_type!r}"
        )


def category_display_name(category: Category) -> str:
    """Human-readable category label, e.g. 'Heavyduty Industry'."""
    if isinstance(category, Industry):
        if category.industry_type:
            return f"{category.industry_type.capitalize()} Industry"
        return "Industry"
    if isinstance(category, SME):
        return "SME"
    return "Household"


@dataclass(frozen=True)
class PeakHour:
    """Summed usage for one hour-of-day bucket."""

    hour: int  # 0-23
    usage_kwh: float


@dataclass(frozen=True)
class HourlyUsage:
    """Average usage and cost per reading for one hour of the day."""

    hour: int
    usage_kwh: float
    cost: float


@dataclass(frozen=True)
class WeekdayUsage:
    """Average usage and cost per reading for one day of the week."""

    day: str  # 'Mon'..'Sun'
    usage_kwh: float
    cost: float


@dataclass(frozen=True)
class AggregatedStats:
    """Usage statistics over a reading window."""

    daily_total_kwh: float = 0.0
    daily_cost: float = 0.0
    weekly_average_kwh: float = 0.0
    efficiency_score: int = 0
    cost_trend: str = "stable"  # 'up', 'down' or 'stable'
    peak_hours: tuple[PeakHour, ...] = ()

    current_usage_kwh: float = 0.0
    monthly_total_kwh: float = 0.0
    hourly_pattern: tuple[HourlyUsage, ...] = ()
    weekly_trend: tuple[WeekdayUsage, ...] = ()


@dataclass(frozen=True)
class Insight:
    """An actionable observation derived from aggregated stats."""

    id: str
    severity: str  # 'alert', 'warning', 'success' or 'info'
    title: str
    description: str
    recommendation: str | None = None
