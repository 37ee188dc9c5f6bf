"""Tariff validation and itemized bill calculation.

Bills follow the Kenya Power tariff structure: an energy charge plus six
per-kWh levies, with VAT applied to the energy charge and the fuel, forex and
inflation adjustments only. EPRA, WRA and REP levies are outside the VAT base.
"""

import logging
import math
from dataclasses import fields

from .models import BillBreakdown, RateSchedule, ValidationError

logger = logging.getLogger(__name__)


def _check_amount(name: str, value: float) -> None:
    """Reject non-numeric, non-finite or negative amounts."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(name, f"expected a number, got {value!r}")
    if not math.isfinite(value):
        raise ValidationError(name, f"must be finite, got {value!r}")
    if value < 0:
        raise ValidationError(name, f"must be >= 0, got {value!r}")


def validate_schedule(schedule: RateSchedule) -> None:
    """Check every rate is >= 0 and the VAT rate is a fraction in [0, 1]."""
    for f in fields(schedule):
        _check_amount(f"schedule.{f.name}", getattr(schedule, f.name))
    if schedule.vat_rate > 1:
        raise ValidationError("schedule.vat_rate", f"must be within [0, 1], got {schedule.vat_rate!r}")


def compute_bill(
    monthly_kwh: float,
    schedule: RateSchedule,
    is_solar_or_self_generated: bool = False,
) -> BillBreakdown:
    """Calculate an itemized bill for a month's consumption.

    Args:
        monthly_kwh: Total kWh consumed in the billing period
        schedule: Rates to apply
        is_solar_or_self_generated: Solar/self-generated supply carries no
            levies and no VAT

    Returns:
        BillBreakdown with full-precision amounts (rounding is left to the caller)
    """
    _check_amount("monthly_kwh", monthly_kwh)
    validate_schedule(schedule)

    energy_charge = monthly_kwh * schedule.energy_rate_per_kwh

    if is_solar_or_self_generated:
        logger.debug("Solar bill for %s kWh: %s", monthly_kwh, energy_charge)
        return BillBreakdown(
            total_kwh=monthly_kwh,
            energy_charge=energy_charge,
            energy_charge_rate=schedule.energy_rate_per_kwh,
            fuel_levy=0.0,
            fuel_levy_rate=0.0,
            forex_levy=0.0,
            forex_levy_rate=0.0,
            inflation_adjustment=0.0,
            inflation_adjustment_rate=0.0,
            epra_levy=0.0,
            epra_levy_rate=0.0,
            wra_levy=0.0,
            wra_levy_rate=0.0,
            rep_levy=0.0,
            rep_levy_rate=0.0,
            subtotal_before_vat=energy_charge,
            vat_base=energy_charge,
            vat_rate=0.0,
            vat_amount=0.0,
            final_total=energy_charge,
            cost_per_kwh=energy_charge / monthly_kwh if monthly_kwh > 0 else 0.0,
        )

    fuel_levy = monthly_kwh * schedule.fuel_levy_rate_per_kwh
    forex_levy = monthly_kwh * schedule.forex_levy_rate_per_kwh
    inflation_adjustment = monthly_kwh * schedule.inflation_adjustment_rate_per_kwh
    epra_levy = monthly_kwh * schedule.epra_levy_rate_per_kwh
    wra_levy = monthly_kwh * schedule.wra_levy_rate_per_kwh
    rep_levy = monthly_kwh * schedule.rep_levy_rate_per_kwh

    subtotal_before_vat = (
        energy_charge + fuel_levy + forex_levy + inflation_adjustment + epra_levy + wra_levy + rep_levy
    )

    # Statutory levies (EPRA, WRA, REP) are not taxed
    vat_base = energy_charge + fuel_levy + forex_levy + inflation_adjustment
    vat_amount = vat_base * schedule.vat_rate

    final_total = subtotal_before_vat + vat_amount
    cost_per_kwh = final_total / monthly_kwh if monthly_kwh > 0 else 0.0

    logger.debug(
        "Bill for %s kWh: subtotal=%s vat=%s total=%s",
        monthly_kwh,
        subtotal_before_vat,
        vat_amount,
        final_total,
    )

    return BillBreakdown(
        total_kwh=monthly_kwh,
        energy_charge=energy_charge,
        energy_charge_rate=schedule.energy_rate_per_kwh,
        fuel_levy=fuel_levy,
        fuel_levy_rate=schedule.fuel_levy_rate_per_kwh,
        forex_levy=forex_levy,
        forex_levy_rate=schedule.forex_levy_rate_per_kwh,
        inflation_adjustment=inflation_adjustment,
        inflation_adjustment_rate=schedule.inflation_adjustment_rate_per_kwh,
        epra_levy=epra_levy,
        epra_levy_rate=schedule.epra_levy_rate_per_kwh,
        wra_levy=wra_levy,
        wra_levy_rate=schedule.wra_levy_rate_per_kwh,
        rep_levy=rep_levy,
        rep_levy_rate=schedule.rep_levy_rate_per_kwh,
        subtotal_before_vat=subtotal_before_vat,
        vat_base=vat_base,
        vat_rate=schedule.vat_rate,
        vat_amount=vat_amount,
        final_total=final_total,
        cost_per_kwh=cost_per_kwh,
    )


def estimate_monthly_bill(
    daily_kwh: float,
    schedule: RateSchedule,
    billing_days: int = 30,
    is_solar_or_self_generated: bool = False,
) -> BillBreakdown:
    """Project a bill from average daily usage over a billing period."""
    _check_amount("daily_kwh", daily_kwh)
    if isinstance(billing_days, bool) or not isinstance(billing_days, int) or billing_days < 1:
        raise ValidationError("billing_days", f"must be a positive integer, got {billing_days!r}")

    return compute_bill(daily_kwh * billing_days, schedule, is_solar_or_self_generated)
