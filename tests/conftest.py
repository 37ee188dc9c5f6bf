from datetime import datetime

import pytest
from aurora_energy.models import MeterReading, RateSchedule


@pytest.fixture
def schedule():
    """Illustrative schedule used across the billing tests."""
    return RateSchedule(
        energy_rate_per_kwh=25.0,
        fuel_levy_rate_per_kwh=2.0,
        forex_levy_rate_per_kwh=0.5,
        inflation_adjustment_rate_per_kwh=0.3,
        epra_levy_rate_per_kwh=0.1,
        wra_levy_rate_per_kwh=0.05,
        rep_levy_rate_per_kwh=0.08,
        vat_rate=0.16,
    )


@pytest.fixture
def reading():
    """Factory for readings on meter 'M1'."""

    def make(timestamp: datetime, kwh: float, cost: float = 0.0, meter_id: str = "M1") -> MeterReading:
        return MeterReading(timestamp=timestamp, kwh_consumed=kwh, total_cost=cost, meter_id=meter_id)

    return make
