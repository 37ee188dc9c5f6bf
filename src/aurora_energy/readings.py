"""Meter reading CSV importer.

Reads reading-history exports from the dashboard.
CSV format: timestamp, kwh_consumed, total_cost, meter_id
"""

import csv
from datetime import datetime
from pathlib import Path

from .models import MeterReading, ValidationError

COLUMNS = ("timestamp", "kwh_consumed", "total_cost", "meter_id")


def parse_row(row: dict, line: int) -> MeterReading:
    """Convert one CSV row into a MeterReading."""
    for column in COLUMNS:
        if not row.get(column):
            raise ValidationError(f"row {line}: {column}", "missing value")
    raw = row["timestamp"].strip()
    # fromisoformat only accepts a 'Z' suffix from Python 3.11
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    try:
        timestamp = datetime.fromisoformat(raw)
    except ValueError as e:
        raise ValidationError(f"row {line}: timestamp", str(e)) from e

    amounts = {}
    for column in ("kwh_consumed", "total_cost"):
        try:
            amounts[column] = float(row[column])
        except ValueError as e:
            raise ValidationError(f"row {line}: {column}", f"not a number: {row[column]!r}") from e

    return MeterReading(
        timestamp=timestamp,
        kwh_consumed=amounts["kwh_consumed"],
        total_cost=amounts["total_cost"],
        meter_id=row["meter_id"],
    )


def parse_csv(csv_path: Path, meter_id: str | None = None) -> list[MeterReading]:
    """Parse a reading export, optionally keeping a single meter."""
    readings = []
    with open(csv_path, newline="") as f:
        reader = csv.DictReader(f)
        # Header is line 1
        for line, row in enumerate(reader, start=2):
            reading = parse_row(row, line)
            if meter_id is None or reading.meter_id == meter_id:
                readings.append(reading)
    return readings
